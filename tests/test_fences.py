import pytest

from markdown_to_pdf.fences import (
    FencePair,
    FencePosition,
    PLACEHOLDER,
    pair_fences,
    protect_nested_codeblocks,
    restore_nested_codeblocks,
    scan_fences,
    substitute_inner_fences,
)

NESTED_DOC = "\n".join([
    "````",
    "outer text",
    "```",
    "inner fenced block",
    "```",
    "more outer text",
    "````",
])


def _pairs(text):
    lines = text.split("\n")
    return pair_fences(lines, scan_fences(lines))


def test_scan_records_count_and_indent():
    lines = ["intro", "```js", "code", "  ````", "```"]
    assert scan_fences(lines) == [
        FencePosition(1, 3, 0),
        FencePosition(3, 4, 2),
        FencePosition(4, 3, 0),
    ]


def test_scan_ignores_short_runs_and_inline_backticks():
    lines = ["``", "text with ``` inside", "`single`", "x```"]
    assert scan_fences(lines) == []


def test_scan_counts_only_leading_run():
    assert scan_fences(["```js ```"]) == [FencePosition(0, 3, 0)]


def test_simple_block_is_paired():
    assert _pairs("```python\nprint(1)\n```") == [FencePair(0, 2)]


def test_consecutive_blocks_are_paired_separately():
    doc = "```\na\n```\ntext\n```\nb\n```"
    assert _pairs(doc) == [FencePair(0, 2), FencePair(4, 6)]


def test_outer_quad_fence_spans_whole_block():
    pairs = _pairs(NESTED_DOC)
    assert FencePair(0, 6) in pairs
    assert [p for p in pairs if p.start_line == 0] == [FencePair(0, 6)]


def test_fence_with_language_tag_never_closes():
    doc = "```\ncode\n```js\n"
    assert _pairs(doc) == []


def test_unclosed_fence_produces_no_pair():
    assert _pairs("````\ntext\n```") == []
    assert _pairs("```\nnever closed") == []


def test_closing_fence_must_not_be_indented_deeper():
    assert _pairs("  ```\ncode\n    ```") == []
    assert _pairs("  ```\ncode\n```") == [FencePair(0, 2)]


def test_match_discards_fences_opened_after_it():
    doc = "````\n```js\nstuff\n````\n```"
    # ```js is abandoned when the quad fence closes, the final ``` opens anew
    assert _pairs(doc) == [FencePair(0, 3)]


def test_substitution_only_touches_interior_lines():
    lines = NESTED_DOC.split("\n")
    result = substitute_inner_fences(lines, _pairs(NESTED_DOC)).split("\n")
    assert result[0] == "````"
    assert result[6] == "````"
    assert result[2] == PLACEHOLDER
    assert result[4] == PLACEHOLDER
    assert len(result) == len(lines)


def test_equal_length_fence_used_as_content_is_substituted():
    doc = "```\nuse ```js to start a block\n```"
    protected = protect_nested_codeblocks(doc)
    assert protected.split("\n")[1] == f"use {PLACEHOLDER}js to start a block"


def test_text_outside_blocks_is_untouched():
    doc = "inline ``` here\n```\ncode\n```\nafter ``` too"
    protected = protect_nested_codeblocks(doc).split("\n")
    assert protected[0] == "inline ``` here"
    assert protected[4] == "after ``` too"


@pytest.mark.parametrize("doc", [
    "```python\nprint(\"```\")\n```",
    "# Title\n\n```\na\n```\n\n```js\nconst s = '```';\n```\n",
    NESTED_DOC,
    "no fences at all",
])
def test_round_trip_with_identity_render(doc):
    assert restore_nested_codeblocks(protect_nested_codeblocks(doc)) == doc


def test_restore_bare_placeholder():
    assert restore_nested_codeblocks(f"a {PLACEHOLDER} b") == "a ``` b"


def test_restore_emphasis_split_token():
    html = "__<em>_NESTED_</em>CODEBLOCK<em>_DELIMITER_</em>__python"
    assert restore_nested_codeblocks(html) == "```python"


def test_restore_strong_wrapped_token():
    html = "<strong>__<em>_NESTED_</em>CODEBLOCK<em>_DELIMITER_</em>__</strong>"
    assert restore_nested_codeblocks(html) == "```"


def test_restore_highlighter_spans():
    html = (
        '<span class="hljs-strong">__<span class="hljs-emphasis">_NESTED_</span>CODEBLOCK'
        '<span class="hljs-emphasis">_DELIMITER_</span>__</span>\ncode'
    )
    assert restore_nested_codeblocks(html) == "```\ncode"


def test_restore_fallback_tag_with_leftover_underscore():
    html = '<span class="gs">___NESTED_CODEBLOCK_DELIMITER__</span>_\nnext'
    assert restore_nested_codeblocks(html) == "```\nnext"


def test_restore_fallback_keeps_language_tag_after_token():
    html = '<span class="gs">___NESTED_CODEBLOCK_DELIMITER__</span>_python\nprint(1)'
    assert restore_nested_codeblocks(html) == "```python\nprint(1)"


def test_restore_renderer_emphasis():
    assert restore_nested_codeblocks("<em><strong>NESTED_CODEBLOCK_DELIMITER</strong></em>") == "```"


def test_restore_is_idempotent():
    html = f"<pre><code>{PLACEHOLDER}\nx\n<strong>__<em>_NESTED_</em>CODEBLOCK<em>_DELIMITER_</em>__</strong></code></pre>"
    once = restore_nested_codeblocks(html)
    assert "NESTED" not in once
    assert restore_nested_codeblocks(once) == once
