"""
Table of contents expansion and heading identifiers.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import re
from typing import Dict, List, NamedTuple

from .fences import protect_nested_codeblocks

TOC_MARKER = "[TOC]"

# Token types whose source lines are literal code
_CODE_TOKENS = ("fence", "code_block")
# Hiragana, Katakana, CJK ideographs and Hangul survive slugification
_SLUG_STRIP = re.compile(r'[^a-z0-9\s\-\u3040-\u309f\u30a0-\u30ff\u4e00-\u9fff\uac00-\ud7af]')


class Heading(NamedTuple):
    level: int
    text: str
    anchor: str


def slugify(text: str) -> str:
    """Build an anchor id from heading text."""
    slug = _SLUG_STRIP.sub('', text.lower())
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-{2,}', '-', slug)
    return slug.strip('-')


class HeadingIdAllocator:
    """Hands out unique heading ids in document order.

    Used by the renderer's heading-id rule. The TOC reads the ids back from
    the parsed tokens, so both sides agree on every anchor, including the
    positional fallback for headings whose text leaves nothing after
    slugification.
    """

    def __init__(self):
        self._seen: Dict[str, int] = {}
        self._position = 0

    def allocate(self, text: str) -> str:
        slug = slugify(text) or f"heading-{self._position}"
        self._position += 1

        if slug not in self._seen:
            self._seen[slug] = 0
            return slug

        while True:
            self._seen[slug] += 1
            candidate = f"{slug}-{self._seen[slug]}"
            if candidate not in self._seen:
                self._seen[candidate] = 0
                return candidate


def code_line_mask(tokens, line_count: int) -> List[bool]:
    """Flag every source line that belongs to a fenced or indented code block."""
    in_code = [False] * line_count
    for token in tokens:
        if token.type not in _CODE_TOKENS or not token.map:
            continue
        start, end = token.map
        for index in range(start, min(end, line_count)):
            in_code[index] = True
    return in_code


def collect_headings(tokens) -> List[Heading]:
    """Collect headings, with their ids, from parsed markdown-it tokens."""
    headings = []
    for index, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        text = ' '.join(tokens[index + 1].content.split())
        headings.append(Heading(int(token.tag[1]), text, token.attrGet("id")))
    return headings


def build_toc(headings: List[Heading]) -> str:
    """Render headings below level 1 as a nested markdown bullet list."""
    entries = [h for h in headings if h.level > 1]
    if not entries:
        return ''

    base_level = min(h.level for h in entries)
    items = []
    depth = 0
    for heading in entries:
        # Never skip a nesting level, or the list would turn into a code block
        depth = min(heading.level - base_level, depth + 1) if items else 0
        items.append(f"{'  ' * depth}- [{heading.text}](#{heading.anchor})")

    return '\n'.join(['<div class="toc">', ''] + items + ['', '</div>', ''])


def expand_toc(markdown_text: str, parser) -> str:
    """Replace [TOC] marker lines outside code blocks with the table of contents.

    ``parser`` is the MarkdownIt instance that renders the document. Parsing
    with it yields exactly the headings, and the ids, the rendered HTML gets.
    """
    lines = markdown_text.split('\n')
    if not any(line.strip() == TOC_MARKER for line in lines):
        return markdown_text

    tokens = parser.parse(protect_nested_codeblocks(markdown_text))
    in_code = code_line_mask(tokens, len(lines))
    markers = {i for i, line in enumerate(lines) if line.strip() == TOC_MARKER and not in_code[i]}
    if not markers:
        return markdown_text

    toc = build_toc(collect_headings(tokens))
    return '\n'.join(toc if i in markers else line for i, line in enumerate(lines))
