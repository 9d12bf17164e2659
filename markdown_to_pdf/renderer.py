"""
Markdown to HTML rendering with markdown-it-py and Pygments highlighting.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

from markdown_it import MarkdownIt
from mdit_py_plugins.tasklists import tasklists_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .toc import HeadingIdAllocator

_FORMATTER = HtmlFormatter(nowrap=True)


def highlight_code(code: str, lang: str, attrs=None) -> str:
    """Highlight a fenced code block.

    Returns an empty string for unknown languages so markdown-it escapes the
    code as plain text.
    """
    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return ""
    return highlight(code, lexer, _FORMATTER)


def _assign_heading_ids(state) -> None:
    """Core rule giving every heading a unique id the TOC can link to."""
    allocator = HeadingIdAllocator()
    tokens = state.tokens
    for index, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        inline = tokens[index + 1]
        token.attrSet("id", allocator.allocate(inline.content))


def build_markdown_parser() -> MarkdownIt:
    """GitHub flavoured parser with line breaks and code highlighting."""
    md = MarkdownIt(
        "gfm-like",
        {
            "breaks": True,
            "langPrefix": "hljs language-",
            "highlight": highlight_code,
        },
    )
    md.use(tasklists_plugin)
    md.core.ruler.push("heading_ids", _assign_heading_ids)
    return md


class MarkdownRenderer:
    """Thin wrapper so a converter owns one configured parser."""

    def __init__(self):
        self._md = build_markdown_parser()

    @property
    def parser(self) -> MarkdownIt:
        return self._md

    def render(self, markdown_text: str) -> str:
        return self._md.render(markdown_text)
