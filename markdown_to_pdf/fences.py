"""
Nested code block protection for the markdown renderer.

Fence lines that live inside another code block are swapped for a placeholder
before rendering so the renderer only sees the outer delimiters, then swapped
back in the generated HTML.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import re
from dataclasses import dataclass
from typing import List

PLACEHOLDER = "___NESTED_CODEBLOCK_DELIMITER___"
FENCE = "```"


@dataclass(frozen=True)
class FencePosition:
    """A line whose trimmed text starts with a run of three or more backticks."""

    line_index: int
    backtick_count: int
    indent: int


@dataclass(frozen=True)
class FencePair:
    """Opening and closing fence lines of one code block."""

    start_line: int
    end_line: int

    def contains(self, line_index: int) -> bool:
        """True if the line lies strictly between the two delimiters."""
        return self.start_line < line_index < self.end_line


def _leading_backticks(stripped: str) -> int:
    count = 0
    for char in stripped:
        if char != '`':
            break
        count += 1
    return count


def scan_fences(lines: List[str]) -> List[FencePosition]:
    """Find every fence-like line, in document order."""
    positions = []
    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped.startswith(FENCE):
            continue
        count = _leading_backticks(stripped)
        indent = len(line) - len(line.lstrip())
        positions.append(FencePosition(index, count, indent))
    return positions


def pair_fences(lines: List[str], positions: List[FencePosition]) -> List[FencePair]:
    """Match opening and closing fences with a stack.

    A fence closes the most recent pending fence with the same backtick count
    and an equal or deeper indent, but only when the line holds nothing except
    the backticks. Anything opened after the matched fence is abandoned.
    Fences still pending at the end of the document produce no pair.
    """
    pairs = []
    stack: List[FencePosition] = []

    for position in positions:
        if not stack:
            stack.append(position)
            continue

        stripped = lines[position.line_index].strip()
        is_bare = stripped == '`' * position.backtick_count
        match_at = None
        if is_bare:
            for depth in range(len(stack) - 1, -1, -1):
                pending = stack[depth]
                if (pending.backtick_count == position.backtick_count
                        and position.indent <= pending.indent):
                    match_at = depth
                    break

        if match_at is None:
            stack.append(position)
        else:
            pairs.append(FencePair(stack[match_at].line_index, position.line_index))
            del stack[match_at:]

    return pairs


def substitute_inner_fences(lines: List[str], pairs: List[FencePair]) -> str:
    """Replace triple backticks on lines strictly inside a code block."""
    interior = [False] * len(lines)
    for pair in pairs:
        for index in range(pair.start_line + 1, min(pair.end_line, len(lines))):
            interior[index] = True

    result = []
    for index, line in enumerate(lines):
        if interior[index] and FENCE in line:
            result.append(line.replace(FENCE, PLACEHOLDER))
        else:
            result.append(line)
    return '\n'.join(result)


def protect_nested_codeblocks(markdown_text: str) -> str:
    """Scan, pair and substitute in one pass over the document."""
    lines = markdown_text.split('\n')
    pairs = pair_fences(lines, scan_fences(lines))
    return substitute_inner_fences(lines, pairs)


# Inline tags the renderer or the highlighter may wrap around parts of the token.
_EMPHASIS_OPEN = r'<(?:em|i|span)(?:\s[^>]*)?>'
_EMPHASIS_CLOSE = r'</(?:em|i|span)>'
_STRONG_OPEN = r'<(?:strong|b|span)(?:\s[^>]*)?>'
_STRONG_CLOSE = r'</(?:strong|b|span)>'

_SPLIT_TOKEN = (
    '(?:__)?' + _EMPHASIS_OPEN + '_NESTED_' + _EMPHASIS_CLOSE
    + 'CODEBLOCK'
    + _EMPHASIS_OPEN + '_DELIMITER_' + _EMPHASIS_CLOSE + '(?:__)?'
)

_RESTORE_PATTERNS = [
    # __<em>_NESTED_</em>CODEBLOCK<em>_DELIMITER_</em>__ inside a strong span
    re.compile(_STRONG_OPEN + _SPLIT_TOKEN + _STRONG_CLOSE),
    re.compile(_SPLIT_TOKEN),
    # <span class="...">___NESTED_CODEBLOCK_DELIMITER__</span>_
    # Only leftover underscores are consumed, so a language tag or code after the fence survives
    re.compile(r'<(em|strong|span|i|b)(?:\s[^>]*)?>___NESTED_CODEBLOCK_DELIMITER_*</\1>_*'),
    # Token parsed as emphasis by the markdown renderer itself
    re.compile(r'<em><strong>NESTED_CODEBLOCK_DELIMITER</strong></em>'),
    re.compile(r'<strong><em>NESTED_CODEBLOCK_DELIMITER</em></strong>'),
]


def restore_nested_codeblocks(html_content: str) -> str:
    """Turn placeholders in rendered HTML back into triple backticks."""
    result = html_content.replace(PLACEHOLDER, FENCE)
    for pattern in _RESTORE_PATTERNS:
        result = pattern.sub(FENCE, result)
    return result
