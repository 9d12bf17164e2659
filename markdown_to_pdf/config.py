"""
Converter configuration: font sizes, page margins and the document stylesheet.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import os
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pygments.formatters import HtmlFormatter

FONT_SIZES = ("small", "medium", "large")

# Pixel sizes per font size selection
FONT_SIZE_CONFIGS: Dict[str, Dict[str, str]] = {
    "small": {"base": "10px", "h1": "20px", "h2": "16px", "h3": "14px", "h4": "12px", "code": "9px"},
    "medium": {"base": "12px", "h1": "24px", "h2": "20px", "h3": "18px", "h4": "16px", "code": "11px"},
    "large": {"base": "14px", "h1": "28px", "h2": "24px", "h3": "22px", "h4": "20px", "code": "13px"},
}

DEFAULT_MARGIN = "2cm"
PAGE_FORMAT = "A4"
PYGMENTS_STYLE = "default"

_MARGIN_PATTERN = re.compile(r'^(-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)\s*(cm|in|mm|pt|px)?$')
_INCHES_PER_UNIT = {"in": 1.0, "cm": 1 / 2.54, "mm": 1 / 25.4, "pt": 1 / 72, "px": 1 / 96}


def validate_margin(margin_str: str) -> str:
    """Validate and normalize a single margin value."""
    match = _MARGIN_PATTERN.match(margin_str.strip())
    if not match:
        raise ValueError(f"Invalid margin format: '{margin_str}'. Use format like '1in', '2.5cm', '10mm', etc.")

    value_str, unit = match.groups()
    value = float(value_str)

    # Set default unit to 'in' if not specified
    if not unit:
        unit = 'in'

    value_inches = value * _INCHES_PER_UNIT[unit]
    if value_inches < 0:
        raise ValueError(f"Margin cannot be negative: '{margin_str}'. Minimum value is 0.")
    elif value_inches > 3:
        raise ValueError(f"Margin too large: '{margin_str}'. Maximum value is 3 inches (7.62cm).")

    return f"{value:g}{unit}"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() not in ("", "0", "false", "no")


def build_stylesheet(sizes: Mapping[str, str], margin: str) -> str:
    """Create the CSS embedded in every generated document."""
    highlight_css = HtmlFormatter(style=PYGMENTS_STYLE).get_style_defs("pre code")

    return f"""
      @page {{ size: {PAGE_FORMAT}; margin: {margin}; }}

      body {{
        font-family: Arial, sans-serif;
        font-size: {sizes['base']};
        line-height: 1.6;
        color: #333;
        max-width: none;
      }}

      h1, h2, h3, h4, h5, h6 {{
        color: #2c3e50;
        margin-top: 1.5em;
        margin-bottom: 0.5em;
        page-break-after: avoid;
      }}

      h1 {{ font-size: {sizes['h1']}; border-bottom: 2px solid #3498db; padding-bottom: 10px; }}
      h2 {{ font-size: {sizes['h2']}; border-bottom: 1px solid #bdc3c7; padding-bottom: 5px; }}
      h3 {{ font-size: {sizes['h3']}; }}
      h4 {{ font-size: {sizes['h4']}; }}

      p {{ margin-bottom: 1em; text-align: justify; }}

      strong, b {{ font-weight: 900; color: #000; }}
      em, i {{ font-style: italic; color: #333; }}
      del, s {{ text-decoration: line-through; color: #666; }}

      code {{
        background-color: #f8f8f8;
        border: 1px solid #e1e1e8;
        border-radius: 3px;
        padding: 2px 4px;
        font-family: monospace;
        font-size: {sizes['code']};
        word-wrap: break-word;
      }}

      pre {{
        background-color: #f8f8f8;
        border: 1px solid #e1e1e8;
        border-radius: 5px;
        padding: 10px;
        overflow-x: auto;
        page-break-inside: avoid;
        white-space: pre-wrap;
        word-wrap: break-word;
        line-height: 1.4;
      }}

      pre code {{
        background-color: transparent;
        border: none;
        padding: 0;
        white-space: pre-wrap;
        word-wrap: break-word;
        line-height: inherit;
      }}

      table {{ border-collapse: collapse; width: 100%; margin: 1em 0; page-break-inside: avoid; }}
      th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
      th {{ background-color: #f2f2f2; font-weight: bold; }}
      tr:nth-child(even) {{ background-color: #f9f9f9; }}

      ul, ol {{ margin: 1em 0; padding-left: 2em; }}
      li {{ margin-bottom: 0.5em; }}

      ul.task-list {{
        padding-left: 0 !important;
        list-style: none !important;
      }}

      ul.task-list > li {{
        list-style: none !important;
        position: relative;
        padding-left: 1.5em !important;
        margin-left: 0 !important;
      }}

      ul.task-list > li::marker {{
        content: none !important;
      }}

      .task-list-control {{
        position: absolute;
        left: 0;
        top: 0;
        width: 1.2em;
      }}

      .task-list-control input[type="checkbox"] {{
        display: none !important;
      }}

      .task-list-control input[type="checkbox"] + .task-list-indicator::before {{
        content: "\\2610";
        color: #666;
        font-weight: bold;
      }}

      .task-list-control input[type="checkbox"][checked] + .task-list-indicator::before {{
        content: "\\2611";
        color: #3498db;
        font-weight: bold;
      }}

      .toc {{ border: 1px solid #e1e1e8; border-radius: 5px; padding: 0.5em 1em; margin: 1em 0; }}
      .toc ul {{ margin: 0.2em 0; }}
      .toc li {{ margin-bottom: 0.2em; }}

      blockquote {{ border-left: 4px solid #3498db; margin: 1em 0; padding-left: 1em; color: #666; font-style: italic; }}
      a {{ color: #3498db; text-decoration: none; }}

      img {{
        max-width: 100%;
        height: auto;
        display: block;
        margin: 1em auto;
        border: 1px solid #ddd;
        border-radius: 5px;
        padding: 5px;
        background-color: #fff;
      }}

      .page-break {{ page-break-before: always; }}

      /* Syntax highlighting */
{highlight_css}
    """


@dataclass(frozen=True)
class ConverterConfig:
    """Settings fixed for the lifetime of one converter instance."""

    font_size: str
    font_sizes: Mapping[str, str]
    margin: str
    page_format: str
    debug_html: bool
    stylesheet: str

    @classmethod
    def create(cls, font_size: str = "medium", margin: str = DEFAULT_MARGIN,
               debug_html: Optional[bool] = None) -> "ConverterConfig":
        """Build a configuration, reading DEBUG_HTML from the environment when not given."""
        if font_size not in FONT_SIZE_CONFIGS:
            raise ValueError(f"Invalid font size '{font_size}'. Available sizes: {', '.join(FONT_SIZES)}")

        margin = validate_margin(margin)
        if debug_html is None:
            debug_html = _env_flag("DEBUG_HTML")

        sizes = MappingProxyType(dict(FONT_SIZE_CONFIGS[font_size]))
        return cls(
            font_size=font_size,
            font_sizes=sizes,
            margin=margin,
            page_format=PAGE_FORMAT,
            debug_html=debug_html,
            stylesheet=build_stylesheet(sizes, margin),
        )

    def pdf_margins(self) -> Dict[str, str]:
        """Uniform margins in the shape Playwright expects."""
        return {side: self.margin for side in ("top", "right", "bottom", "left")}
