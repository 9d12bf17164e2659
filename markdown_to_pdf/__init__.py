"""
Markdown to PDF converter with nested code block support.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

from .converter import MarkdownToPDFConverter
from .errors import (
    ConversionError,
    InputNotFoundError,
    InvalidExtensionError,
    NoMatchingFilesError,
    RenderError,
)

__version__ = "1.0.0"
