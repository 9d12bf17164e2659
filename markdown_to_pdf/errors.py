"""
Exceptions raised while converting markdown documents.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""


class ConversionError(Exception):
    """Base class for every conversion failure reported to the user."""


class InputNotFoundError(ConversionError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Input file not found: {path}")


class InvalidExtensionError(ConversionError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Input file must be a markdown file (.md or .markdown): {path}")


class NoMatchingFilesError(ConversionError):
    def __init__(self, patterns):
        self.patterns = list(patterns)
        super().__init__(f"No markdown files matched: {', '.join(self.patterns)}")


class RenderError(ConversionError):
    """The browser could not turn the generated HTML into a PDF."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"Failed to render {path}: {message}")
