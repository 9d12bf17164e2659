#!/usr/bin/env python3
"""
Markdown to PDF converter using Puppeteer approach (inspired by vscode-markdown-pdf).

Usage:
    python convert_md_to_pdf.py docs/*.md --merge -o handbook.pdf
"""

import sys

from markdown_to_pdf.cli import main


if __name__ == "__main__":
    sys.exit(main())
