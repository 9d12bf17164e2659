"""
Command line interface for the markdown to PDF converter.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import argparse
import glob
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_MARGIN, FONT_SIZES
from .console import ColorLogger
from .converter import MARKDOWN_EXTENSIONS, MarkdownToPDFConverter
from .dependencies import check_dependencies, install_chromium
from .errors import ConversionError, NoMatchingFilesError


def expand_patterns(patterns: List[str]) -> List[Path]:
    """Expand file paths and glob patterns into a sorted list of markdown files."""
    files = set()
    for pattern in patterns:
        for match in glob.glob(os.path.expanduser(pattern), recursive=True):
            if not os.path.isfile(match):
                continue
            if os.path.splitext(match)[1].lower() in MARKDOWN_EXTENSIONS:
                files.add(Path(match).resolve())
    return sorted(files)


class ConversionRunner(ColorLogger):
    """Drives batch or merge conversion and reports results."""

    def __init__(self, converter: MarkdownToPDFConverter, verbose: bool = False):
        self.converter = converter
        self.verbose = verbose

    def run_merge(self, input_files: List[Path], output: Optional[str], page_break: bool) -> int:
        """Merge all inputs into one PDF. Any failure aborts the merge."""
        self._log_debug(f"Merging: {', '.join(str(f) for f in input_files)}")
        try:
            output_pdf = self.converter.merge_markdown_files(input_files, output, page_break=page_break)
        except ConversionError as e:
            self._log_error(f"Merge failed: {e}")
            return 1

        self._log_success(str(output_pdf))
        return 0

    def run_batch(self, input_files: List[Path], output: Optional[str]) -> int:
        """Convert each file on its own, continuing past failures."""
        success_count = 0
        failed_count = 0

        for md_file in input_files:
            self._log_debug(f"Converting: {md_file}")
            try:
                output_pdf = self.converter.convert_to_pdf(md_file, output)
            except ConversionError as e:
                self._log_error(f"{md_file} - {e}")
                failed_count += 1
                continue

            if self.verbose:
                self._log_success(f"{md_file} -> {output_pdf}")
            else:
                self._log_success(str(output_pdf))
            success_count += 1

        if self.verbose:
            self._log_info(f"Conversion complete: {success_count} succeeded, {failed_count} failed")

        return 1 if failed_count else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markdown-to-pdf",
        description="Convert markdown files to PDF (nested code blocks, task lists and [TOC] supported)"
    )
    parser.add_argument("inputs", nargs="*", metavar="INPUT", help="Markdown files or glob patterns to convert")
    parser.add_argument("-o", "--output", default=None, help="Output PDF file (single file or --merge only)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed progress")
    parser.add_argument("--merge", action="store_true", help="Merge all input files into one PDF")
    parser.add_argument("--no-page-break", dest="page_break", action="store_false",
                        help="Do not insert page breaks between merged files (only with --merge)")
    parser.add_argument("--font-size", default="medium", choices=FONT_SIZES, help="Font size (default: medium)")
    parser.add_argument("--margin", default=DEFAULT_MARGIN,
                        help=f"Uniform page margin (default: {DEFAULT_MARGIN}). Range: 0-3 inches. Units: in, cm, mm, pt, px")
    parser.add_argument("--debug-html", action="store_true", default=None,
                        help="Also write the generated HTML next to each PDF (same as DEBUG_HTML=1)")
    parser.add_argument("--check-deps", action="store_true", help="Check runtime dependencies and exit")
    parser.add_argument("--install-browser", action="store_true", help="Install Playwright Chromium and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = ColorLogger()

    if args.install_browser:
        return 0 if install_chromium() else 1
    if args.check_deps:
        return 0 if check_dependencies() else 1

    if not args.inputs:
        parser.error("at least one INPUT is required")

    try:
        input_files = expand_patterns(args.inputs)
        if not input_files:
            raise NoMatchingFilesError(args.inputs)

        if len(input_files) > 1 and args.output and not args.merge:
            raise ConversionError("-o/--output can only be used with multiple files together with --merge")

        converter = MarkdownToPDFConverter(
            font_size=args.font_size,
            margin=args.margin,
            verbose=args.verbose,
            debug_html=args.debug_html
        )
    except (ConversionError, ValueError) as e:
        logger._log_error(str(e))
        return 1

    runner = ConversionRunner(converter, verbose=args.verbose)
    if args.merge:
        return runner.run_merge(input_files, args.output, args.page_break)
    return runner.run_batch(input_files, args.output)


if __name__ == "__main__":
    sys.exit(main())
