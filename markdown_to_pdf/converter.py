#!/usr/bin/env python3
"""
Markdown to PDF converter using Puppeteer approach (inspired by vscode-markdown-pdf).
This uses Playwright (Python equivalent of Puppeteer) for better PDF generation control.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import asyncio
import base64
import html
import io
import re
from pathlib import Path
from typing import Dict, List, Optional, Union
from urllib.parse import unquote

from PIL import Image
from playwright.async_api import async_playwright, Error as PlaywrightError

from .config import ConverterConfig, DEFAULT_MARGIN
from .console import ColorLogger
from .errors import ConversionError, InputNotFoundError, InvalidExtensionError, RenderError
from .fences import protect_nested_codeblocks, restore_nested_codeblocks
from .renderer import MarkdownRenderer
from .toc import expand_toc

PathLike = Union[str, Path]

MARKDOWN_EXTENSIONS = ('.md', '.markdown')

PAGE_BREAK = '<div class="page-break"></div>'

IMAGE_MIME_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.svg': 'image/svg+xml',
    '.bmp': 'image/bmp',
}

_IMG_SRC_PATTERN = re.compile(r'src="([^"]+)"')
_STRIKETHROUGH_PATTERN = re.compile(r'~~([^~]+)~~')
_TASK_ITEM_PATTERN = re.compile(r'<li(?:\s+class="[^"]*")?>(\s*<p>)?\s*<input\s+([^>]*type="checkbox"[^>]*)>\s*')
_TASK_LIST_PATTERN = re.compile(r'<ul(?:\s[^>]*)?>(\s*<li class="task-list-item">)')


class MarkdownToPDFConverter(ColorLogger):
    """Markdown to PDF converter using Playwright (Puppeteer approach)."""

    def __init__(self, font_size: str = "medium", margin: str = DEFAULT_MARGIN, verbose: bool = False,
                 debug_html: Optional[bool] = None):
        """Initialize the converter.

        Args:
            font_size: One of small, medium or large
            margin: Uniform page margin, e.g. '2cm' or '0.75in'
            verbose: Print debug progress lines
            debug_html: Write the assembled HTML next to each PDF (default: DEBUG_HTML env)
        """
        self.config = ConverterConfig.create(font_size=font_size, margin=margin, debug_html=debug_html)
        self.verbose = verbose
        self._renderer = MarkdownRenderer()
        self._log_debug(f"Using font size '{self.config.font_size}' with {self.config.margin} margins")

    def _process_page_breaks(self, content: str) -> str:
        """Process page break markers in markdown content."""
        # <!-- page-break -->
        content = re.sub(r'<!--\s*page-break\s*-->', PAGE_BREAK, content, flags=re.IGNORECASE)
        # <page-break>
        content = re.sub(r'<page-break\s*/?>', PAGE_BREAK, content, flags=re.IGNORECASE)
        return content

    def _apply_strikethrough(self, html_content: str) -> str:
        return _STRIKETHROUGH_PATTERN.sub(r'<del>\1</del>', html_content)

    def _process_task_lists(self, html_content: str) -> str:
        """Wrap task list checkboxes in a styled control and tag their lists."""
        html_content = _TASK_ITEM_PATTERN.sub(
            r'<li class="task-list-item">\1<span class="task-list-control"><input \2>'
            r'<span class="task-list-indicator"></span></span>',
            html_content
        )
        return _TASK_LIST_PATTERN.sub(r'<ul class="task-list">\1', html_content)

    def render_body(self, markdown_content: str) -> str:
        """Run the markdown pipeline and return the HTML body fragment."""
        processed = self._process_page_breaks(markdown_content)
        processed = expand_toc(processed, self._renderer.parser)
        processed = protect_nested_codeblocks(processed)

        html_content = self._renderer.render(processed)

        html_content = restore_nested_codeblocks(html_content)
        html_content = self._apply_strikethrough(html_content)
        return self._process_task_lists(html_content)

    def convert_markdown_to_html(self, markdown_content: str, title: str = "Markdown to PDF") -> str:
        """Convert markdown text into a complete HTML document."""
        return self._create_html_template(self.render_body(markdown_content), title)

    def _create_html_template(self, content: str, title: str) -> str:
        """Create HTML template with the configured stylesheet and document title."""
        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <style>{self.config.stylesheet}</style>
</head>
<body>
    {content}
</body>
</html>"""

    def _extract_title(self, md_file: Path, content: str) -> str:
        """Extract the document title from markdown content.

        Preference order:
        1) First ATX H1 heading starting with '# '
        2) Setext H1 style (line followed by '===')
        3) Humanized filename stem
        """
        lines = content.splitlines()

        # 1) ATX H1: lines that start with '# ' but not '## '
        for line in lines:
            stripped = line.strip()
            if stripped.startswith('# '):
                heading_text = stripped[2:].strip()
                if heading_text:
                    return heading_text

        # 2) Setext H1: a line followed by a line of '=' (at least 3)
        for i in range(len(lines) - 1):
            current_line = lines[i].strip()
            if current_line and re.fullmatch(r"={3,}", lines[i + 1].strip()):
                return current_line

        # 3) Fallback to humanized filename stem
        stem = md_file.stem.replace('_', ' ').replace('-', ' ').strip()
        return stem.title() if stem else md_file.stem

    def _guess_mime_type(self, image_path: Path, data: bytes) -> str:
        """MIME type from the file extension, sniffing the content for unknown ones."""
        mime_type = IMAGE_MIME_TYPES.get(image_path.suffix.lower())
        if mime_type:
            return mime_type

        try:
            with Image.open(io.BytesIO(data)) as img:
                mime_type = Image.MIME.get(img.format)
        except OSError:
            mime_type = None

        if not mime_type:
            self._log_warning(f"Unknown image format: {image_path.suffix or image_path.name}, treating as PNG")
            return 'image/png'
        return mime_type

    def _image_to_data_uri(self, src: str, base_dir: Path) -> str:
        """Read a local image into a base64 data URI, or return src unchanged on failure."""
        relative = Path(unquote(html.unescape(src)))
        image_path = relative if relative.is_absolute() else base_dir / relative

        try:
            data = image_path.read_bytes()
        except OSError as e:
            self._log_warning(f"Failed to read image {image_path}: {e}")
            return src

        mime_type = self._guess_mime_type(image_path, data)
        self._log_debug(f"Embedded image: {src} ({len(data)} bytes, {mime_type})")
        return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"

    def _embed_images(self, html_content: str, base_dir: Path) -> str:
        """Replace local image sources with data URIs."""
        data_uris: Dict[str, str] = {}

        def replace(match):
            src = match.group(1)
            if src.startswith(('http', 'data:', 'file:')):
                return match.group(0)
            if src not in data_uris:
                data_uris[src] = self._image_to_data_uri(src, base_dir)
            return f'src="{data_uris[src]}"'

        html_content = _IMG_SRC_PATTERN.sub(replace, html_content)
        if data_uris:
            self._log_debug(f"Processed {len(data_uris)} local image(s)")
        return html_content

    def _validate_input(self, input_file: PathLike) -> Path:
        """Ensure the input is an existing markdown file."""
        path = Path(input_file)
        if not path.is_file():
            raise InputNotFoundError(path)
        if path.suffix.lower() not in MARKDOWN_EXTENSIONS:
            raise InvalidExtensionError(path)
        return path

    def _read_markdown(self, md_file: Path) -> str:
        try:
            return md_file.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ConversionError(f"Failed to read {md_file}: {e}") from e

    def _write_debug_html(self, html_content: str, output_pdf: Path) -> None:
        debug_file = output_pdf.with_suffix('.debug.html')
        debug_file.write_text(html_content, encoding='utf-8')
        self._log_info(f"Debug HTML written to {debug_file}")

    async def _render_pdf(self, html_content: str, output_pdf: Path) -> None:
        """Convert HTML to PDF using Playwright (Puppeteer approach)."""
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=True,
                args=['--no-sandbox', '--disable-setuid-sandbox']
            )
            try:
                page = await browser.new_page()
                await page.set_content(html_content, wait_until='networkidle')
                await page.pdf(
                    path=str(output_pdf),
                    format=self.config.page_format,
                    margin=self.config.pdf_margins(),
                    print_background=True
                )
            finally:
                await browser.close()

    def _export_pdf(self, html_content: str, output_pdf: Path, source: Path) -> None:
        """Run the browser export on a fresh event loop, torn down afterwards."""
        output_pdf.parent.mkdir(parents=True, exist_ok=True)
        self._log_debug(f"Rendering PDF with {self.config.page_format} pages: {output_pdf}")

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._render_pdf(html_content, output_pdf))
        except (PlaywrightError, OSError) as e:
            raise RenderError(source, str(e)) from e
        finally:
            loop.close()
            asyncio.set_event_loop(None)

    def _finish_document(self, html_content: str, output_pdf: Path, base_dir: Path, source: Path) -> Path:
        if self.config.debug_html:
            self._write_debug_html(html_content, output_pdf)
        html_content = self._embed_images(html_content, base_dir)
        self._export_pdf(html_content, output_pdf, source)
        return output_pdf

    def convert_to_pdf(self, input_file: PathLike, output_file: Optional[PathLike] = None) -> Path:
        """Convert one markdown file and return the PDF path."""
        md_file = self._validate_input(input_file)
        output_pdf = Path(output_file) if output_file else md_file.with_suffix('.pdf')

        content = self._read_markdown(md_file)
        html_content = self.convert_markdown_to_html(content, self._extract_title(md_file, content))

        base_dir = md_file.resolve().parent
        return self._finish_document(html_content, output_pdf, base_dir, md_file)

    def merge_markdown_files(self, input_files: List[PathLike], output_file: Optional[PathLike] = None,
                             page_break: bool = True) -> Path:
        """Concatenate markdown files into one document and convert it to a single PDF.

        Every input is validated before anything is rendered; one bad file
        aborts the whole merge.
        """
        if not input_files:
            raise ConversionError("No input files given")

        md_files = [self._validate_input(f) for f in input_files]
        first = md_files[0]
        output_pdf = Path(output_file) if output_file else first.with_name(f"{first.stem}_merged.pdf")

        separator = f"\n\n{PAGE_BREAK}\n\n" if page_break else "\n\n"
        contents = [self._read_markdown(md_file).strip() for md_file in md_files]
        merged = separator.join(contents)
        self._log_debug(f"Merged {len(md_files)} files ({len(merged)} characters)")

        html_content = self.convert_markdown_to_html(merged, self._extract_title(first, contents[0]))

        # Relative images resolve against the first file's directory
        base_dir = first.resolve().parent
        return self._finish_document(html_content, output_pdf, base_dir, first)
