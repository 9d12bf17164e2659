import pytest

from markdown_to_pdf.converter import MarkdownToPDFConverter


@pytest.fixture(autouse=True)
def no_debug_html_env(monkeypatch):
    monkeypatch.delenv("DEBUG_HTML", raising=False)


@pytest.fixture
def fake_browser(monkeypatch):
    """Replace the Chromium export with one that records the HTML and writes a stub PDF."""
    rendered = []

    async def fake_render(self, html_content, output_pdf):
        rendered.append((html_content, output_pdf))
        output_pdf.write_bytes(b"%PDF-1.4 stub")

    monkeypatch.setattr(MarkdownToPDFConverter, "_render_pdf", fake_render)
    return rendered
