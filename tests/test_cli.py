import pytest

from markdown_to_pdf.cli import expand_patterns, main
from markdown_to_pdf.converter import MarkdownToPDFConverter
from markdown_to_pdf.errors import RenderError


def _write(path, text="# Doc\n"):
    path.write_text(text, encoding="utf-8")
    return path


def test_expand_patterns_filters_sorts_and_deduplicates(tmp_path):
    b = _write(tmp_path / "b.md")
    a = _write(tmp_path / "a.markdown")
    _write(tmp_path / "notes.txt")
    (tmp_path / "folder.md").mkdir()
    (tmp_path / "sub").mkdir()
    nested = _write(tmp_path / "sub" / "c.md")

    files = expand_patterns([str(tmp_path / "*"), str(b), str(tmp_path / "**" / "*.md")])

    assert files == sorted([a.resolve(), b.resolve(), nested.resolve()])


def test_batch_conversion(fake_browser, tmp_path, capsys):
    _write(tmp_path / "one.md")
    _write(tmp_path / "two.md")

    assert main([str(tmp_path / "*.md")]) == 0

    assert (tmp_path / "one.pdf").exists()
    assert (tmp_path / "two.pdf").exists()
    out = capsys.readouterr().out
    assert out.count("[OK]") == 2


def test_batch_continues_after_failure(monkeypatch, tmp_path, capsys):
    async def flaky_render(self, html_content, output_pdf):
        if output_pdf.stem == "bad":
            raise OSError("disk full")
        output_pdf.write_bytes(b"%PDF")

    monkeypatch.setattr(MarkdownToPDFConverter, "_render_pdf", flaky_render)
    _write(tmp_path / "bad.md")
    _write(tmp_path / "good.md")

    assert main(["-v", str(tmp_path / "*.md")]) == 1

    assert (tmp_path / "good.pdf").exists()
    out = capsys.readouterr().out
    assert "[ERROR]" in out
    assert "disk full" in out
    assert "1 succeeded, 1 failed" in out


def test_no_matching_files(tmp_path, capsys):
    assert main([str(tmp_path / "*.md")]) == 1
    assert "No markdown files matched" in capsys.readouterr().out


def test_output_requires_merge_for_multiple_files(fake_browser, tmp_path):
    _write(tmp_path / "one.md")
    _write(tmp_path / "two.md")

    assert main([str(tmp_path / "*.md"), "-o", str(tmp_path / "out.pdf")]) == 1
    assert fake_browser == []


def test_merge_mode(fake_browser, tmp_path):
    _write(tmp_path / "one.md", "alpha")
    _write(tmp_path / "two.md", "beta")
    target = tmp_path / "book.pdf"

    assert main([str(tmp_path / "*.md"), "--merge", "-o", str(target), "--no-page-break"]) == 0

    assert target.exists()
    assert len(fake_browser) == 1
    assert "page-break" not in fake_browser[0][0].split("<body>")[1]


def test_merge_failure_exits_nonzero(monkeypatch, tmp_path):
    def failing_merge(self, input_files, output_file=None, page_break=True):
        raise RenderError(input_files[0], "boom")

    monkeypatch.setattr(MarkdownToPDFConverter, "merge_markdown_files", failing_merge)
    _write(tmp_path / "one.md")

    assert main([str(tmp_path / "one.md"), "--merge"]) == 1


def test_invalid_font_size_is_rejected(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "a.md"), "--font-size", "huge"])
    assert excinfo.value.code == 2


def test_invalid_margin(tmp_path, capsys):
    _write(tmp_path / "one.md")
    assert main([str(tmp_path / "one.md"), "--margin", "9in"]) == 1
    assert "Margin too large" in capsys.readouterr().out


def test_debug_html_flag(fake_browser, tmp_path):
    _write(tmp_path / "one.md")
    assert main([str(tmp_path / "one.md"), "--debug-html"]) == 0
    assert (tmp_path / "one.debug.html").exists()
