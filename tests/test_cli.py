"""
Tests for the command-line interface.
"""

import pytest

from docx_preview.cli import create_parser, main, options_from_args, write_assets


@pytest.fixture
def input_docx(docx_builder, para, temp_dir):
    builder = docx_builder()
    builder.body = para("Hello CLI")
    path = temp_dir / "report.docx"
    path.write_bytes(builder.build())
    return path


class TestMain:
    """Test cases for the entry point."""

    def test_default_output_path(self, input_docx):
        assert main([str(input_docx)]) == 0
        html = input_docx.with_suffix(".html").read_text(encoding="utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>report</title>" in html
        assert "Hello CLI" in html

    def test_explicit_output_and_body_only(self, input_docx, temp_dir):
        output = temp_dir / "out.html"
        assert main([str(input_docx), str(output), "--body-only"]) == 0
        html = output.read_text(encoding="utf-8")
        assert not html.startswith("<!DOCTYPE")
        assert "Hello CLI" in html

    def test_missing_file(self, temp_dir, capsys):
        assert main([str(temp_dir / "missing.docx")]) == 1
        assert "Error: File not found" in capsys.readouterr().err

    def test_invalid_package(self, temp_dir, capsys):
        path = temp_dir / "broken.docx"
        path.write_bytes(b"not a zip archive")
        assert main([str(path)]) == 1
        assert "Invalid DOCX package" in capsys.readouterr().err
        assert not path.with_suffix(".html").exists()


class TestOptions:
    """Test cases for mapping flags to options."""

    def test_defaults(self):
        options = options_from_args(create_parser().parse_args(["in.docx"]))
        assert options.class_name == "docx"
        assert options.in_wrapper
        assert options.break_pages
        assert options.render_headers
        assert options.use_data_uris
        assert not options.render_changes
        assert not options.live_fields

    def test_flags(self):
        args = create_parser().parse_args([
            "in.docx", "--no-wrapper", "--ignore-width", "--no-break-pages", "--no-headers",
            "--render-changes", "--render-comments", "--live-fields", "--no-base64",
            "--class-name", "preview",
        ])
        options = options_from_args(args)
        assert options.class_name == "preview"
        assert not options.in_wrapper
        assert options.ignore_width
        assert not options.break_pages
        assert not options.render_headers
        assert options.render_footers
        assert options.render_changes
        assert options.render_comments
        assert options.live_fields
        assert not options.use_data_uris


class TestWriteAssets:
    """Test cases for writing images beside the output."""

    def test_writes_package_paths(self, temp_dir):
        written = write_assets({"word/media/image1.png": b"png"}, temp_dir / "out.html")
        target = temp_dir / "word" / "media" / "image1.png"
        assert written == [target.resolve()]
        assert target.read_bytes() == b"png"

    def test_skips_paths_outside_output_folder(self, temp_dir):
        output = temp_dir / "nested" / "out.html"
        output.parent.mkdir()
        written = write_assets({"../escape.png": b"x"}, output)
        assert written == []
        assert not (temp_dir / "escape.png").exists()
