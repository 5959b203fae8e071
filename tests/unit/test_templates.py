"""
Unit tests for the template loader.
"""

import io
import zipfile

import pytest
from jinja2 import TemplateNotFound

from serverkit.assets.templates import (
    TemplateLoadError,
    TemplateSet,
    parse_root_templates,
    parse_templates,
)
from serverkit.http.response import new_html_response


class TestParseRootTemplates:
    """Tests for loading every file in a directory."""

    def test_render_by_name(self, template_dir):
        root = template_dir({"a.html": "Hello {{ data }}", "b.html": "Bye"})
        templates = parse_root_templates(root)

        assert templates.render("a.html", "World") == "Hello World"
        assert templates.render("b.html") == "Bye"

    def test_names_sorted(self, template_dir):
        root = template_dir({"b.html": "", "a.html": "", "c.txt": ""})

        assert parse_root_templates(root).names == ("a.html", "b.html", "c.txt")

    def test_string_path(self, template_dir):
        root = template_dir({"a.html": "x"})

        assert "a.html" in parse_root_templates(str(root))

    def test_subdirectory_fails(self, template_dir):
        """Test that directory entries are not silently skipped."""
        root = template_dir({"a.html": "x"})
        (root / "partials").mkdir()

        with pytest.raises(TemplateLoadError) as exc_info:
            parse_root_templates(root)
        assert exc_info.value.name == "partials"

    def test_missing_root(self, tmp_path):
        with pytest.raises(TemplateLoadError):
            parse_root_templates(tmp_path / "nowhere")

    def test_zip_archive(self, tmp_path):
        """Test any Traversable works, not only disk directories."""
        archive = tmp_path / "templates.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("page.html", "<p>{{ data }}</p>")

        templates = parse_root_templates(zipfile.Path(archive))

        assert templates.render("page.html", "zip") == "<p>zip</p>"

    def test_bundled_templates(self):
        from serverkit.example import BUNDLED_TEMPLATES

        templates = parse_root_templates(BUNDLED_TEMPLATES)
        html = templates.render("index.html", ["first", "second"])

        assert "<li>first</li>" in html
        assert "<li>second</li>" in html


class TestParseTemplates:
    """Tests for loading an explicit list of names."""

    def test_only_listed(self, template_dir):
        root = template_dir({"a.html": "A", "b.html": "B"})
        templates = parse_templates(root, ["a.html"])

        assert templates.names == ("a.html",)
        with pytest.raises(TemplateNotFound):
            templates.render("b.html")

    def test_missing_file(self, template_dir):
        root = template_dir({"a.html": "A"})

        with pytest.raises(TemplateLoadError) as exc_info:
            parse_templates(root, ["a.html", "missing.html"])

        assert exc_info.value.name == "missing.html"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_syntax_error(self, template_dir):
        root = template_dir({"bad.html": "{{ data "})

        with pytest.raises(TemplateLoadError) as exc_info:
            parse_templates(root, ["bad.html"])
        assert exc_info.value.name == "bad.html"

    def test_unknown_filter(self, template_dir):
        """Test that compile errors are caught at load time, not on render."""
        root = template_dir({"bad.html": "{{ data|nosuchfilter }}"})

        with pytest.raises(TemplateLoadError) as exc_info:
            parse_templates(root, ["bad.html"])
        assert exc_info.value.name == "bad.html"

    def test_loaded_like_template_set(self, template_dir):
        root = template_dir({"t.html": "<b>{{ data }}</b>\n"})
        templates = parse_templates(root, ["t.html"])

        assert templates.render("t.html", "<i>") == "<b>&lt;i&gt;</b>\n"

    def test_stops_at_first_failure(self, template_dir):
        root = template_dir({"bad.html": "{% if %}", "good.html": "ok"})

        with pytest.raises(TemplateLoadError) as exc_info:
            parse_templates(root, ["bad.html", "missing.html"])
        assert exc_info.value.name == "bad.html"

    def test_invalid_utf8(self, tmp_path):
        (tmp_path / "latin1.html").write_bytes("café".encode("latin-1"))

        with pytest.raises(TemplateLoadError):
            parse_templates(tmp_path, ["latin1.html"])

    def test_templates_reference_each_other(self, template_dir):
        root = template_dir({
            "layout.html": "<main>{% block body %}{% endblock %}</main>",
            "page.html": '{% extends "layout.html" %}{% block body %}{{ data }}{% endblock %}',
        })
        templates = parse_root_templates(root)

        assert templates.render("page.html", "hi") == "<main>hi</main>"


class TestTemplateSet:
    """Tests for rendering from a loaded set."""

    def test_autoescape(self):
        templates = TemplateSet({"t.html": "{{ data }}"})
        assert templates.render("t.html", "<script>") == "&lt;script&gt;"

    def test_keyword_context(self):
        templates = TemplateSet({"t.html": "{{ data }} {{ extra }}"})
        assert templates.render("t.html", "a", extra="b") == "a b"

    def test_trailing_newline_kept(self):
        templates = TemplateSet({"t.html": "line\n"})
        assert templates.render("t.html") == "line\n"

    def test_render_to_response(self):
        templates = TemplateSet({"t.html": "Hello {{ data }}"})
        res = new_html_response(200)
        templates.render_to(res, "t.html", "World")

        assert res.body == b"Hello World"

    def test_render_to_text_stream(self):
        templates = TemplateSet({"t.html": "Hello"})
        out = io.StringIO()
        templates.render_to(out, "t.html")

        assert out.getvalue() == "Hello"

    def test_unknown_filter(self):
        with pytest.raises(TemplateLoadError):
            TemplateSet({"t.html": "{{ data|nosuchfilter }}"})

    def test_len_and_contains(self):
        templates = TemplateSet({"a": "", "b": ""})

        assert len(templates) == 2
        assert "a" in templates
        assert "c" not in templates
