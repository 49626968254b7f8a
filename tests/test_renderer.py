"""Tests for frontdoor.templating.renderer — page and error rendering."""

from pathlib import Path

import pytest

from frontdoor.errors import ConfigurationError
from frontdoor.templating import PageData, PageRenderer, create_environment


class _Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("cannot format")


class TestPageRenderer:
    def test_renders_page(self, site_root: Path) -> None:
        renderer = PageRenderer(site_root / "tmpl")
        body = renderer.render_page(
            PageData(title="Docs", subtitle="Guides", content=b"<p>Hello</p>")
        )
        assert isinstance(body, bytes)
        text = body.decode()
        assert "<title>Docs</title>" in text
        assert '<h2 class="subtitle">Guides</h2>' in text
        assert '<div id="content"><p>Hello</p></div>' in text

    def test_title_is_escaped(self, site_root: Path) -> None:
        renderer = PageRenderer(site_root / "tmpl")
        text = renderer.render_page(PageData(title="<i>x</i>")).decode()
        assert "<title>&lt;i&gt;x&lt;/i&gt;</title>" in text

    def test_renders_error(self, site_root: Path) -> None:
        renderer = PageRenderer(site_root / "tmpl")
        body = renderer.render_error(FileNotFoundError(2, "No such file", "a<b"))
        assert body.startswith(b'<p class="error">')
        assert b"a&lt;b" in body

    def test_failed_render_is_empty_and_logged(
        self, site_root: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        renderer = PageRenderer(site_root / "tmpl")
        assert renderer.render_error(_Unprintable()) == b""
        assert "error.html: template execution failed" in caplog.text

    def test_missing_template_is_fatal(self, tmp_path: Path) -> None:
        (tmp_path / "page.html").write_text("{{ title }}")
        with pytest.raises(ConfigurationError, match=r"error\.html"):
            PageRenderer(tmp_path)

    def test_empty_directory_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match=r"page\.html"):
            PageRenderer(tmp_path)


class TestCreateEnvironment:
    def test_site_filters_registered(self, tmp_path: Path) -> None:
        (tmp_path / "t.html").write_text("{{ value | unescaped }}|{{ value | html }}")
        env = create_environment(tmp_path)
        out = env.get_template("t.html").render({"value": "<b>"})
        assert out == "<b>|&lt;b&gt;"
