"""Shared fixtures: a throwaway site root with templates, content, and static trees."""

from pathlib import Path

import pytest

from frontdoor.config import SiteConfig

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head><title>{{ title }}</title></head>
<body>
<h2 class="subtitle">{{ subtitle }}</h2>
<div id="content">{{ content | unescaped }}</div>
</body>
</html>
"""

ERROR_TEMPLATE = """<p class="error">{{ error | html }}</p>"""


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """A site root laid out like production: tmpl, content, static, talks."""
    root = tmp_path / "site"
    tmpl = root / "tmpl"
    tmpl.mkdir(parents=True)
    (tmpl / "page.html").write_text(PAGE_TEMPLATE)
    (tmpl / "error.html").write_text(ERROR_TEMPLATE)

    content = root / "content"
    content.mkdir()
    (content / "index.html").write_text("<h1>Welcome</h1><p>Home page.</p>")
    (content / "untitled.html").write_text("<p>No heading here.</p>")
    docs = content / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Documentation</h1><p>Start here.</p>")
    (docs / "install.html").write_text("<h1>Install &amp; Run</h1>")

    static = root / "static"
    static.mkdir()
    (static / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    (static / "robots.txt").write_text("User-agent: *\nDisallow: /code/\n")
    (static / "site.css").write_text("body { margin: 0; }")

    talks = root / "talks"
    talks.mkdir()
    (talks / "intro.html").write_text("<h1>Intro talk</h1>")

    return root


@pytest.fixture
def site_config(site_root: Path) -> SiteConfig:
    """Configuration for the fixture site with every optional backend off."""
    return SiteConfig(
        root=site_root,
        gitweb_script="",
        log_stdout=False,
    )
