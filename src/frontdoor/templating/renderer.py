"""Page and error rendering through kida templates.

Both templates are loaded once at startup from ``<root>/tmpl``. A
template that is missing or does not parse is fatal; a template that
fails while rendering is logged and yields an empty page.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kida import Environment, FileSystemLoader
from kida.environment.exceptions import TemplateNotFoundError, TemplateSyntaxError
from kida.template import Markup

from frontdoor.errors import ConfigurationError
from frontdoor.templating.filters import SITE_FILTERS

logger = logging.getLogger("frontdoor.templating")

PAGE_TEMPLATE = "page.html"
ERROR_TEMPLATE = "error.html"


@dataclass(frozen=True, slots=True)
class PageData:
    """What the page template receives.

    ``content`` is trusted HTML: a content file or a rendered error
    template. It is inserted without escaping.
    """

    title: str = ""
    subtitle: str = ""
    content: bytes | str = b""


def create_environment(template_dir: str | Path) -> Environment:
    """Create the kida Environment for the site templates."""
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=True,
    )
    env.update_filters(SITE_FILTERS)
    return env


class PageRenderer:
    """Render PageData and errors into complete HTML pages.

    Usage::

        renderer = PageRenderer(config.template_dir)
        body = renderer.render_page(PageData(title="Docs", content=data))
    """

    __slots__ = ("_env", "_error", "_page")

    def __init__(self, template_dir: str | Path) -> None:
        self._env = create_environment(template_dir)
        self._page = self._load(template_dir, PAGE_TEMPLATE)
        self._error = self._load(template_dir, ERROR_TEMPLATE)

    def _load(self, template_dir: str | Path, name: str) -> Any:
        try:
            return self._env.get_template(name)
        except (TemplateNotFoundError, TemplateSyntaxError, OSError) as exc:
            msg = f"{Path(template_dir) / name}: {exc}"
            raise ConfigurationError(msg) from exc

    def render_page(self, data: PageData) -> bytes:
        content = data.content
        if isinstance(content, bytes):
            content = content.decode("utf-8", "replace")
        return self._execute(
            self._page,
            PAGE_TEMPLATE,
            {"title": data.title, "subtitle": data.subtitle, "content": Markup(content)},
        )

    def render_error(self, error: object) -> bytes:
        """Render the error template with ``error`` bound to *error*."""
        return self._execute(self._error, ERROR_TEMPLATE, {"error": error})

    @staticmethod
    def _execute(template: Any, name: str, context: dict[str, Any]) -> bytes:
        try:
            return template.render(context).encode("utf-8")
        except Exception:
            logger.exception("%s: template execution failed", name)
            return b""
