"""Output filters for site templates.

Three insertion modes, chosen by the template author:

    {{ content | unescaped }}   trusted, pre-rendered HTML written as-is
    {{ error | html }}          any value, its text form escaped
    {{ body | htmlesc }}        bytes or text, escaped

All three return ``Markup`` so autoescaping never escapes twice.
"""

import html as html_module
from typing import Any

from kida.template import Markup


def _text(value: Any) -> str:
    if isinstance(value, bytes | bytearray):
        return bytes(value).decode("utf-8", "replace")
    return str(value)


def unescaped(value: Any) -> Markup:
    """Write *value* without escaping."""
    return Markup(_text(value))


def html(value: Any) -> Markup:
    """Write the text form of *value*, HTML-escaped."""
    return Markup(html_module.escape(_text(value)))


def htmlesc(value: Any) -> Markup:
    """Write *value* raw into a buffer, then escape the buffer."""
    return Markup(html_module.escape(str(unescaped(value))))


SITE_FILTERS = {
    "unescaped": unescaped,
    "html": html,
    "htmlesc": htmlesc,
}
