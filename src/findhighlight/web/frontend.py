"""Single-page preview served at ``/``.

The page posts to ``/highlight`` on every keystroke. Its token colours come
from the Pygments style so they line up with the span classes the renderer
emits, and the lexer box offers every alias Pygments knows.
"""

from __future__ import annotations

from functools import lru_cache
from html import escape
from importlib.resources import files

from fastapi import APIRouter
from fastapi.responses import HTMLResponse
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_all_lexers

router = APIRouter()

STYLE_SLOT = "/* token styles */"
LEXERS_SLOT = "<!-- lexer options -->"


def _load_template() -> str:
    template = files("findhighlight.web").joinpath("templates", "index.html")
    return template.read_text(encoding="utf-8")


def _lexer_options() -> str:
    aliases = sorted({alias for _, names, _, _ in get_all_lexers() for alias in names})
    return "\n".join(f'<option value="{escape(alias)}">' for alias in aliases)


@lru_cache(maxsize=4)
def render_page(style: str = "default") -> str:
    """Fill the template with ``style``'s token CSS and the lexer list."""
    css = HtmlFormatter(style=style).get_style_defs("#output")
    return (
        _load_template()
        .replace(STYLE_SLOT, css)
        .replace(LEXERS_SLOT, _lexer_options())
    )


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return HTMLResponse(content=render_page())
