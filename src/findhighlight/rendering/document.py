"""In-memory editor surface rendering each line to escaped, tagged markup.

Lines are rendered the way a browser-based editor shows them: ``& < >``
escaped, tabs expanded to a fixed number of spaces and, when a Pygments lexer
is chosen, every token wrapped in ``<span class="...">``.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import STANDARD_TYPES
from pygments.util import ClassNotFound

from findhighlight.models import VisibleRange
from findhighlight.utils.text import escape_html, expand_tabs, split_lines

LOGGER = logging.getLogger(__name__)


def get_lexer(name: str | None) -> Lexer | None:
    """Return a line-preserving Pygments lexer, or ``None`` for plain text."""
    if not name:
        return None
    try:
        return get_lexer_by_name(name, stripnl=False, ensurenl=False)
    except ClassNotFound as exc:
        raise ValueError(f"Unknown lexer: {name}") from exc


def _css_class(ttype: Any) -> str:
    while ttype not in STANDARD_TYPES:
        ttype = ttype.parent
    return STANDARD_TYPES[ttype]


def render_line(text: str, lexer: Lexer | None = None, *, tab_width: int = 4) -> str:
    """Render one raw line into markup."""
    if lexer is None:
        return expand_tabs(escape_html(text), tab_width=tab_width)

    parts: List[str] = []
    for ttype, value in lexer.get_tokens(text):
        if not value:
            continue
        escaped = expand_tabs(escape_html(value), tab_width=tab_width)
        css = _css_class(ttype)
        parts.append(f'<span class="{css}">{escaped}</span>' if css else escaped)
    return "".join(parts)


class Signals:
    """Minimal named-signal registry."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[str, List[Callable[..., None]]] = defaultdict(list)

    def connect(self, signal: str, handler: Callable[..., None]) -> None:
        self._handlers[signal].append(handler)

    def disconnect(self, signal: str, handler: Callable[..., None]) -> None:
        handlers = self._handlers.get(signal, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, signal: str, *args: object) -> None:
        for handler in list(self._handlers.get(signal, [])):
            handler(*args)

    def handler_count(self, signal: str | None = None) -> int:
        if signal is not None:
            return len(self._handlers.get(signal, []))
        return sum(len(handlers) for handlers in self._handlers.values())


class RenderedDocument(Signals):
    """A document with a scrollable viewport and per-line rendered markup."""

    def __init__(
        self,
        text: str,
        *,
        lexer: str | None = None,
        tab_width: int = 4,
        viewport_height: int | None = None,
    ) -> None:
        super().__init__()
        self._lines = split_lines(text)
        self._lexer = get_lexer(lexer)
        self.tab_width = tab_width
        self.viewport_height = viewport_height
        self._first = 0
        self._markup = [self._render(line) for line in self._lines]
        self.focused = False

    def __len__(self) -> int:
        return len(self._lines)

    def _render(self, line: str) -> str:
        return render_line(line, self._lexer, tab_width=self.tab_width)

    def get_visible_line_range(self) -> VisibleRange:
        height = self.viewport_height or len(self._lines) - self._first
        last = min(self._first + height, len(self._lines)) - 1
        return VisibleRange(first=self._first, last=last)

    def get_raw_line_text(self, line_number: int) -> str:
        return self._lines[line_number]

    def get_rendered_line_markup(self, line_number: int) -> str:
        return self._markup[line_number]

    def set_rendered_line_markup(self, line_number: int, markup: str) -> None:
        self._markup[line_number] = markup

    def focus(self) -> None:
        self.focused = True

    def scroll_to(self, first: int) -> None:
        """Move the viewport so ``first`` is the top line, then emit ``scroll``."""
        if self.viewport_height:
            top = len(self._lines) - self.viewport_height
        else:
            top = len(self._lines) - 1
        self._first = max(0, min(first, top))
        LOGGER.debug("Viewport scrolled to line %d", self._first)
        self.emit("scroll")

    def rerender(self) -> None:
        """Discard any markup edits and render every line again."""
        self._markup = [self._render(line) for line in self._lines]

    def visible_markup(self) -> List[str]:
        return [self._markup[line] for line in self.get_visible_line_range().lines()]


class StaticQueryInput(Signals):
    """Headless query box driven programmatically."""

    def __init__(self, value: str = "") -> None:
        super().__init__()
        self.value = value
        self.is_open = False
        self.focused = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.focused = False

    def focus(self) -> None:
        self.focused = True

    def type(self, value: str) -> None:
        self.value = value
        self.emit("changed", value)

    def press(self, key: str) -> None:
        self.emit("key", key)

    def blur(self) -> None:
        self.focused = False
        self.emit("blur")
