"""Incremental find-and-highlight over the visible lines of an editor.

A :class:`HighlightSession` lives from :meth:`HighlightSession.start` to
:meth:`HighlightSession.close`. While it is searching, every query change or
viewport scroll removes the highlights it applied earlier, rescans the lines
currently visible and splices fresh markers into their rendered markup.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, Iterable, List, Protocol, Tuple

from findhighlight.config import HighlightConfig
from findhighlight.highlight.locator import locate_matches
from findhighlight.highlight.pattern import (
    InvalidPatternError,
    compile_query,
    compile_query_or_literal,
)
from findhighlight.highlight.splicer import MarkupError, highlight_line
from findhighlight.models import Pattern, VisibleRange
from findhighlight.utils.text import join_lines, strip_markers

LOGGER = logging.getLogger(__name__)

CLOSE_KEYS = frozenset({"Enter", "Return", "Escape"})


class EditorSurface(Protocol):
    """What the session needs from the hosting text editor."""

    def get_visible_line_range(self) -> VisibleRange: ...

    def get_raw_line_text(self, line_number: int) -> str: ...

    def get_rendered_line_markup(self, line_number: int) -> str: ...

    def set_rendered_line_markup(self, line_number: int, markup: str) -> None: ...

    def focus(self) -> None: ...

    def connect(self, signal: str, handler: Callable[..., None]) -> None: ...

    def disconnect(self, signal: str, handler: Callable[..., None]) -> None: ...


class QueryInput(Protocol):
    """The query box: emits ``changed``, ``key`` and ``blur``."""

    @property
    def value(self) -> str: ...

    def open(self) -> None: ...

    def close(self) -> None: ...

    def focus(self) -> None: ...

    def connect(self, signal: str, handler: Callable[..., None]) -> None: ...

    def disconnect(self, signal: str, handler: Callable[..., None]) -> None: ...


class SessionState(enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"


class HighlightSession:
    """Owns the highlight lifecycle for one editor and one query box."""

    def __init__(
        self,
        surface: EditorSurface,
        query_input: QueryInput,
        config: HighlightConfig | None = None,
    ) -> None:
        self.surface = surface
        self.query_input = query_input
        self.config = config or HighlightConfig()
        self._state = SessionState.IDLE
        self._query = ""
        self._pattern: Pattern | None = None
        # line -> (markup before highlighting, markup we wrote)
        self._applied: Dict[int, Tuple[str, str]] = {}
        self._match_count = 0
        self._bindings: List[Tuple[object, str, Callable[..., None]]] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def query(self) -> str:
        return self._query

    @property
    def applied_lines(self) -> List[int]:
        return sorted(self._applied)

    @property
    def match_count(self) -> int:
        return self._match_count

    def start(self) -> None:
        """Open the query box and start following keystrokes and scrolling."""
        if self._state is SessionState.SEARCHING:
            return
        self.query_input.open()
        self._bind(self.query_input, "changed", self._on_query_changed)
        self._bind(self.query_input, "key", self.handle_key)
        self._bind(self.query_input, "blur", self._on_blur)
        self._bind(self.surface, "scroll", self._on_scroll)
        self.query_input.focus()
        self._state = SessionState.SEARCHING
        LOGGER.debug("Highlight session started")

    def close(self) -> None:
        """Stop listening, drop every highlight and hand focus back to the editor."""
        if self._state is SessionState.IDLE:
            return
        self._state = SessionState.IDLE
        self._unbind_all()
        self.clear_highlights()
        self.query_input.close()
        self.surface.focus()
        self._pattern = None
        self._query = ""
        LOGGER.debug("Highlight session closed")

    def apply_highlights(self, query: str) -> int:
        """Highlight ``query`` in the visible lines and return the match count.

        An invalid regular expression keeps the last valid query highlighted.
        """
        self._query = query
        try:
            if self.config.literal_fallback:
                pattern = compile_query_or_literal(query)
            else:
                pattern = compile_query(query)
        except InvalidPatternError as exc:
            LOGGER.warning("%s", exc)
            if self._pattern is not None:
                self._rehighlight(self._pattern)
            return self._match_count

        self._pattern = pattern
        if pattern is None:
            self.clear_highlights()
            return 0
        return self._rehighlight(pattern)

    def refresh(self) -> int:
        """Re-apply the current pattern, e.g. after the viewport moved."""
        if self._pattern is None:
            self.clear_highlights()
            return 0
        return self._rehighlight(self._pattern)

    def clear_highlights(self) -> None:
        """Restore every line this session touched to its unhighlighted markup."""
        for line, (original, written) in self._applied.items():
            current = self.surface.get_rendered_line_markup(line)
            if current == written:
                self.surface.set_rendered_line_markup(line, original)
            elif self.config.start_marker in current or self.config.end_marker in current:
                self.surface.set_rendered_line_markup(
                    line,
                    strip_markers(current, self.config.start_marker, self.config.end_marker),
                )
        self._applied.clear()
        self._match_count = 0

    def _rehighlight(self, pattern: Pattern) -> int:
        self.clear_highlights()
        visible = self.surface.get_visible_line_range()
        contents = join_lines(self.surface.get_raw_line_text(line) for line in visible.lines())
        results = locate_matches(contents, pattern, first_line=visible.first)

        for result in results:
            original = self.surface.get_rendered_line_markup(result.line)
            try:
                spliced = highlight_line(original, result, self.config)
            except MarkupError as exc:
                LOGGER.warning("Leaving line %d unhighlighted: %s", result.line, exc)
                continue
            self.surface.set_rendered_line_markup(result.line, spliced)
            self._applied[result.line] = (original, spliced)
            self._match_count += len(result)

        LOGGER.debug(
            "Highlighted %d matches in lines %d-%d",
            self._match_count,
            visible.first,
            visible.last,
        )
        return self._match_count

    def handle_key(self, key: str) -> bool:
        """Close the session on Enter or Escape; return True when the key was consumed."""
        if key in CLOSE_KEYS:
            self.close()
            return True
        return False

    def _bind(self, source: object, signal: str, handler: Callable[..., None]) -> None:
        source.connect(signal, handler)  # type: ignore[attr-defined]
        self._bindings.append((source, signal, handler))

    def _unbind_all(self) -> None:
        for source, signal, handler in self._bindings:
            source.disconnect(signal, handler)  # type: ignore[attr-defined]
        self._bindings.clear()

    def _on_query_changed(self, text: str | None = None) -> None:
        self.apply_highlights(self.query_input.value if text is None else text)

    def _on_scroll(self, *_args: object) -> None:
        self.refresh()

    def _on_blur(self, *_args: object) -> None:
        self.close()


def open_session(
    surface: EditorSurface,
    query_input: QueryInput,
    config: HighlightConfig | None = None,
    *,
    queries: Iterable[str] = (),
) -> HighlightSession:
    """Create and start a session, replaying ``queries`` as keystrokes."""
    session = HighlightSession(surface, query_input, config)
    session.start()
    for query in queries:
        session.apply_highlights(query)
    return session
