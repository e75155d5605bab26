"""Tracks the focused editor and the search session attached to it."""

from __future__ import annotations

import logging

from findhighlight.config import HighlightConfig
from findhighlight.highlight.session import (
    EditorSurface,
    HighlightSession,
    QueryInput,
    SessionState,
)

LOGGER = logging.getLogger(__name__)


class FindHighlightManager:
    """Keeps at most one active :class:`HighlightSession`, bound to the current editor."""

    def __init__(
        self,
        config: HighlightConfig | None = None,
        editor: EditorSurface | None = None,
    ) -> None:
        self.config = config or HighlightConfig()
        self._editor = editor
        self._session: HighlightSession | None = None

    @property
    def editor(self) -> EditorSurface | None:
        return self._editor

    @property
    def active_session(self) -> HighlightSession | None:
        # A session closes itself on Enter, Escape or blur.
        if self._session is not None and self._session.state is SessionState.IDLE:
            self._session = None
        return self._session

    def set_editor(self, editor: EditorSurface | None) -> None:
        """Handle a focused-editor change: close the running search first."""
        self.close_search()
        self._editor = editor

    def open_search(self, query_input: QueryInput) -> HighlightSession | None:
        if self._editor is None:
            LOGGER.warning("No editor focused, search not started")
            return None
        self.close_search()
        session = HighlightSession(self._editor, query_input, self.config)
        session.start()
        self._session = session
        return session

    def close_search(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
