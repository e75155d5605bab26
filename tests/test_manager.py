"""Tests for editor-change coordination."""

from __future__ import annotations

from findhighlight.config import HighlightConfig
from findhighlight.highlight.manager import FindHighlightManager
from findhighlight.highlight.session import SessionState
from findhighlight.rendering.document import RenderedDocument, StaticQueryInput


def _document() -> RenderedDocument:
    return RenderedDocument("alpha beta\ngamma alpha\n")


class TestFindHighlightManager:
    """Test FindHighlightManager class."""

    def test_default_config(self) -> None:
        """Should create a default config when none is given."""
        manager = FindHighlightManager()
        assert isinstance(manager.config, HighlightConfig)
        assert manager.editor is None
        assert manager.active_session is None

    def test_open_search_without_editor(self) -> None:
        """No session can start without a focused editor."""
        manager = FindHighlightManager()
        assert manager.open_search(StaticQueryInput()) is None

    def test_open_search_starts_session(self) -> None:
        """Should start a session on the current editor."""
        document = _document()
        manager = FindHighlightManager(editor=document)
        query_input = StaticQueryInput()

        session = manager.open_search(query_input)

        assert session is not None
        assert session.state is SessionState.SEARCHING
        assert manager.active_session is session
        assert session.surface is document
        query_input.type("alpha")
        assert session.match_count == 2

    def test_open_search_twice_replaces_session(self) -> None:
        """A new search closes the previous one."""
        manager = FindHighlightManager(editor=_document())
        first = manager.open_search(StaticQueryInput())

        second = manager.open_search(StaticQueryInput())

        assert first is not None and second is not None
        assert first.state is SessionState.IDLE
        assert manager.active_session is second

    def test_editor_change_closes_session(self) -> None:
        """Switching editors removes highlights from the old one."""
        old = _document()
        before = [old.get_rendered_line_markup(n) for n in range(len(old))]
        manager = FindHighlightManager(editor=old)
        query_input = StaticQueryInput()
        session = manager.open_search(query_input)
        query_input.type("alpha")

        new = _document()
        manager.set_editor(new)

        assert session is not None
        assert session.state is SessionState.IDLE
        assert [old.get_rendered_line_markup(n) for n in range(len(old))] == before
        assert old.handler_count() == 0
        assert manager.editor is new
        assert manager.active_session is None

    def test_session_closed_by_key_is_forgotten(self) -> None:
        """Sessions that closed themselves are no longer active."""
        manager = FindHighlightManager(editor=_document())
        query_input = StaticQueryInput()
        manager.open_search(query_input)

        query_input.press("Escape")

        assert manager.active_session is None

    def test_config_is_shared_with_sessions(self) -> None:
        """Sessions use the manager's markers."""
        config = HighlightConfig(start_marker="<b class='hit'>", end_marker="</b>")
        document = _document()
        manager = FindHighlightManager(config, editor=document)
        query_input = StaticQueryInput()
        manager.open_search(query_input)

        query_input.type("beta")

        assert document.get_rendered_line_markup(0) == "alpha <b class='hit'>beta</b>"
