"""Tests for the interactive search screen."""

import curses
from unittest.mock import MagicMock, patch

import pytest

from oxidoc.crate_info import CrateInfo
from oxidoc.doc_kind import DocKind
from oxidoc.qualified_path import QualifiedPath
from oxidoc.query_facade import SearchIndex
from oxidoc.store_location import StoreLocation
from oxidoc.tui import Action, SearchScreen, show_in_pager


def location(path: str) -> StoreLocation:
    mod_path = QualifiedPath.parse(path)
    return StoreLocation(CrateInfo("crate", "0.1.0"), mod_path, mod_path.name() or "", DocKind.STRUCT)


@pytest.fixture
def screen() -> SearchScreen:
    """Create a search screen over a few locations."""
    index = SearchIndex()
    index.register([location("crate::Alpha"), location("crate::Beta"), location("crate::Gamma")])
    return SearchScreen(index)


def type_text(screen: SearchScreen, text: str) -> None:
    for c in text:
        assert screen.handle_key(c) is Action.CONTINUE


def test_typing_filters_results(screen: SearchScreen) -> None:
    """Verify that typed characters extend the query."""
    type_text(screen, "beta")
    assert screen.query == "beta"
    assert [display for display, _ in screen.results] == ["crate::Beta [Struct] (crate 0.1.0)"]
    assert screen.selected_location() == location("crate::Beta")


def test_backspace_widens_results(screen: SearchScreen) -> None:
    """Verify that backspace removes the last character."""
    type_text(screen, "betax")
    assert screen.results == []
    assert screen.handle_key(curses.KEY_BACKSPACE) is Action.CONTINUE
    assert screen.query == "beta"
    assert len(screen.results) == 1


def test_cursor_wraps(screen: SearchScreen) -> None:
    """Verify that arrow keys wrap around the result list."""
    assert len(screen.results) == 3
    screen.handle_key(curses.KEY_UP)
    assert screen.cursor == 2
    screen.handle_key(curses.KEY_DOWN)
    assert screen.cursor == 0


def test_enter_and_escape(screen: SearchScreen) -> None:
    """Verify the open and quit actions."""
    assert screen.handle_key("\n") is Action.OPEN
    assert screen.handle_key("\x1b") is Action.QUIT
    type_text(screen, "zzz")
    assert screen.handle_key("\n") is Action.CONTINUE
    assert screen.selected_location() is None


def test_draw_highlights_cursor(screen: SearchScreen) -> None:
    """Verify that draw writes the prompt and marks the selected row."""
    window = MagicMock()
    window.getmaxyx.return_value = (10, 40)
    screen.draw(window)
    window.addnstr.assert_any_call(0, 0, "> ", 39)
    highlighted = [c for c in window.addnstr.call_args_list if c.args[-1] == curses.A_REVERSE]
    assert len(highlighted) == 1


def test_show_in_pager_uses_pager_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify that $PAGER is split and fed the page text."""
    monkeypatch.setenv("PAGER", "more -s")
    with patch("oxidoc.tui.subprocess.run") as run:
        show_in_pager("page")
    run.assert_called_once_with(["more", "-s"], input=b"page", check=False)
