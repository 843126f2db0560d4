"""Interactive curses front end over the query facade."""

from __future__ import annotations

import curses
import logging
import os
import shlex
import subprocess
from enum import Enum
from typing import TYPE_CHECKING

from oxidoc.errors import OxidocError
from oxidoc.markdown_renderer import RenderOptions
from oxidoc.markup import format_documentation

if TYPE_CHECKING:
    from oxidoc.query_facade import SearchIndex
    from oxidoc.store import Store
    from oxidoc.store_location import StoreLocation

logger = logging.getLogger(__name__)

ESCAPE = 27
ENTER_KEYS = {"\n", "\r", curses.KEY_ENTER, 10, 13}
BACKSPACE_KEYS = {"\x7f", "\b", curses.KEY_BACKSPACE, 127, 8}
PROMPT = "> "


class Action(Enum):
    CONTINUE = "continue"
    OPEN = "open"
    QUIT = "quit"


class SearchScreen:
    """Query line, ranked results and a wrapping cursor.

    ``handle_key`` has no terminal side effects so it can be driven by tests.
    """

    def __init__(self, index: SearchIndex) -> None:
        """Initialize the screen with an empty query."""
        self.index = index
        self.query = ""
        self.results: list[tuple[str, int]] = []
        self.cursor = 0
        self.refresh()

    def refresh(self) -> None:
        self.results = self.index.run_query(self.query)
        self.cursor = min(self.cursor, max(len(self.results) - 1, 0))

    def handle_key(self, key: int | str) -> Action:
        """Apply one key press and return what the caller should do next."""
        if key in (ESCAPE, "\x1b"):
            return Action.QUIT
        if key in ENTER_KEYS:
            return Action.OPEN if self.results else Action.CONTINUE
        if key in BACKSPACE_KEYS:
            if self.query:
                self.query = self.query[:-1]
                self.refresh()
            return Action.CONTINUE
        if key == curses.KEY_UP:
            if self.results:
                self.cursor = (self.cursor - 1) % len(self.results)
            return Action.CONTINUE
        if key == curses.KEY_DOWN:
            if self.results:
                self.cursor = (self.cursor + 1) % len(self.results)
            return Action.CONTINUE
        if isinstance(key, str) and key.isprintable():
            self.query += key
            self.cursor = 0
            self.refresh()
        return Action.CONTINUE

    def selected_location(self) -> StoreLocation | None:
        if not self.results:
            return None
        return self.index.get_store_location(self.results[self.cursor][1])

    def draw(self, window: curses.window) -> None:
        height, width = window.getmaxyx()
        window.erase()
        window.addnstr(0, 0, PROMPT + self.query, width - 1)
        for row, (display, _) in enumerate(self.results[: max(height - 2, 0)], start=2):
            attr = curses.A_REVERSE if row - 2 == self.cursor else curses.A_NORMAL
            window.addnstr(row, 0, display, width - 1, attr)
        window.move(0, min(len(PROMPT) + len(self.query), width - 1))
        window.refresh()


def show_in_pager(text: str) -> None:
    """Show ``text`` in ``$PAGER`` (``less -R`` by default)."""
    command = shlex.split(os.environ.get("PAGER", "less -R"))
    try:
        subprocess.run(command, input=text.encode("utf-8"), check=False)
    except OSError:
        logger.exception("Could not start pager %s", command)


def run_tui(index: SearchIndex, store: Store, options: RenderOptions | None = None) -> None:
    """Run the search screen until the user quits."""
    screen = SearchScreen(index)

    def loop(window: curses.window) -> None:
        while True:
            screen.draw(window)
            action = screen.handle_key(window.get_wch())
            if action is Action.QUIT:
                return
            if action is Action.OPEN:
                location = screen.selected_location()
                if location is None:
                    continue
                width = (options.width if options else None) or window.getmaxyx()[1]
                try:
                    page = format_documentation(store.load(location), width, options)
                except OxidocError as e:
                    page = f"error: {e}\n"
                curses.def_prog_mode()
                curses.endwin()
                show_in_pager(page)
                curses.reset_prog_mode()
                window.clear()

    curses.wrapper(loop)
