"""Logic for incremental fuzzy search over a fixed list of lines."""

import logging

from oxidoc.fuzzy_score import fuzzy_score
from oxidoc.sorted_result_set import SortedResultSet

logger = logging.getLogger(__name__)

DEFAULT_VISIBLE_LIMIT = 40


class Search:
    """Stack-based incremental matcher.

    ``frames[0]`` holds every line; each appended character pushes the
    subset of the top frame that still matches, and backspace pops it, so
    there is exactly one frame per query character above the bottom one.
    """

    def __init__(self, lines: list[str], visible_limit: int = DEFAULT_VISIBLE_LIMIT) -> None:
        """Initialize the search with the universe of lines."""
        self.lines = lines
        self.visible_limit = visible_limit
        self.query = ""
        self.frames: list[list[int]] = [list(range(len(lines)))]
        self.results: list[int] = []
        self.cursor = 0
        self.rank()

    def append(self, text: str) -> None:
        """Extend the query one character at a time."""
        for c in text:
            self.query += c
            top = self.frames[-1]
            self.frames.append([i for i in top if fuzzy_score(self.query, self.lines[i]) is not None])
        if text:
            self.rank()

    def backspace(self) -> None:
        """Drop the last query character and reveal the previous frame."""
        if not self.query:
            return
        self.query = self.query[:-1]
        self.frames.pop()
        self.rank()

    def set_query(self, text: str) -> None:
        """Move to ``text`` through the common prefix with the current query."""
        common = 0
        for a, b in zip(self.query, text, strict=False):
            if a != b:
                break
            common += 1
        while len(self.query) > common:
            self.backspace()
        self.append(text[common:])

    def rank(self) -> None:
        """Recompute the visible results from the top frame."""
        best = SortedResultSet(self.visible_limit)
        for i in self.frames[-1]:
            score = fuzzy_score(self.query, self.lines[i])
            if score is not None:
                best.push(i, score)
        self.results = best.indices()
        self.cursor = min(self.cursor, max(len(self.results) - 1, 0))
        logger.debug("Query %r: %d candidates, %d visible", self.query, len(self.frames[-1]), len(self.results))

    def candidates(self) -> list[int]:
        """Return every line index that matches the current query."""
        return list(self.frames[-1])

    def visible(self) -> list[int]:
        return list(self.results)

    def up(self) -> None:
        if self.results:
            self.cursor = (self.cursor - 1) % len(self.results)

    def down(self) -> None:
        if self.results:
            self.cursor = (self.cursor + 1) % len(self.results)

    def selection(self) -> int | None:
        """Return the line index under the cursor."""
        return self.results[self.cursor] if self.results else None
