"""Logic binding the fuzzy matcher to store locations."""

from __future__ import annotations

import logging
import threading

from oxidoc.fuzzy_search import DEFAULT_VISIBLE_LIMIT, Search
from oxidoc.levenshtein import levenshtein
from oxidoc.store_location import StoreLocation

logger = logging.getLogger(__name__)


class SearchIndex:
    """Registered locations plus one incremental search session.

    All state is guarded by a single lock so a UI can reset the session
    between screens.
    """

    def __init__(self, visible_limit: int = DEFAULT_VISIBLE_LIMIT) -> None:
        """Initialize an empty index."""
        self.visible_limit = visible_limit
        self.lock = threading.Lock()
        self.locations: list[StoreLocation] = []
        self.positions: dict[StoreLocation, int] = {}
        self.session: Search | None = None

    def register(self, locations: list[StoreLocation]) -> None:
        """Add locations, ignoring ones already registered; order is kept."""
        with self.lock:
            added = 0
            for location in locations:
                if location not in self.positions:
                    self.positions[location] = len(self.locations)
                    self.locations.append(location)
                    added += 1
            if added:
                self.session = None
            logger.debug("Registered %d new locations (%d total)", added, len(self.locations))

    def reset(self) -> None:
        """Forget the current query session."""
        with self.lock:
            self.session = None

    def clear(self) -> None:
        """Forget every registered location."""
        with self.lock:
            self.locations = []
            self.positions = {}
            self.session = None

    def run_query(self, text: str) -> list[tuple[str, int]]:
        """Return ``(display string, location id)`` pairs for a query.

        Each registered location appears at most once, so records sharing a
        path stay distinct. Results are stably re-sorted by edit distance
        between each location's path and ``text``.
        """
        with self.lock:
            if self.session is None:
                self.session = Search([loc.search_key() for loc in self.locations], self.visible_limit)
            self.session.set_query(text)
            results = [(str(self.locations[idx]), idx) for idx in self.session.visible()]
            results.sort(key=lambda pair: levenshtein(str(self.locations[pair[1]].mod_path), text))
            return results

    def get_store_location(self, idx: int) -> StoreLocation:
        with self.lock:
            return self.locations[idx]


default_index = SearchIndex()


def register_locations(locations: list[StoreLocation]) -> None:
    default_index.register(locations)


def query(text: str) -> list[tuple[str, int]]:
    """Run ``text`` against the process-wide index."""
    return default_index.run_query(text)


def get_store_location(idx: int) -> StoreLocation:
    return default_index.get_store_location(idx)


def reset_session() -> None:
    default_index.reset()
