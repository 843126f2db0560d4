"""Logic for keeping the best N scored lines."""

import heapq

from oxidoc.fuzzy_score import Score


class SortedResultSet:
    """A bounded min-heap of the ``limit`` best-scoring line indices.

    Ranking is by quality, then by earlier window start, then by earlier
    line index.
    """

    def __init__(self, limit: int) -> None:
        """Initialize an empty set holding at most ``limit`` entries."""
        self.limit = limit
        self.heap: list[tuple[float, int, int]] = []

    def push(self, idx: int, score: Score) -> None:
        if self.limit <= 0:
            return
        entry = (score.quality, -score.start, -idx)
        if len(self.heap) < self.limit:
            heapq.heappush(self.heap, entry)
        elif entry > self.heap[0]:
            heapq.heapreplace(self.heap, entry)

    def __len__(self) -> int:
        return len(self.heap)

    def indices(self) -> list[int]:
        """Return line indices, best first."""
        return [-neg_idx for _, _, neg_idx in sorted(self.heap, reverse=True)]
