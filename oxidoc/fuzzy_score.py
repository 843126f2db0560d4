"""Logic for scoring one line against a fuzzy query."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Score:
    """Quality of a match and where its window starts."""

    quality: float
    start: int


def best_window(query: str, line: str) -> tuple[int, int] | None:
    """Return the shortest ``[start, end)`` of ``line`` containing ``query``
    as a subsequence, starting at an occurrence of its first character.

    Both arguments must already be lower-cased. On equal length the earliest
    window wins.
    """
    best: tuple[int, int] | None = None
    start = line.find(query[0])
    while start != -1:
        qi = 0
        end = -1
        for idx in range(start, len(line)):
            if line[idx] == query[qi]:
                qi += 1
                if qi == len(query):
                    end = idx + 1
                    break
        if end == -1:
            # no later start can match either
            break
        if best is None or end - start < best[1] - best[0]:
            best = (start, end)
        start = line.find(query[0], start + 1)
    return best


def fuzzy_score(query: str, line: str) -> Score | None:
    """Score ``line`` against ``query``, or return None if it does not match.

    ``quality = (len(query) / window_length) / len(line)``; denser and
    shorter matches score higher. An empty query matches everything.
    """
    if not query:
        return Score(1.0, 0)
    if not line:
        return None
    window = best_window(query.lower(), line.lower())
    if window is None:
        return None
    start, end = window
    return Score((len(query) / (end - start)) / len(line), start)
