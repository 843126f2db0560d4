"""Path-qualified names such as ``crate::module::Item``."""

from __future__ import annotations

from dataclasses import dataclass

SEPARATOR = "::"


@dataclass(frozen=True, order=True)
class QualifiedPath:
    """An ordered, immutable sequence of identifier segments.

    The first segment of every indexed path is the crate name, so the crate
    root module is the one-segment path ``[crate]``.
    """

    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> QualifiedPath:
        """Parse ``a::b::c`` into a path. Empty segments are dropped."""
        return cls(tuple(s for s in text.split(SEPARATOR) if s))

    @classmethod
    def of(cls, *segments: str) -> QualifiedPath:
        """Build a path from individual segments."""
        return cls(tuple(segments))

    def push(self, segment: str) -> QualifiedPath:
        """Return a new path with ``segment`` appended."""
        if not segment:
            msg = "Path segments must be non-empty"
            raise ValueError(msg)
        return QualifiedPath((*self.segments, segment))

    def pop(self) -> QualifiedPath:
        """Return a new path without its last segment."""
        return QualifiedPath(self.segments[:-1])

    def parent(self) -> QualifiedPath | None:
        """Return the enclosing path, or None for the empty path."""
        if not self.segments:
            return None
        return QualifiedPath(self.segments[:-1])

    def head(self) -> str | None:
        """Return the first segment."""
        return self.segments[0] if self.segments else None

    def name(self) -> str | None:
        """Return the last segment."""
        return self.segments[-1] if self.segments else None

    def tail(self) -> QualifiedPath:
        """Return the path without its first (crate) segment."""
        return QualifiedPath(self.segments[1:])

    def join(self, other: QualifiedPath) -> QualifiedPath:
        """Return this path followed by every segment of ``other``."""
        return QualifiedPath(self.segments + other.segments)

    def starts_with(self, prefix: QualifiedPath) -> bool:
        """Return True when ``prefix`` is a leading part of this path."""
        return self.segments[: len(prefix.segments)] == prefix.segments

    def to_fs_path(self) -> str:
        """Project the path onto a relative directory, e.g. ``a/b/c/``."""
        if not self.segments:
            return ""
        return "/".join(self.segments) + "/"

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)


def join(a: QualifiedPath, b: QualifiedPath) -> QualifiedPath:
    """Concatenate two paths."""
    return a.join(b)
