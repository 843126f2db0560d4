"""Item visibility as written in the source."""

from enum import Enum


class Visibility(Enum):
    """Visibility of an item. ``INHERITED`` means no modifier was written."""

    PUBLIC = "Public"
    PRIVATE = "Private"
    INHERITED = "Inherited"

    @classmethod
    def from_modifier(cls, text: str | None) -> "Visibility":
        """Map a visibility modifier such as ``pub`` or ``pub(crate)``."""
        if not text:
            return cls.INHERITED
        compact = "".join(text.split())
        if compact == "pub":
            return cls.PUBLIC
        # pub(crate), pub(super), pub(in path) and `crate`
        return cls.PRIVATE

    def keyword(self) -> str:
        """Return the keyword shown in signatures."""
        return "pub" if self is Visibility.PUBLIC else ""
