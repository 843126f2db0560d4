"""Data model for the doc-comment attributes of an item."""

from dataclasses import dataclass, field


@dataclass
class Attributes:
    """Doc strings of an item, in source order."""

    doc_strings: list[str] = field(default_factory=list)

    def summary(self) -> str:
        """Return the first doc string, used in listings."""
        return self.doc_strings[0].strip() if self.doc_strings else ""

    def text(self) -> str:
        """Return the full markdown body."""
        return "\n".join(self.doc_strings)

    def extend(self, other: "Attributes") -> None:
        """Append the doc strings of ``other``."""
        self.doc_strings.extend(other.doc_strings)
