"""Data model for the crate a set of records belongs to."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class CrateInfo:
    """Name and version of an indexed crate; together the store partition key."""

    name: str
    version: str

    def __post_init__(self) -> None:
        """Reject empty names and versions."""
        if not self.name or not self.version:
            msg = f"Crate name and version must be non-empty: {self.name!r} {self.version!r}"
            raise ValueError(msg)

    @property
    def dir_name(self) -> str:
        """Directory name of the crate under the doc root, ``name-version``."""
        return f"{self.name}-{self.version}"

    def __str__(self) -> str:
        return f"{self.name} {self.version}"
