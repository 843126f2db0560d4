"""Data model for the address of a documentation record in the store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from oxidoc.crate_info import CrateInfo
from oxidoc.doc_kind import DocKind
from oxidoc.file_name_encoding import encode_doc_filename
from oxidoc.qualified_path import QualifiedPath

DOC_SUFFIX = ".odoc"
DISCRIMINATOR_MARK = "~"


@dataclass(frozen=True)
class StoreLocation:
    """Identity of a record: crate, path, kind and name.

    ``discriminator`` is set only when two records of one indexing run would
    otherwise share a file; it becomes part of the file name.
    """

    crate_info: CrateInfo
    mod_path: QualifiedPath
    name: str
    kind: DocKind
    discriminator: str = ""

    def sort_key(self) -> tuple[str, str, tuple[str, ...], str, str, str]:
        return (
            self.crate_info.name,
            self.crate_info.version,
            self.mod_path.segments,
            self.kind.value,
            self.name,
            self.discriminator,
        )

    def item_key(self) -> tuple[str, QualifiedPath, DocKind, str, str]:
        """Identity of the item regardless of crate version."""
        return (self.crate_info.name, self.mod_path, self.kind, self.name, self.discriminator)

    def file_name(self) -> str:
        name = self.kind.file_prefix + encode_doc_filename(self.name)
        if self.discriminator:
            name += DISCRIMINATOR_MARK + self.discriminator
        return name + DOC_SUFFIX

    def relative_dir(self) -> PurePosixPath:
        """Directory of the record relative to the doc root."""
        parent = self.mod_path.parent() or QualifiedPath()
        segments = [encode_doc_filename(s) for s in parent.segments]
        return PurePosixPath(self.crate_info.dir_name, *segments)

    def relative_path(self) -> PurePosixPath:
        """File of the record relative to the doc root."""
        return self.relative_dir() / self.file_name()

    def search_key(self) -> str:
        """Text the fuzzy matcher runs against."""
        return f"{self.mod_path} ({self.crate_info})"

    def __str__(self) -> str:
        kind = self.kind.value
        if self.discriminator:
            kind += DISCRIMINATOR_MARK + self.discriminator
        return f"{self.mod_path} [{kind}] ({self.crate_info})"
