"""Logic for persisting documentation records under a registry root."""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
from collections import defaultdict
from pathlib import Path

from oxidoc.codec import decode_documentation, decode_index, encode_documentation, encode_index
from oxidoc.crate_info import CrateInfo
from oxidoc.documentation import Documentation
from oxidoc.errors import FilenameDecodeError, StoreIOError
from oxidoc.file_name_encoding import decode_doc_filename
from oxidoc.levenshtein import levenshtein
from oxidoc.qualified_path import SEPARATOR
from oxidoc.registry_paths import doc_root
from oxidoc.store_location import DISCRIMINATOR_MARK, DOC_SUFFIX, StoreLocation
from oxidoc.version_key import version_key

logger = logging.getLogger(__name__)

INDEX_FILE = "store"
INDEX_TMP_FILE = "store.tmp"
DISCRIMINATOR_LENGTH = 6


def discriminator_for(doc: Documentation, payload: bytes) -> str:
    """Return the short content hash that separates colliding records."""
    digest = hashlib.sha1(doc.signature().encode("utf-8") + payload)  # noqa: S324
    return digest.hexdigest()[:DISCRIMINATOR_LENGTH]


def discriminator_of(file_name: str) -> str:
    """Return the discriminator encoded in a record file name, if any."""
    stem = file_name.removesuffix(DOC_SUFFIX)
    _, mark, discriminator = stem.rpartition(DISCRIMINATOR_MARK)
    return discriminator if mark else ""


class Store:
    """Record files and the global index below ``<registry>/doc``."""

    def __init__(self, registry: Path) -> None:
        """Initialize the store for a registry root."""
        self.registry = Path(registry)
        self.root = doc_root(self.registry)
        self.index_file = self.root / INDEX_FILE
        self._locations: list[StoreLocation] | None = None
        self._keywords: dict[str, set[int]] | None = None

    def record_path(self, location: StoreLocation) -> Path:
        return self.root / location.relative_path()

    def crate_dir(self, crate_info: CrateInfo) -> Path:
        return self.root / crate_info.dir_name

    # Writing

    def assign_locations(self, records: list[Documentation]) -> list[tuple[StoreLocation, bytes]]:
        """Pair each record with its location and encoded bytes.

        Records that would share a file get a content-hash discriminator.
        Records that are equal even after that collapse, the later one winning.
        """
        assigned: dict[str, tuple[StoreLocation, bytes]] = {}
        for doc in records:
            payload = encode_documentation(doc)
            location = doc.location()
            key = str(location.relative_path()).casefold()
            if key in assigned:
                location = doc.location(discriminator_for(doc, payload))
                key = str(location.relative_path()).casefold()
                logger.debug("Disambiguated %s as %s", location.mod_path, location.file_name())
            assigned[key] = (location, payload)
        return list(assigned.values())

    def write_crate(self, crate_info: CrateInfo, records: list[Documentation]) -> list[StoreLocation]:
        """Replace every record of one crate version, then rewrite the index."""
        crate_dir = self.crate_dir(crate_info)
        assigned = self.assign_locations(records)
        try:
            if crate_dir.exists():
                shutil.rmtree(crate_dir)
            for location, payload in assigned:
                path = self.record_path(location)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(payload)
        except OSError as e:
            msg = "Failed to write documentation"
            raise StoreIOError(msg, crate_dir) from e
        locations = [loc for loc, _ in assigned]

        previous = self.read_index()
        if previous is None:
            previous = self.scan()
        merged = [loc for loc in previous if loc.crate_info != crate_info] + locations
        self.write_index(merged)
        logger.info("Stored %d records for %s", len(locations), crate_info)
        return locations

    def write_index(self, locations: list[StoreLocation]) -> None:
        """Atomically replace the global index."""
        tmp = self.root / INDEX_TMP_FILE
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(encode_index(locations))
            os.replace(tmp, self.index_file)
        except OSError as e:
            msg = "Failed to write store index"
            raise StoreIOError(msg, self.index_file) from e
        self._locations = sorted(locations, key=StoreLocation.sort_key)
        self._keywords = None

    # Reading

    def read_index(self) -> list[StoreLocation] | None:
        """Return the index contents, or None if it is missing or unreadable."""
        if not self.index_file.is_file():
            return None
        try:
            return decode_index(self.index_file.read_bytes())
        except (OSError, ValueError):
            logger.exception("Store index %s is unreadable; falling back to a scan", self.index_file)
            return None

    def scan(self, directory: Path | None = None) -> list[StoreLocation]:
        """Rebuild locations by reading every record file below ``directory``."""
        base = directory or self.root
        if not base.is_dir():
            return []
        locations: list[StoreLocation] = []
        for path in sorted(base.rglob(f"*{DOC_SUFFIX}")):
            try:
                name = record_name_of(path.name)
                doc = decode_documentation(path.read_bytes())
            except FilenameDecodeError:
                logger.warning("Skipping record with malformed file name %s", path)
                continue
            except (OSError, ValueError):
                logger.warning("Skipping unreadable record %s", path)
                continue
            if name != doc.name:
                logger.warning("Record %s stores item %r", path, doc.name)
            locations.append(doc.location(discriminator_of(path.name)))
        return sorted(locations, key=StoreLocation.sort_key)

    def all_locations(self) -> list[StoreLocation]:
        """Return every known location, from the index or a directory scan."""
        if self._locations is None:
            locations = self.read_index()
            if locations is None:
                locations = self.scan()
            self._locations = locations
        return self._locations

    def load(self, location: StoreLocation) -> Documentation:
        """Read one record, falling back to a scan of its crate directory."""
        path = self.record_path(location)
        if not path.is_file():
            path = self.find_record(location)
        try:
            return decode_documentation(path.read_bytes())
        except OSError as e:
            msg = "Failed to read documentation"
            raise StoreIOError(msg, path) from e
        except ValueError as e:
            msg = "Corrupt documentation record"
            raise StoreIOError(msg, path) from e

    def find_record(self, location: StoreLocation) -> Path:
        crate_dir = self.crate_dir(location.crate_info)
        wanted = location.item_key()
        if crate_dir.is_dir():
            for path in sorted(crate_dir.rglob(f"*{DOC_SUFFIX}")):
                try:
                    doc = decode_documentation(path.read_bytes())
                except (OSError, ValueError):
                    continue
                if doc.location(discriminator_of(path.name)).item_key() == wanted:
                    return path
        msg = "Documentation record not found"
        raise StoreIOError(msg, self.record_path(location))

    def keyword_map(self) -> dict[str, set[int]]:
        """Map each lower-cased path segment to the locations containing it."""
        if self._keywords is None:
            keywords: dict[str, set[int]] = defaultdict(set)
            for i, location in enumerate(self.all_locations()):
                for segment in location.mod_path.segments:
                    keywords[segment.lower()].add(i)
            self._keywords = dict(keywords)
        return self._keywords

    def lookup_name(self, query: str) -> list[StoreLocation]:
        """Find locations whose path contains ``query``, case-insensitively.

        Each item is reported once, from the newest crate version that has
        it. Results are ordered by edit distance to the query.
        """
        needle = query.strip().lower()
        if not needle:
            return []
        locations = self.all_locations()
        keywords = self.keyword_map()
        candidates: set[int] | None = None
        for segment in (s for s in needle.split(SEPARATOR) if s):
            if segment in keywords:
                hits = keywords[segment]
                candidates = hits if candidates is None else candidates & hits
        indices = sorted(candidates) if candidates is not None else range(len(locations))

        newest: dict[tuple, StoreLocation] = {}
        for i in indices:
            location = locations[i]
            if needle not in str(location.mod_path).lower():
                continue
            key = location.item_key()
            current = newest.get(key)
            if current is None or version_key(location.crate_info.version) > version_key(
                current.crate_info.version
            ):
                newest[key] = location
        return sorted(
            newest.values(),
            key=lambda loc: (levenshtein(str(loc.mod_path).lower(), needle), str(loc.mod_path)),
        )


def record_name_of(file_name: str) -> str:
    """Decode a record file name back to the item name it stores.

    Kind prefixes end in ``-`` and encoded names never contain a raw ``-``.
    """
    stem = file_name.removesuffix(DOC_SUFFIX).split(DISCRIMINATOR_MARK, 1)[0]
    _, _, encoded = stem.rpartition("-")
    return decode_doc_filename(encoded)
