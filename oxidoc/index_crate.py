"""Orchestration logic for indexing crates into the documentation store."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from oxidoc.crate_info import CrateInfo
from oxidoc.documentation import Documentation
from oxidoc.errors import OxidocError
from oxidoc.flattener import flatten
from oxidoc.impl_resolver import resolve_impls
from oxidoc.manifest import find_entry_point, read_manifest
from oxidoc.module_loader import read_source
from oxidoc.registry_paths import registry_crate_dirs
from oxidoc.store import Store
from oxidoc.store_location import StoreLocation
from oxidoc.visitor import build_crate_tree

logger = logging.getLogger(__name__)


@dataclass
class IndexReport:
    """Outcome of indexing several crates."""

    indexed: list[CrateInfo] = field(default_factory=list)
    failed: list[tuple[Path, OxidocError]] = field(default_factory=list)


def crate_ident(name: str) -> str:
    """Return the identifier a crate is referred to by in paths."""
    return name.replace("-", "_")


def document_source(
    text: str,
    crate_info: CrateInfo,
    file: Path | None = None,
    *,
    skip_doc_hidden: bool = True,
) -> list[Documentation]:
    """Run visit, impl resolution and flattening over one crate root source."""
    tree = build_crate_tree(text, crate_ident(crate_info.name), file, skip_doc_hidden=skip_doc_hidden)
    impls = resolve_impls(tree)
    return flatten(tree, impls, crate_info)


def index_crate(crate_dir: Path, store: Store, config: dict[str, Any] | None = None) -> list[StoreLocation]:
    """Index the crate at ``crate_dir`` and persist its records.

    Fails fast with ManifestError, EntryPointMissingError, ParseError or
    StoreIOError.
    """
    crate_dir = Path(crate_dir)
    crate_info = read_manifest(crate_dir)
    entry = find_entry_point(crate_dir)
    skip_hidden = bool(((config or {}).get("index") or {}).get("skip_doc_hidden", True))
    logger.info("Indexing %s from %s", crate_info, entry)

    records = document_source(read_source(entry), crate_info, entry, skip_doc_hidden=skip_hidden)
    return store.write_crate(crate_info, records)


def index_registry(registry: Path, store: Store, config: dict[str, Any] | None = None) -> IndexReport:
    """Index every crate under ``<registry>/src``, continuing past failures."""
    report = IndexReport()
    crate_dirs = registry_crate_dirs(registry)
    for i, crate_dir in enumerate(crate_dirs, start=1):
        print(f"[{i}/{len(crate_dirs)}] {crate_dir.name}")
        try:
            index_crate(crate_dir, store, config)
        except OxidocError as e:
            logger.warning("Failed to index %s: %s", crate_dir, e)
            report.failed.append((crate_dir, e))
            continue
        report.indexed.append(read_manifest(crate_dir))
    return report
