"""Logic for locating and reading the files of out-of-line modules."""

import logging
from pathlib import Path

from oxidoc.errors import StoreIOError

logger = logging.getLogger(__name__)


def module_file_candidates(
    owner_dir: Path, owner_file: Path, ident: str, path_override: str | None
) -> list[Path]:
    """Return the files a ``mod ident;`` declaration may live in, in order.

    ``owner_dir`` is the directory holding the children of the declaring
    module. A ``#[path]`` attribute is taken relative to the declaring file.
    """
    if path_override:
        return [owner_file.parent / path_override]
    return [owner_dir / f"{ident}.rs", owner_dir / ident / "mod.rs"]


def child_dir_for(module_file: Path) -> Path:
    """Return the directory that holds the children of a module file."""
    if module_file.name in ("mod.rs", "lib.rs", "main.rs"):
        return module_file.parent
    return module_file.parent / module_file.stem


def find_module_file(
    owner_dir: Path, owner_file: Path, ident: str, path_override: str | None = None
) -> Path | None:
    """Return the first existing candidate file, or None with a warning."""
    candidates = module_file_candidates(owner_dir, owner_file, ident, path_override)
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    logger.warning(
        "Module %s not found (looked in %s); skipping its contents",
        ident,
        ", ".join(str(c) for c in candidates),
    )
    return None


def read_source(path: Path) -> str:
    """Read a source file, mapping OS errors to StoreIOError."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = "Failed to read source file"
        raise StoreIOError(msg, path) from e
