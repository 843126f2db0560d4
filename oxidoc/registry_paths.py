"""Logic for locating the registry root and the directories below it."""

import os
from pathlib import Path
from typing import Any

REGISTRY_ENV = "OXIDOC_REGISTRY"


def registry_root(config: dict[str, Any] | None = None, override: str | None = None) -> Path:
    """Return the registry root.

    Precedence: ``override`` (the command line), then ``$OXIDOC_REGISTRY``,
    then ``registry.root`` from the configuration, then ``~/.cargo/registry``.
    """
    if override:
        return Path(override).expanduser()
    env = os.environ.get(REGISTRY_ENV)
    if env:
        return Path(env).expanduser()
    configured = ((config or {}).get("registry") or {}).get("root")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cargo" / "registry"


def doc_root(registry: Path) -> Path:
    return registry / "doc"


def src_root(registry: Path) -> Path:
    return registry / "src"


def registry_crate_dirs(registry: Path) -> list[Path]:
    """Return every unpacked crate source under ``<registry>/src/*/*``, sorted."""
    root = src_root(registry)
    if not root.is_dir():
        return []
    return sorted(p for index_dir in root.iterdir() if index_dir.is_dir() for p in index_dir.iterdir() if p.is_dir())
