"""Logic for reading the crate name and version from Cargo.toml."""

import tomllib
from pathlib import Path

from oxidoc.crate_info import CrateInfo
from oxidoc.errors import EntryPointMissingError, ManifestError

MANIFEST_NAME = "Cargo.toml"
ENTRY_POINTS = ("src/lib.rs", "src/main.rs")


def read_manifest(crate_dir: Path) -> CrateInfo:
    """Return the ``[package]`` name and version of the crate at ``crate_dir``."""
    path = Path(crate_dir) / MANIFEST_NAME
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        msg = f"No {MANIFEST_NAME} found in {crate_dir}"
        raise ManifestError(msg) from e
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"Could not read {path}: {e}"
        raise ManifestError(msg) from e

    package = data.get("package")
    if not isinstance(package, dict):
        msg = f"{path} has no [package] table"
        raise ManifestError(msg)
    name = package.get("name")
    version = package.get("version")
    if not isinstance(name, str) or not name:
        msg = f"{path} has no package name"
        raise ManifestError(msg)
    if not isinstance(version, str) or not version:
        # workspace-inherited versions ({ workspace = true }) are not supported
        msg = f"{path} has no literal package version"
        raise ManifestError(msg)
    return CrateInfo(name, version)


def find_entry_point(crate_dir: Path) -> Path:
    """Return ``src/lib.rs``, else ``src/main.rs``."""
    for relative in ENTRY_POINTS:
        candidate = Path(crate_dir) / relative
        if candidate.is_file():
            return candidate
    msg = f"Neither src/lib.rs nor src/main.rs exists in {crate_dir}"
    raise EntryPointMissingError(msg)
