"""Logic for loading and merging configuration files."""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from oxidoc.deep_merge import deep_merge
from oxidoc.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV = "OXIDOC_CONFIG"

DEFAULT_CONFIG: dict[str, Any] = {
    "registry": {
        # None means ~/.cargo/registry
        "root": None,
    },
    "search": {
        "visible_limit": 40,
    },
    "render": {
        # None means the terminal width
        "width": None,
        "style": "monokai",
        "default_language": "rust",
        "color": True,
    },
    "index": {
        "skip_doc_hidden": True,
    },
}


def default_config_path() -> Path:
    return Path.home() / ".config" / "oxidoc" / "config.yml"


def find_config_path(path: str | None = None) -> Path | None:
    """Return the configuration file to read, if any.

    Precedence: the explicit ``path``, then ``$OXIDOC_CONFIG``, then the
    per-user default location when it exists.
    """
    if path:
        return Path(path)
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env)
    default = default_config_path()
    return default if default.exists() else None


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    p = find_config_path(path)
    if p is None or not p.exists():
        if p is not None:
            logger.warning("Config file %s not found; using defaults", p)
        return config
    try:
        user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        msg = f"Failed to read config file {p}: {e}"
        raise ConfigError(msg) from e
    if not isinstance(user_config, dict):
        msg = f"Config file {p} must contain a mapping"
        raise ConfigError(msg)
    return deep_merge(config, user_config)
