#!/usr/bin/env python3
"""
Purpose:
    Loads Collectory configuration. Later layers override earlier ones:

        built-in defaults
        < ~/.config/collectory/config.json    (global)
        < ./collectory.json                   (project)
        < COLLECTORY_SCHEMA_PATHS / COLLECTORY_LOG_LEVEL

    JSON layers are merged recursively, so a project file may set
    `logging.level` without repeating `logging.format`.
"""

import copy
import os
from pathlib import Path
from typing import Any, Callable, Dict, Final, List, Tuple

from collectory.core.utils import load_json_file, merge_dicts

DEFAULT_CONFIG: Final[Dict[str, Any]] = {
    "schema_paths": [str(Path("./collection_schemas").resolve())],
    "logging": {
        "level": "WARNING",
        "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    },
}

GLOBAL_CONFIG_PATH: Final[Path] = Path.home() / ".config" / "collectory" / "config.json"

PROJECT_CONFIG_NAME: Final[str] = "collectory.json"


def _split_paths_env(value: str) -> List[str]:
    """Split an os.pathsep list, dropping empty entries and expanding '~' (no resolve)."""
    parts = [p.strip() for p in value.split(os.pathsep)]
    return [str(Path(p).expanduser()) for p in parts if p]


# env var -> (key path in the config, converter)
ENV_OVERRIDES: Final[Dict[str, Tuple[Tuple[str, ...], Callable[[str], Any]]]] = {
    "COLLECTORY_SCHEMA_PATHS": (("schema_paths",), _split_paths_env),
    "COLLECTORY_LOG_LEVEL": (("logging", "level"), str.strip),
}


# --- Public API --- #

def config_layers() -> List[Tuple[str, Path]]:
    """JSON config files as (label, path), lowest precedence first."""
    return [
        ("global", GLOBAL_CONFIG_PATH),
        ("project", Path.cwd() / PROJECT_CONFIG_NAME),
    ]


def load_config() -> Dict[str, Any]:
    """
    Build the effective configuration.

    Raises:
        ValueError: a config file holds invalid JSON, or the merged result
            has the wrong shape (`schema_paths` not a list of strings,
            `logging` not an object).
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    for _, path in config_layers():
        config = merge_dicts(config, load_json_file(path))

    for var, (keys, convert) in ENV_OVERRIDES.items():
        raw = os.getenv(var)
        if raw:
            _set_nested(config, keys, convert(raw))

    _check_shape(config)
    return config


# --- Internals --- #

def _set_nested(config: Dict[str, Any], keys: Tuple[str, ...], value: Any) -> None:
    node = config
    for key in keys[:-1]:
        if not isinstance(node.get(key), dict):
            node[key] = {}
        node = node[key]
    node[keys[-1]] = value


def _check_shape(config: Dict[str, Any]) -> None:
    paths = config.get("schema_paths")
    if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
        raise ValueError(f"Config 'schema_paths' must be a list of paths, got {paths!r}")
    if not isinstance(config.get("logging"), dict):
        raise ValueError("Config 'logging' must be an object")
