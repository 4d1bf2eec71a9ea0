"""Layered TOML configuration files.

A config directory holds `default.toml` and optional per-environment
overlays named after THREADVIEW_ENV (`development.toml`, `test.toml`, ...).
Both layers are optional; whatever exists is merged, overlay last.
"""

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

ENV_PREFIX = "THREADVIEW_"
CONFIG_DIR_VAR = f"{ENV_PREFIX}CONFIG_DIR"
ENVIRONMENT_VAR = f"{ENV_PREFIX}ENV"
DEFAULT_ENVIRONMENT = "development"
BASE_LAYER = "default"


def find_config_dir(start: Path | None = None) -> Path | None:
    """Locate the config directory.

    THREADVIEW_CONFIG_DIR wins and must exist. Otherwise the first `config/`
    directory found from `start` (the working directory) upwards is used.
    Returns None when there is none, which leaves settings at their defaults.
    """
    explicit = os.environ.get(CONFIG_DIR_VAR)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_VAR} does not point to a directory: {explicit}")
        return path

    start = start or Path.cwd()
    for directory in (start, *start.parents):
        candidate = directory / "config"
        if candidate.is_dir():
            return candidate
    return None


def active_environment() -> str:
    return os.environ.get(ENVIRONMENT_VAR) or DEFAULT_ENVIRONMENT


def layer_paths(config_dir: Path, environment: str) -> Iterator[Path]:
    """Existing layer files, lowest precedence first."""
    for name in (BASE_LAYER, environment):
        path = config_dir / f"{name}.toml"
        if path.is_file():
            yield path
        if name == environment:
            break


def read_layer(path: Path) -> dict[str, Any]:
    """Parse one TOML layer.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration layer not found: {path}") from None


def merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge layers left to right; nested tables merge, other values replace."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = merge_layers(current, value)
            else:
                merged[key] = value
    return merged


def load_config(config_dir: Path | None = None, environment: str | None = None) -> dict[str, Any]:
    """Read and merge every layer present for the active environment."""
    config_dir = config_dir or find_config_dir()
    if config_dir is None:
        return {}
    environment = environment or active_environment()
    return merge_layers(*(read_layer(path) for path in layer_paths(config_dir, environment)))
