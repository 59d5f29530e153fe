"""Configuration loading for tcogen (.tcogen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

CONFIG_FILENAME = ".tcogen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class TcogenConfig:
    """Represents the settings defined in .tcogen.yml."""

    root: Path
    exclude_paths: List[str] = field(default_factory=list)
    skip_suffixes: List[str] = field(default_factory=list)


def load_config(config_path: Path, *, required: bool = False) -> TcogenConfig:
    """Load configuration from disk.

    An absent file yields the defaults unless ``required`` is set, in which
    case it raises ConfigError.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.is_file():
        if required:
            raise ConfigError(f"configuration file not found: {config_path}")
        return TcogenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    return TcogenConfig(
        root=root,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        skip_suffixes=_as_str_list(data.get("skip_suffixes")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "TcogenConfig", "load_config"]
