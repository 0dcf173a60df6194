"""Configuration loading for cookstack (.cookstack.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

import yaml

from .ignore import IGNORE_FILENAME

CONFIG_FILENAME = ".cookstack.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CookstackConfig:
    """Represents the settings defined in .cookstack.yml."""

    root: Path
    cookbook_paths: List[Path] = field(default_factory=list)
    ignore_file: str = IGNORE_FILENAME
    exclude_paths: List[str] = field(default_factory=list)
    log_file: Optional[Path] = None


def load_config(config_path: Path) -> CookstackConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CookstackConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    cookbook_paths = [root / entry for entry in _as_str_list(data.get("cookbook_paths"))]
    ignore_file = _as_str(data.get("ignore_file")) or IGNORE_FILENAME
    if "/" in ignore_file:
        raise ConfigError("ignore_file must be a bare filename")

    log_file_str = _as_str(data.get("log_file"))
    log_file = root / log_file_str if log_file_str else None

    return CookstackConfig(
        root=root,
        cookbook_paths=cookbook_paths,
        ignore_file=ignore_file,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        log_file=log_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "CookstackConfig", "load_config"]
