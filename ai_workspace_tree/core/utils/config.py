"""Configuration loading utilities for the workspace tree renderer."""
from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from .constants import (
    DEFAULT_COUNT_FILES_ONLY,
    DEFAULT_INCLUDE_HIDDEN,
    DEFAULT_SORT_ENTRIES,
    DEFAULT_TREE_THRESHOLD,
)

CONFIG_FILENAMES: tuple[str, ...] = (".wstree.toml", "wstree.toml")
DEFAULT_CONFIG_PATHS = (
    Path.home() / ".config" / "wstree" / "config.toml",
    Path.home() / ".wstree.toml",
)
ENV_PREFIX = "WSTREE_"

_BOOL_FIELDS = frozenset(
    {
        "structured_logging",
        "tree_include_hidden",
        "tree_count_files_only",
        "tree_sort_entries",
    }
)
_INT_FIELDS = frozenset({"tree_threshold"})
_PATH_FIELDS = frozenset({"workspace_root", "custom_models_file"})


class ConfigError(ValueError):
    """Raised when a configuration source cannot be parsed."""


def find_config_in_parents(
    start_path: Path, config_name: str | Sequence[str] = ".wstree.toml"
) -> Optional[Path]:
    """Search parent directories starting from ``start_path`` for configuration files."""

    if isinstance(config_name, str):
        candidate_names: tuple[str, ...] = (config_name,)
    else:
        candidate_names = tuple(config_name)

    current = start_path.resolve()
    if current.is_file():
        current = current.parent

    while True:
        for name in candidate_names:
            candidate = current / name
            if candidate.is_file():
                return candidate.resolve()
        if current.parent == current:
            break
        current = current.parent
    return None


@dataclass
class Settings:
    """Runtime configuration for the tree renderer and model registry."""

    workspace_root: Path = Path(".")
    log_level: str = "INFO"
    structured_logging: bool = False
    model: str = "gpt-5.1"
    tree_threshold: int = DEFAULT_TREE_THRESHOLD
    tree_include_hidden: bool = DEFAULT_INCLUDE_HIDDEN
    tree_count_files_only: bool = DEFAULT_COUNT_FILES_ONLY
    tree_sort_entries: bool = DEFAULT_SORT_ENTRIES
    custom_models: tuple[Mapping[str, Any], ...] = ()
    custom_models_file: Optional[Path] = None
    extras: Dict[str, Any] = field(default_factory=dict)


def _cast_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in {"1", "true", "on", "yes", "y"}
    return bool(value)


def _cast_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
    raise ConfigError(f"{name} must be an integer, got {value!r}")


def _load_from_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    return {k.replace("-", "_"): v for k, v in data.items()}


def _load_from_env(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    env: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        field_name = key[len(prefix) :].lower()
        if field_name in _BOOL_FIELDS:
            env[field_name] = _cast_bool(value)
        elif field_name in _INT_FIELDS:
            env[field_name] = _cast_int(key, value)
        elif field_name in _PATH_FIELDS:
            env[field_name] = Path(value)
        elif field_name == "custom_models":
            try:
                env[field_name] = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{key} must be a JSON list: {exc}") from exc
        else:
            env[field_name] = value
    return env


def _discover_file_data() -> Dict[str, Any]:
    search_paths = []
    cwd = Path.cwd()
    project_config = find_config_in_parents(cwd, CONFIG_FILENAMES)
    if project_config:
        search_paths.append(project_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)
    seen_paths = set()
    for candidate in search_paths:
        if candidate in seen_paths:
            continue
        seen_paths.add(candidate)
        file_data = _load_from_file(candidate)
        if file_data:
            return file_data
    return {}


def load_settings(explicit_path: Optional[Path] = None) -> Settings:
    """Load configuration, merging file and environment sources."""

    file_data = _load_from_file(explicit_path) if explicit_path else _discover_file_data()
    env_data = _load_from_env()
    merged: Dict[str, Any] = {**file_data, **env_data}

    for key in _PATH_FIELDS:
        if isinstance(merged.get(key), str):
            merged[key] = Path(merged[key])
    for key in _BOOL_FIELDS:
        if key in merged:
            merged[key] = _cast_bool(merged[key])
    for key in _INT_FIELDS:
        if key in merged:
            merged[key] = _cast_int(key, merged[key])

    custom_models = merged.get("custom_models")
    if custom_models is not None:
        if not isinstance(custom_models, (list, tuple)):
            raise ConfigError("custom_models must be a list of tables")
        merged["custom_models"] = tuple(custom_models)

    # Only pass known fields to the dataclass constructor; keep extras for callers
    # that read experimental keys by attribute.
    known_fields = set(Settings.__dataclass_fields__) - {"extras"}
    init_kwargs = {key: value for key, value in merged.items() if key in known_fields}
    settings = Settings(**init_kwargs)
    for key, value in merged.items():
        if key not in known_fields:
            settings.extras[key] = value
            setattr(settings, key, value)
    if not settings.workspace_root.is_absolute():
        settings.workspace_root = (Path.cwd() / settings.workspace_root).resolve()
    if settings.tree_threshold < 0:
        raise ConfigError(f"tree_threshold must be >= 0, got {settings.tree_threshold}")
    return settings


__all__ = [
    "CONFIG_FILENAMES",
    "ConfigError",
    "Settings",
    "find_config_in_parents",
    "load_settings",
]
