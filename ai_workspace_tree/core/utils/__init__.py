"""Convenience exports for common utility helpers."""
from __future__ import annotations

from .config import ConfigError, Settings, find_config_in_parents, load_settings
from .dir_tree import (
    DirEntry,
    ListDirTreeOptions,
    PathNotFoundError,
    format_dir_tree,
    list_dir_tree,
    options_from_settings,
)
from .logger import (
    configure_logging,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)
from .models_config import load_custom_models_yaml

__all__ = [
    "ConfigError",
    "DirEntry",
    "ListDirTreeOptions",
    "PathNotFoundError",
    "Settings",
    "configure_logging",
    "find_config_in_parents",
    "format_dir_tree",
    "get_correlation_id",
    "get_logger",
    "list_dir_tree",
    "load_custom_models_yaml",
    "load_settings",
    "options_from_settings",
    "set_correlation_id",
]
