"""Public package interface for the workspace tree toolkit."""
from __future__ import annotations

from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("ai-workspace-tree")
except _metadata.PackageNotFoundError:  # pragma: no cover - fallback when not installed
    __version__ = "0.1.0"

from . import core, providers, session, tools
from .core import (
    ListDirTreeOptions,
    PathNotFoundError,
    Settings,
    configure_logging,
    format_dir_tree,
    get_logger,
    list_dir_tree,
    load_settings,
)
from .providers import ModelInfo, ModelRegistry, UnknownModelError, build_model_registry
from .session import build_workspace_section
from .tools import ToolContext, ToolRegistry, ToolSpec, registry

__all__ = [
    "__version__",
    "ListDirTreeOptions",
    "ModelInfo",
    "ModelRegistry",
    "PathNotFoundError",
    "Settings",
    "ToolContext",
    "ToolRegistry",
    "ToolSpec",
    "UnknownModelError",
    "build_model_registry",
    "build_workspace_section",
    "configure_logging",
    "core",
    "format_dir_tree",
    "get_logger",
    "list_dir_tree",
    "load_settings",
    "providers",
    "registry",
    "session",
    "tools",
]
