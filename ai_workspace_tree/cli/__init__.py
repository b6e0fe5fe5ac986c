"""CLI package exposing the wstree command entry points."""
from __future__ import annotations

from .commands import cli, main, models, tree
from ai_workspace_tree.core.utils.config import Settings, load_settings

__all__ = [
    "cli",
    "main",
    "models",
    "tree",
    "load_settings",
    "Settings",
]
