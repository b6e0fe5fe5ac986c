"""Initialize built-in tool implementations."""
from __future__ import annotations

from .registry import ToolContext, ToolRegistry, ToolSpec, registry
from .names import ALL_TOOLS, TREE

# Trigger tool registration by importing subpackages for their side effects.
from . import filesystem as _filesystem  # noqa: F401

__all__ = [
    "ToolContext",
    "ToolRegistry",
    "ToolSpec",
    "registry",
    "TREE",
    "ALL_TOOLS",
]
