"""Central definitions for canonical tool identifiers."""
from __future__ import annotations

TREE = "tree"

ALL_TOOLS = (TREE,)

__all__ = ["TREE", "ALL_TOOLS"]
