"""Prompt assembly helpers."""
from __future__ import annotations

from .prompt_builder import build_workspace_section

__all__ = ["build_workspace_section"]
