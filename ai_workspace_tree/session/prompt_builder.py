"""Helpers for embedding the workspace layout into system prompts."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from ai_workspace_tree.core.utils.config import Settings
from ai_workspace_tree.core.utils.dir_tree import (
    ListDirTreeOptions,
    PathNotFoundError,
    list_dir_tree,
    options_from_settings,
)
from ai_workspace_tree.core.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_HEADING = "Workspace layout"


def _resolve_workspace_root(root: Optional[Path], settings: Optional[Settings]) -> Path:
    if root is not None:
        return Path(root)
    if settings is not None:
        return Path(settings.workspace_root)
    return Path.cwd()


def build_workspace_section(
    root: Optional[Path] = None,
    *,
    options: Optional[ListDirTreeOptions] = None,
    settings: Optional[Settings] = None,
    heading: str = DEFAULT_HEADING,
) -> Optional[str]:
    """Return a prompt section describing the workspace tree, or None if the root is missing."""

    workspace = _resolve_workspace_root(root, settings)
    if options is None:
        options = options_from_settings(settings) if settings is not None else ListDirTreeOptions()

    try:
        lines = list_dir_tree(workspace, options)
    except PathNotFoundError as exc:
        LOGGER.warning("Skipping workspace layout: %s", exc)
        return None

    body = "\n".join(lines)
    return f"{heading}:\n```\n{body}\n```"


__all__ = ["build_workspace_section"]
