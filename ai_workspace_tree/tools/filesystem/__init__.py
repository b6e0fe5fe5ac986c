"""Filesystem tool implementations."""
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ai_workspace_tree.core.utils.constants import BRANCH_EXTENSION, ELISION_MARKER
from ai_workspace_tree.core.utils.dir_tree import (
    ListDirTreeOptions,
    PathNotFoundError,
    list_dir_tree,
    options_from_settings,
)

from ..names import TREE
from ..registry import ToolContext, ToolSpec, registry

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas" / "tools"

_OPTION_KEYS = ("threshold", "include_hidden", "count_files_only", "sort_entries")


def _resolve_path(repo_root: Path, relative: str) -> Path:
    repo_root = repo_root.resolve()
    candidate = (repo_root / relative).resolve()
    if repo_root not in candidate.parents and candidate != repo_root:
        raise ValueError(f"Path '{relative}' escapes repository root")
    return candidate


def _is_elision_line(line: str) -> bool:
    return line.lstrip(BRANCH_EXTENSION) == ELISION_MARKER


def _tree(payload: Mapping[str, Any], context: ToolContext) -> Mapping[str, Any]:
    rel = payload.get("path", ".")
    target = _resolve_path(context.repo_root, rel)

    if context.settings is not None:
        options = options_from_settings(context.settings)
    else:
        options = ListDirTreeOptions()
    overrides: Dict[str, Any] = {key: payload[key] for key in _OPTION_KEYS if key in payload}
    if overrides:
        options = replace(options, **overrides)

    try:
        lines = list_dir_tree(target, options)
    except PathNotFoundError as exc:
        raise ValueError(f"Path '{rel}' not found in workspace") from exc

    return {
        "root": lines[0],
        "lines": lines,
        "truncated": any(_is_elision_line(line) for line in lines[1:]),
    }


registry.register(
    ToolSpec(
        name=TREE,
        handler=_tree,
        request_schema_path=SCHEMA_DIR / "tree.request.json",
        response_schema_path=SCHEMA_DIR / "tree.response.json",
        description=(
            "Render the directory tree under 'path' (relative to the repository root, default '.'). "
            "Directories with more than 'threshold' children are collapsed to '**'; hidden entries are "
            "skipped unless 'include_hidden' is true. Use this to learn the project layout before "
            "reading individual files."
        ),
        category="file_read",
    )
)


__all__ = ["_tree"]
