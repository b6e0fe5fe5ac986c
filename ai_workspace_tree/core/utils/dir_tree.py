"""Render a bounded directory tree of the workspace for prompts.

The tree is embedded in the system prompt so the model understands the
project layout without issuing exploratory listing calls. Output lines are
pre-indented so callers can join them with newlines as-is.
"""
from __future__ import annotations

import locale
import os
import stat
import unicodedata
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from .constants import (
    BRANCH_CONNECTOR,
    BRANCH_EXTENSION,
    DEFAULT_COUNT_FILES_ONLY,
    DEFAULT_INCLUDE_HIDDEN,
    DEFAULT_SORT_ENTRIES,
    DEFAULT_TREE_THRESHOLD,
    DIR_SUFFIX,
    ELISION_MARKER,
    HIDDEN_PREFIX,
    LAST_CONNECTOR,
    LAST_EXTENSION,
    OSERROR_DIAGNOSTIC_PREFIX,
    PERMISSION_DENIED_DIAGNOSTIC,
)
from .logger import get_logger

LOGGER = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class PathNotFoundError(FileNotFoundError):
    """Raised when the root of a tree render cannot be stat'ed."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path does not exist: {path}")
        self.path = path


@dataclass(frozen=True)
class ListDirTreeOptions:
    """Options controlling a single tree render."""

    threshold: int = DEFAULT_TREE_THRESHOLD
    include_hidden: bool = DEFAULT_INCLUDE_HIDDEN
    count_files_only: bool = DEFAULT_COUNT_FILES_ONLY
    sort_entries: bool = DEFAULT_SORT_ENTRIES

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError(f"threshold must be >= 0, got {self.threshold}")


@dataclass(frozen=True)
class DirEntry:
    """A single child produced by one directory scan."""

    name: str
    full_path: str
    is_dir: bool

    @property
    def display_name(self) -> str:
        return self.name + (DIR_SUFFIX if self.is_dir else "")


@dataclass(frozen=True)
class _ScanResult:
    entries: Tuple[DirEntry, ...] = ()
    count_for_threshold: int = 0
    error: Optional[str] = None


def options_from_settings(settings: Any) -> ListDirTreeOptions:
    """Build tree options from a ``Settings`` instance (or any lookalike)."""

    return ListDirTreeOptions(
        threshold=int(getattr(settings, "tree_threshold", DEFAULT_TREE_THRESHOLD)),
        include_hidden=bool(getattr(settings, "tree_include_hidden", DEFAULT_INCLUDE_HIDDEN)),
        count_files_only=bool(getattr(settings, "tree_count_files_only", DEFAULT_COUNT_FILES_ONLY)),
        sort_entries=bool(getattr(settings, "tree_sort_entries", DEFAULT_SORT_ENTRIES)),
    )


def _collation_key(name: str) -> str:
    # Case- and accent-insensitive, then ordered by the active LC_COLLATE.
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return locale.strxfrm(base)


def _is_visible(name: str, options: ListDirTreeOptions) -> bool:
    return options.include_hidden or not name.startswith(HIDDEN_PREFIX)


def _scan_children(directory: str, options: ListDirTreeOptions) -> _ScanResult:
    try:
        with os.scandir(directory) as iterator:
            entries = [
                DirEntry(
                    name=item.name,
                    full_path=os.path.join(directory, item.name),
                    is_dir=item.is_dir(follow_symlinks=False),
                )
                for item in iterator
                if _is_visible(item.name, options)
            ]
    except PermissionError:
        LOGGER.debug(
            "Permission denied while listing %s",
            directory,
            extra={"extra_fields": {"directory": directory, "diagnostic": PERMISSION_DENIED_DIAGNOSTIC}},
        )
        return _ScanResult(error=PERMISSION_DENIED_DIAGNOSTIC)
    except OSError as exc:
        diagnostic = f"{OSERROR_DIAGNOSTIC_PREFIX}: {exc}"
        LOGGER.debug(
            "Failed to list %s: %s",
            directory,
            exc,
            extra={"extra_fields": {"directory": directory, "diagnostic": diagnostic}},
        )
        return _ScanResult(error=diagnostic)

    if options.sort_entries:
        entries.sort(key=lambda entry: (not entry.is_dir, _collation_key(entry.name)))

    if options.count_files_only:
        count = sum(1 for entry in entries if not entry.is_dir)
    else:
        count = len(entries)
    return _ScanResult(entries=tuple(entries), count_for_threshold=count)


def list_dir_tree(root: PathLike, options: Optional[ListDirTreeOptions] = None) -> List[str]:
    """Return the rendered tree for ``root`` as a list of lines.

    The first line is the absolute root path, suffixed with ``/`` when the
    root is a directory. Each directory below it is scanned once; a directory
    whose counted children exceed ``options.threshold`` is collapsed to a
    single ``**`` marker, and a directory that cannot be listed is reported
    inline as ``[permission denied]`` or ``[oserror: ...]`` without stopping
    the rest of the walk.

    Raises:
        PathNotFoundError: if ``root`` cannot be stat'ed.
    """

    options = options or ListDirTreeOptions()
    resolved = os.path.abspath(os.fspath(root))
    try:
        stat_result = os.stat(resolved)
    except (OSError, ValueError) as exc:
        raise PathNotFoundError(os.fspath(root)) from exc

    is_dir = stat.S_ISDIR(stat_result.st_mode)
    lines: List[str] = [resolved + DIR_SUFFIX if is_dir and not resolved.endswith(DIR_SUFFIX) else resolved]
    if not is_dir:
        return lines

    # Work stack of already-formatted lines and (directory, prefix) pairs,
    # pushed in reverse so pops yield depth-first pre-order.
    stack: List[Union[str, Tuple[str, str]]] = [(resolved, "")]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            lines.append(item)
            continue

        directory, prefix = item
        result = _scan_children(directory, options)
        if result.error is not None:
            lines.append(f"{prefix}[{result.error}]")
            continue
        if result.count_for_threshold > options.threshold:
            lines.append(prefix + ELISION_MARKER)
            continue

        pending: List[Union[str, Tuple[str, str]]] = []
        last_index = len(result.entries) - 1
        for index, entry in enumerate(result.entries):
            is_last = index == last_index
            connector = LAST_CONNECTOR if is_last else BRANCH_CONNECTOR
            pending.append(prefix + connector + entry.display_name)
            if entry.is_dir:
                extension = LAST_EXTENSION if is_last else BRANCH_EXTENSION
                pending.append((entry.full_path, prefix + extension))
        stack.extend(reversed(pending))

    return lines


def format_dir_tree(root: PathLike, options: Optional[ListDirTreeOptions] = None) -> str:
    """Return the rendered tree as a single newline-joined string."""
    return "\n".join(list_dir_tree(root, options))


__all__ = [
    "DirEntry",
    "ListDirTreeOptions",
    "PathNotFoundError",
    "format_dir_tree",
    "list_dir_tree",
    "options_from_settings",
]
