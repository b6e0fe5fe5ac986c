"""Core utilities: configuration, logging and the directory tree renderer."""
from __future__ import annotations

from .utils import *  # noqa: F401,F403
from .utils import __all__ as _utils_all

__all__ = list(_utils_all)
