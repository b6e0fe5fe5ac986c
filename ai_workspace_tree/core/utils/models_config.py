"""Reader for custom model definitions kept in a YAML file.

Accepted shapes are a top-level list of model mappings or a mapping with a
``models`` list. If the file is missing, callers get an empty list and fall
back to the models declared in Settings.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import ConfigError


def load_custom_models_yaml(path: Optional[Path]) -> List[Dict[str, Any]]:
    """Return the raw custom model entries from ``path``."""
    if path is None or not path.is_file():
        return []
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("models") or []
    if not isinstance(data, list):
        raise ConfigError(f"{path} must contain a list of models")
    return [item for item in data if isinstance(item, dict)]


__all__ = ["load_custom_models_yaml"]
