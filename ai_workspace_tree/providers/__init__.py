"""Model metadata providers."""
from __future__ import annotations

from .models import (
    ANTHROPIC_MODELS,
    BUILTIN_MODELS,
    CustomModelInput,
    ModelInfo,
    ModelRegistry,
    OPENAI_MODELS,
    Provider,
    UnknownModelError,
    build_model_registry,
)

__all__ = [
    "ANTHROPIC_MODELS",
    "BUILTIN_MODELS",
    "CustomModelInput",
    "ModelInfo",
    "ModelRegistry",
    "OPENAI_MODELS",
    "Provider",
    "UnknownModelError",
    "build_model_registry",
]
