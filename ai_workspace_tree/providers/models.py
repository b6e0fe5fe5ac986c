"""Model metadata that drives both model selection and API routing."""
from __future__ import annotations

from dataclasses import dataclass
from threading import RLock
from typing import Any, Dict, Iterable, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ai_workspace_tree.core.utils.logger import get_logger
from ai_workspace_tree.core.utils.models_config import load_custom_models_yaml

LOGGER = get_logger(__name__)

Provider = Literal["openai", "anthropic"]

REASONING_PREFIX = "gpt-5"
ANTHROPIC_PREFIX = "claude-"


class UnknownModelError(KeyError):
    """Raised by strict lookups when a model key is not registered."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Model '{self.key}' is not registered"


@dataclass(frozen=True)
class ModelInfo:
    """Metadata for one selectable model."""

    name: str
    type: str
    provider: Provider
    api_name: Optional[str] = None
    streaming: bool = False
    reasoning: Optional[bool] = None
    extended_thinking: bool = False
    context_window_tokens: Optional[int] = None
    compaction_target_tokens: Optional[int] = None


class CustomModelInput(BaseModel):
    """User-supplied definition of a model that is not built in.

    ``apiName`` is accepted as an alias of ``api_name``.
    """

    model_config = ConfigDict(populate_by_name=True)

    key: str
    name: Optional[str] = None
    api_name: Optional[str] = Field(default=None, alias="apiName")
    provider: Provider = "openai"
    type: Optional[str] = None

    @field_validator("key", mode="before")
    @classmethod
    def _strip_key(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("key must be a string")
        stripped = value.strip()
        if not stripped:
            raise ValueError("key must not be blank")
        return stripped

    @field_validator("name", "api_name", "type", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        return value.strip() or None

    @field_validator("provider", mode="before")
    @classmethod
    def _coerce_provider(cls, value: Any) -> str:
        return "anthropic" if value == "anthropic" else "openai"

    def to_model_info(self) -> ModelInfo:
        model_type = self.type or "reasoning"
        return ModelInfo(
            name=self.name or self.key,
            api_name=self.api_name,
            type=model_type,
            provider=self.provider,
            streaming=False,
            reasoning=model_type in {"reasoning", "extended_thinking"},
            extended_thinking=model_type == "extended_thinking",
        )


def _openai_reasoning(name: str) -> ModelInfo:
    return ModelInfo(
        name=name,
        type="reasoning",
        provider="openai",
        streaming=False,
        reasoning=True,
        context_window_tokens=272_000,
        compaction_target_tokens=180_000,
    )


def _anthropic_thinking(name: str, api_name: str) -> ModelInfo:
    return ModelInfo(
        name=name,
        api_name=api_name,
        type="extended_thinking",
        provider="anthropic",
        streaming=False,
        reasoning=False,
        extended_thinking=True,
        context_window_tokens=200_000,
        compaction_target_tokens=100_000,
    )


OPENAI_MODELS: Dict[str, ModelInfo] = {
    key: _openai_reasoning(key) for key in ("gpt-5.1-codex-max", "gpt-5.1", "gpt-5.2", "gpt-5-pro")
}

ANTHROPIC_MODELS: Dict[str, ModelInfo] = {
    "claude-opus-4.5": _anthropic_thinking("claude-opus-4.5", "claude-opus-4-5-20251101"),
    "claude-sonnet-4.5": _anthropic_thinking("claude-sonnet-4.5", "claude-sonnet-4-5-20250929"),
}

BUILTIN_MODELS: Dict[str, ModelInfo] = {**OPENAI_MODELS, **ANTHROPIC_MODELS}


class ModelRegistry:
    """Registry of built-in and custom models.

    Built-in entries are fixed. Custom entries are only ever swapped as a
    whole through :meth:`replace_custom_models`, so readers never observe a
    half-applied update.
    """

    def __init__(self, builtins: Optional[Mapping[str, ModelInfo]] = None) -> None:
        self._builtins: Dict[str, ModelInfo] = dict(BUILTIN_MODELS if builtins is None else builtins)
        self._custom: Dict[str, ModelInfo] = {}
        self._effective: Dict[str, ModelInfo] = dict(self._builtins)
        self._lock = RLock()

    # Lookup -------------------------------------------------------------

    def is_builtin(self, key: str) -> bool:
        return key in self._builtins

    def get(self, key: str) -> Optional[ModelInfo]:
        return self._effective.get(key)

    def require(self, key: str) -> ModelInfo:
        model = self._effective.get(key)
        if model is None:
            raise UnknownModelError(key)
        return model

    def models(self) -> Dict[str, ModelInfo]:
        return dict(self._effective)

    def custom_models(self) -> Dict[str, ModelInfo]:
        return dict(self._custom)

    # Mutation -----------------------------------------------------------

    def replace_custom_models(self, entries: Optional[Iterable[Any]]) -> Dict[str, ModelInfo]:
        """Replace every custom entry and return the new effective mapping."""

        custom: Dict[str, ModelInfo] = {}
        for raw in entries or ():
            if not isinstance(raw, Mapping):
                LOGGER.warning("Skipping custom model entry that is not a mapping: %r", raw)
                continue
            try:
                parsed = CustomModelInput.model_validate(dict(raw))
            except ValidationError as exc:
                LOGGER.warning("Skipping invalid custom model entry %r: %s", raw, exc.errors()[0]["msg"])
                continue
            if self.is_builtin(parsed.key):
                LOGGER.warning("Custom model '%s' collides with a built-in model; ignoring", parsed.key)
                continue
            custom[parsed.key] = parsed.to_model_info()

        effective = {**self._builtins, **custom}
        with self._lock:
            self._custom = custom
            self._effective = effective
        LOGGER.debug("Registered %d custom model(s)", len(custom))
        return dict(effective)

    # Capabilities -------------------------------------------------------

    def supports_reasoning(self, key: str) -> bool:
        model = self.get(key)
        if model is None:
            # Unregistered keys: assume the gpt-5 family reasons.
            return key.startswith(REASONING_PREFIX)
        if model.reasoning is not None:
            return model.reasoning
        if model.extended_thinking:
            return True
        return (model.api_name or model.name or key).startswith(REASONING_PREFIX)

    def supports_extended_thinking(self, key: str) -> bool:
        model = self.get(key)
        return bool(model and model.extended_thinking)

    def supports_streaming(self, key: str) -> bool:
        # Streaming is disabled for every model.
        return False

    def get_model_provider(self, key: str) -> Provider:
        model = self.get(key)
        if model is None:
            return "anthropic" if key.startswith(ANTHROPIC_PREFIX) else "openai"
        return model.provider

    def resolve_api_model_name(self, key: str) -> str:
        model = self.get(key)
        if model is None:
            return key
        return model.api_name or model.name or key


def build_model_registry(settings: Any = None) -> ModelRegistry:
    """Create a registry with custom models from ``settings`` applied."""
    registry = ModelRegistry()
    if settings is None:
        return registry
    entries = list(getattr(settings, "custom_models", ()) or ())
    entries.extend(load_custom_models_yaml(getattr(settings, "custom_models_file", None)))
    registry.replace_custom_models(entries)
    return registry


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
