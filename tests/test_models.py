"""Tests for the model registry and its capability fallbacks."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ai_workspace_tree.core.utils.config import Settings
from ai_workspace_tree.providers.models import (
    BUILTIN_MODELS,
    ModelRegistry,
    UnknownModelError,
    build_model_registry,
)


def test_builtin_lookup_and_api_names() -> None:
    registry = ModelRegistry()

    assert registry.get("gpt-5.1").provider == "openai"
    assert registry.resolve_api_model_name("claude-opus-4.5") == "claude-opus-4-5-20251101"
    assert registry.resolve_api_model_name("gpt-5.2") == "gpt-5.2"
    assert registry.get("claude-sonnet-4.5").context_window_tokens == 200_000
    assert registry.get("gpt-5-pro").compaction_target_tokens == 180_000


def test_builtin_capabilities() -> None:
    registry = ModelRegistry()

    assert registry.supports_reasoning("gpt-5.1-codex-max") is True
    # Anthropic entries explicitly opt out of reasoning and use extended thinking instead.
    assert registry.supports_reasoning("claude-opus-4.5") is False
    assert registry.supports_extended_thinking("claude-opus-4.5") is True
    assert registry.supports_extended_thinking("gpt-5.1") is False
    assert registry.supports_streaming("gpt-5.1") is False


def test_unregistered_keys_use_prefix_fallbacks() -> None:
    registry = ModelRegistry()

    assert registry.get("gpt-5-mini") is None
    assert registry.supports_reasoning("gpt-5-mini") is True
    assert registry.supports_reasoning("gpt-4o") is False
    assert registry.get_model_provider("claude-haiku-9") == "anthropic"
    assert registry.get_model_provider("mystery-model") == "openai"
    assert registry.resolve_api_model_name("mystery-model") == "mystery-model"
    assert registry.supports_extended_thinking("claude-haiku-9") is False


def test_require_raises_for_unknown_key() -> None:
    registry = ModelRegistry()

    with pytest.raises(UnknownModelError) as exc_info:
        registry.require("nope")

    assert isinstance(exc_info.value, KeyError)
    assert "nope" in str(exc_info.value)


def test_replace_custom_models_returns_effective_mapping() -> None:
    registry = ModelRegistry()

    effective = registry.replace_custom_models(
        [
            {"key": "  local-llama  ", "name": " Llama ", "api_name": "llama-3-70b"},
            {"key": "sonnet-proxy", "provider": "anthropic", "type": "extended_thinking"},
            {"key": "plain", "type": "chat"},
        ]
    )

    assert set(BUILTIN_MODELS).issubset(effective)
    llama = effective["local-llama"]
    assert llama.name == "Llama"
    assert llama.api_name == "llama-3-70b"
    assert llama.provider == "openai"
    assert llama.type == "reasoning"
    assert registry.supports_reasoning("local-llama") is True
    assert registry.resolve_api_model_name("local-llama") == "llama-3-70b"

    assert registry.get_model_provider("sonnet-proxy") == "anthropic"
    assert registry.supports_extended_thinking("sonnet-proxy") is True
    assert registry.resolve_api_model_name("sonnet-proxy") == "sonnet-proxy"

    assert registry.supports_reasoning("plain") is False
    assert registry.get("plain").context_window_tokens is None


def test_replace_custom_models_rejects_builtin_collisions_and_blank_keys(caplog) -> None:
    registry = ModelRegistry()

    with caplog.at_level(logging.WARNING, logger="ai_workspace_tree.providers.models"):
        effective = registry.replace_custom_models(
            [
                {"key": "gpt-5.1", "name": "hijacked"},
                {"key": "   "},
                {"name": "no key"},
                "not-a-mapping",
                None,
                {"key": "kept"},
            ]
        )

    assert effective["gpt-5.1"].name == "gpt-5.1"
    assert list(registry.custom_models()) == ["kept"]
    assert "collides with a built-in" in caplog.text


def test_replace_custom_models_swaps_whole_set() -> None:
    registry = ModelRegistry()
    registry.replace_custom_models([{"key": "first"}])

    effective = registry.replace_custom_models([{"key": "second"}])

    assert "first" not in effective
    assert registry.get("first") is None
    assert registry.get("second") is not None

    registry.replace_custom_models(None)
    assert registry.custom_models() == {}
    assert registry.models() == BUILTIN_MODELS


def test_returned_mapping_is_a_copy() -> None:
    registry = ModelRegistry()

    effective = registry.replace_custom_models([{"key": "custom"}])
    effective.pop("custom")

    assert registry.get("custom") is not None


def test_build_model_registry_merges_settings_and_yaml(tmp_path: Path) -> None:
    models_file = tmp_path / "models.yaml"
    models_file.write_text(
        "models:\n"
        "  - key: yaml-model\n"
        "    provider: anthropic\n",
        encoding="utf-8",
    )
    settings = Settings(custom_models=({"key": "toml-model"},), custom_models_file=models_file)

    registry = build_model_registry(settings)

    assert set(registry.custom_models()) == {"toml-model", "yaml-model"}
    assert registry.get_model_provider("yaml-model") == "anthropic"


def test_build_model_registry_without_settings_has_builtins_only() -> None:
    assert build_model_registry().models() == BUILTIN_MODELS


def test_custom_model_accepts_camel_case_api_name() -> None:
    registry = ModelRegistry()

    registry.replace_custom_models(
        [
            {"key": "ported", "apiName": "ported-2025"},
            {"key": "snake", "api_name": "snake-2025"},
        ]
    )

    assert registry.resolve_api_model_name("ported") == "ported-2025"
    assert registry.resolve_api_model_name("snake") == "snake-2025"
