import os
from pathlib import Path

import pytest

from ai_workspace_tree.core.utils import config as config_module
from ai_workspace_tree.core.utils.config import ConfigError, Settings, load_settings
from ai_workspace_tree.core.utils.models_config import load_custom_models_yaml


@pytest.fixture(autouse=True)
def _isolate_config_sources(monkeypatch):
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATHS", ())
    for key in list(os.environ):
        if key.startswith("WSTREE_"):
            monkeypatch.delenv(key, raising=False)


def test_defaults_match_tree_renderer_defaults() -> None:
    settings = Settings()

    assert settings.tree_threshold == 20
    assert settings.tree_include_hidden is False
    assert settings.tree_count_files_only is False
    assert settings.tree_sort_entries is True


def test_env_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "config.toml"
    config_path.write_text("tree_threshold = 5\nmodel = 'gpt-5.2'\n")
    monkeypatch.setenv("WSTREE_TREE_INCLUDE_HIDDEN", "true")
    monkeypatch.setenv("WSTREE_TREE_THRESHOLD", "12")
    settings = load_settings(config_path)
    assert settings.tree_threshold == 12
    assert settings.tree_include_hidden is True
    assert settings.model == "gpt-5.2"
    assert settings.workspace_root.is_absolute()


def test_custom_models_from_config_file(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        "custom_models_file = 'models.yaml'\n"
        "[[custom_models]]\n"
        "key = 'local'\n"
        "provider = 'anthropic'\n"
    )

    settings = load_settings(config_path)

    assert settings.custom_models == ({"key": "local", "provider": "anthropic"},)
    assert settings.custom_models_file == Path("models.yaml")


def test_custom_models_from_env_json(tmp_path, monkeypatch):
    monkeypatch.setenv("WSTREE_CUSTOM_MODELS", '[{"key": "from-env"}]')

    settings = load_settings(tmp_path / "missing.toml")

    assert settings.custom_models == ({"key": "from-env"},)


def test_invalid_env_integer_raises_config_error(tmp_path, monkeypatch):
    monkeypatch.setenv("WSTREE_TREE_THRESHOLD", "lots")

    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.toml")


def test_negative_threshold_rejected(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text("tree_threshold = -3\n")

    with pytest.raises(ConfigError):
        load_settings(config_path)


def test_unknown_keys_are_kept_as_extras(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text("experimental_flag = true\n")

    settings = load_settings(config_path)

    assert settings.extras == {"experimental_flag": True}
    assert settings.experimental_flag is True


def test_project_config_discovered_in_parent_directory(tmp_path, monkeypatch):
    project_root = tmp_path / "repo"
    nested_dir = project_root / "src" / "module"
    nested_dir.mkdir(parents=True)

    config_path = project_root / ".wstree.toml"
    config_path.write_text("tree-threshold = 3\n")

    monkeypatch.chdir(nested_dir)

    settings = load_settings()

    assert settings.tree_threshold == 3


def test_project_config_without_dot_discovered_in_parent_directory(tmp_path, monkeypatch):
    project_root = tmp_path / "repo"
    nested_dir = project_root / "src"
    nested_dir.mkdir(parents=True)

    (project_root / "wstree.toml").write_text("model = 'parent-tree-no-dot'\n")

    monkeypatch.chdir(nested_dir)

    settings = load_settings()

    assert settings.model == "parent-tree-no-dot"


def test_load_custom_models_yaml_accepts_list_and_mapping(tmp_path):
    as_list = tmp_path / "list.yaml"
    as_list.write_text("- key: a\n- key: b\n  type: chat\n- just-a-string\n", encoding="utf-8")
    as_mapping = tmp_path / "mapping.yaml"
    as_mapping.write_text("models:\n  - key: c\n", encoding="utf-8")

    assert load_custom_models_yaml(as_list) == [{"key": "a"}, {"key": "b", "type": "chat"}]
    assert load_custom_models_yaml(as_mapping) == [{"key": "c"}]
    assert load_custom_models_yaml(tmp_path / "absent.yaml") == []
    assert load_custom_models_yaml(None) == []


def test_load_custom_models_yaml_rejects_malformed(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("models: [unterminated\n", encoding="utf-8")
    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("42\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_custom_models_yaml(broken)
    with pytest.raises(ConfigError):
        load_custom_models_yaml(scalar)


def test_threshold_from_file_is_coerced_to_int(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text('tree_threshold = "5"\n')

    settings = load_settings(config_path)

    assert settings.tree_threshold == 5


@pytest.mark.parametrize("raw", ["true", '"lots"', "1.5"])
def test_threshold_from_file_rejects_non_integers(tmp_path, raw):
    config_path = tmp_path / "config.toml"
    config_path.write_text(f"tree_threshold = {raw}\n")

    with pytest.raises(ConfigError):
        load_settings(config_path)
