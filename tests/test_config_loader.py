"""
Unit tests for configuration loading.

Tests the precedence chain (defaults < user < project < env vars), deep
merging, tolerance of broken config files and layered .env loading.
"""

import json
import os

import pytest
from pydantic import ValidationError

from nexus.core.config import (
    EnvSources,
    LlmConfig,
    NexusConfig,
    clear_cache,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
    load_layered_env,
)
from nexus.core.config.loader import apply_env_overrides, deep_merge, load_json_file


@pytest.fixture
def user_config_file():
    """Write the user-level config.json under the test XDG directory."""

    def _write(data):
        path = get_user_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data))
        return path

    return _write


# ==============================================================================
# Helpers
# ==============================================================================


class TestDeepMerge:
    """Test deep_merge."""

    def test_nested_merge(self):
        """Nested dicts merge key by key."""
        base = {"llm": {"model": "a", "max_tokens": 10}, "gate": {"heuristics_file": "x"}}
        result = deep_merge(base, {"llm": {"model": "b"}})
        assert result == {
            "llm": {"model": "b", "max_tokens": 10},
            "gate": {"heuristics_file": "x"},
        }

    def test_base_not_mutated(self):
        base = {"llm": {"model": "a"}}
        deep_merge(base, {"llm": {"model": "b"}})
        assert base == {"llm": {"model": "a"}}

    def test_non_dict_replaced(self):
        """Lists and scalars are replaced wholesale."""
        base = {"catalyst": {"illegal_strings": ["TODO", "TBD"]}}
        result = deep_merge(base, {"catalyst": {"illegal_strings": ["XXX"]}})
        assert result["catalyst"]["illegal_strings"] == ["XXX"]


class TestLoadJsonFile:
    """Test load_json_file."""

    def test_missing(self, tmp_path):
        assert load_json_file(tmp_path / "none.json") is None

    def test_invalid_json(self, tmp_path, caplog):
        """Broken JSON is logged and skipped."""
        path = tmp_path / "bad.json"
        path.write_text("{oops")
        assert load_json_file(path) is None
        assert "Failed to parse config" in caplog.text

    def test_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert load_json_file(path) is None


class TestEnvOverrides:
    """Test apply_env_overrides."""

    def test_model_override(self, monkeypatch):
        monkeypatch.setenv("NEXUS_LLM_MODEL", "openai/gpt-4o")
        result = apply_env_overrides({"llm": {"max_tokens": 100}})
        assert result["llm"] == {"max_tokens": 100, "model": "openai/gpt-4o"}

    @pytest.mark.parametrize("value,expected", [("1", True), ("YES", True), ("off", False)])
    def test_show_reasoning(self, monkeypatch, value, expected):
        monkeypatch.setenv("NEXUS_SHOW_REASONING", value)
        assert apply_env_overrides({})["catalyst"]["show_reasoning"] is expected

    def test_invalid_provider_ignored(self, monkeypatch, caplog):
        """An unknown provider is warned about and not applied."""
        monkeypatch.setenv("NEXUS_LLM_PROVIDER", "acme")
        assert "llm" not in apply_env_overrides({})
        assert "Invalid NEXUS_LLM_PROVIDER" in caplog.text

    def test_planning_dir(self, monkeypatch):
        monkeypatch.setenv("NEXUS_PLANNING_DIR", "docs/plan")
        assert apply_env_overrides({})["structure"]["planning_dir"] == "docs/plan"


# ==============================================================================
# load_config
# ==============================================================================


class TestLoadConfig:
    """Test the full precedence chain."""

    def test_defaults(self, tmp_path):
        config = load_config(tmp_path)
        assert config == NexusConfig()
        assert config.structure.planning_dir == "01-PLANNING"
        assert config.llm.provider == "openrouter"
        assert config.catalyst.min_word_count == 50

    def test_user_config(self, tmp_path, user_config_file):
        user_config_file({"llm": {"model": "user-model"}})
        assert load_config(tmp_path).llm.model == "user-model"

    def test_project_overrides_user(self, tmp_path, user_config_file):
        """Project settings win over user settings, key by key."""
        user_config_file({"llm": {"model": "user-model", "max_tokens": 1000}})
        (tmp_path / ".nexus.json").write_text(json.dumps({"llm": {"model": "project-model"}}))
        config = load_config(tmp_path)
        assert config.llm.model == "project-model"
        assert config.llm.max_tokens == 1000

    def test_env_overrides_project(self, tmp_path, monkeypatch):
        (tmp_path / ".nexus.json").write_text(json.dumps({"llm": {"model": "project-model"}}))
        monkeypatch.setenv("NEXUS_LLM_MODEL", "env-model")
        assert load_config(tmp_path).llm.model == "env-model"

    def test_broken_project_file_skipped(self, tmp_path):
        """A broken project file falls back to the other layers."""
        (tmp_path / ".nexus.json").write_text("not json")
        assert load_config(tmp_path) == NexusConfig()

    def test_invalid_value_raises(self, tmp_path):
        (tmp_path / ".nexus.json").write_text(json.dumps({"llm": {"provider": "acme"}}))
        with pytest.raises(ValidationError):
            load_config(tmp_path)

    def test_cache(self, tmp_path):
        """Config is cached until the cache is cleared."""
        first = load_config(tmp_path)
        (tmp_path / ".nexus.json").write_text(json.dumps({"llm": {"model": "changed"}}))
        assert load_config(tmp_path) is first
        clear_cache()
        assert load_config(tmp_path).llm.model == "changed"


# ==============================================================================
# .env loading
# ==============================================================================


class TestLoadLayeredEnv:
    """Test load_layered_env."""

    def test_project_env_loaded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("NEXUS_TEST_KEY", "unset")
        monkeypatch.delenv("NEXUS_TEST_KEY")
        (tmp_path / ".env").write_text("NEXUS_TEST_KEY=from-project\n")
        sources = load_layered_env(project_dir=tmp_path, user_env_paths=[])
        assert sources.loaded == ["NEXUS_TEST_KEY"]
        assert sources.files["NEXUS_TEST_KEY"] == tmp_path / ".env"
        assert os.environ["NEXUS_TEST_KEY"] == "from-project"

    def test_existing_env_wins(self, tmp_path, monkeypatch):
        """A variable already exported is never overridden."""
        monkeypatch.setenv("NEXUS_TEST_KEY", "exported")
        (tmp_path / ".env").write_text("NEXUS_TEST_KEY=from-file\n")
        assert load_layered_env(project_dir=tmp_path, user_env_paths=[]).loaded == []
        assert os.environ["NEXUS_TEST_KEY"] == "exported"

    def test_project_overrides_user(self, tmp_path, monkeypatch):
        monkeypatch.setenv("NEXUS_TEST_KEY", "unset")
        monkeypatch.delenv("NEXUS_TEST_KEY")
        user_env = tmp_path / "user.env"
        user_env.write_text("NEXUS_TEST_KEY=from-user\n")
        (tmp_path / ".env.local").write_text("NEXUS_TEST_KEY=from-local\n")
        sources = load_layered_env(project_dir=tmp_path, user_env_paths=[user_env])
        assert os.environ["NEXUS_TEST_KEY"] == "from-local"
        assert sources.files["NEXUS_TEST_KEY"] == tmp_path / ".env.local"

    def test_local_overrides_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("NEXUS_TEST_KEY", "unset")
        monkeypatch.delenv("NEXUS_TEST_KEY")
        (tmp_path / ".env").write_text("NEXUS_TEST_KEY=from-env\n")
        (tmp_path / ".env.local").write_text("NEXUS_TEST_KEY=from-local\n")
        load_layered_env(project_dir=tmp_path, user_env_paths=[])
        assert os.environ["NEXUS_TEST_KEY"] == "from-local"

    def test_user_env_default_location(self, tmp_path, monkeypatch):
        """The user file lives under the XDG config directory."""
        monkeypatch.setenv("NEXUS_TEST_KEY", "unset")
        monkeypatch.delenv("NEXUS_TEST_KEY")
        user_env = get_xdg_config_home() / "nexus" / ".env"
        user_env.parent.mkdir(parents=True)
        user_env.write_text("NEXUS_TEST_KEY=from-user\n")
        sources = load_layered_env(project_dir=tmp_path / "project")
        assert sources.files == {"NEXUS_TEST_KEY": user_env}


class TestKeySource:
    """Test EnvSources.key_source."""

    def test_key_from_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "unset")
        monkeypatch.delenv("OPENROUTER_API_KEY")
        (tmp_path / ".env").write_text("OPENROUTER_API_KEY=sk-or\n")
        sources = load_layered_env(project_dir=tmp_path, user_env_paths=[])
        assert sources.key_source(LlmConfig()) == str(tmp_path / ".env")

    def test_key_exported(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk")
        assert EnvSources().key_source(LlmConfig(provider="openai")) == "environment"

    def test_key_missing(self, monkeypatch):
        monkeypatch.delenv("MY_KEY", raising=False)
        assert EnvSources().key_source(LlmConfig(api_key_env="MY_KEY")) is None
