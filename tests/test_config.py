"""
Tests for configuration loading.

Tests cover:
- Defaults
- User and project config files
- Environment variable overrides
- Layered .env loading
- Caching
"""

import json
import os

import pytest
from pydantic import ValidationError

from todosync.core.config import (
    FetchConfig,
    TodoSyncConfig,
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    load_config,
    load_layered_env,
)
from todosync.core.config.loader import apply_env_overrides, deep_merge, load_json_file


class TestModels:
    """Test suite for the configuration models."""

    def test_defaults(self) -> None:
        config = TodoSyncConfig()
        assert config.database.path == "todos.db"
        assert config.fetch.base_url == "https://jsonplaceholder.typicode.com"
        assert config.fetch.timeout == 30.0
        assert config.fetch.base_delay == 0.1
        assert config.fetch.multiplier == 2.0
        assert config.fetch.max_delay == 5.0
        assert config.fetch.max_retries is None
        assert config.sync.default_concurrency == "1"

    def test_invalid_default_concurrency_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TodoSyncConfig(sync={"default_concurrency": "0"})

    @pytest.mark.parametrize(
        "fetch",
        [{"timeout": 0}, {"base_delay": -1}, {"multiplier": 0.5}, {"max_retries": -1}],
    )
    def test_invalid_fetch_values_are_rejected(self, fetch) -> None:
        with pytest.raises(ValidationError):
            FetchConfig(**fetch)


class TestHelpers:
    """Test suite for merge and file helpers."""

    def test_deep_merge(self) -> None:
        base = {"fetch": {"timeout": 30, "base_delay": 0.1}, "sync": {"default_concurrency": "1"}}
        merged = deep_merge(base, {"fetch": {"timeout": 5}})
        assert merged == {
            "fetch": {"timeout": 5, "base_delay": 0.1},
            "sync": {"default_concurrency": "1"},
        }
        assert base["fetch"]["timeout"] == 30

    def test_load_json_file_missing(self, tmp_path) -> None:
        assert load_json_file(tmp_path / "missing.json") is None

    def test_load_json_file_malformed(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert load_json_file(path) is None

    def test_load_json_file_not_an_object(self, tmp_path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert load_json_file(path) is None

    def test_paths(self, tmp_path, user_config_dir) -> None:
        assert get_user_config_path() == user_config_dir / "config.json"
        assert get_project_config_path(tmp_path) == tmp_path / ".todosync.json"


class TestEnvOverrides:
    """Test suite for TODOSYNC_* environment variables."""

    def test_all_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("TODOSYNC_DB_PATH", "/tmp/other.db")
        monkeypatch.setenv("TODOSYNC_API_URL", "https://api.test")
        monkeypatch.setenv("TODOSYNC_TIMEOUT", "2.5")
        monkeypatch.setenv("TODOSYNC_MAX_RETRIES", "0")
        monkeypatch.setenv("TODOSYNC_CONCURRENCY", "unbounded")

        result = apply_env_overrides({})

        assert result == {
            "database": {"path": "/tmp/other.db"},
            "fetch": {"base_url": "https://api.test", "timeout": 2.5, "max_retries": 0},
            "sync": {"default_concurrency": "unbounded"},
        }

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("TODOSYNC_TIMEOUT", "fast"),
            ("TODOSYNC_TIMEOUT", "0"),
            ("TODOSYNC_MAX_RETRIES", "-1"),
            ("TODOSYNC_MAX_RETRIES", "2.5"),
        ],
    )
    def test_invalid_numbers_are_ignored(self, monkeypatch, name, value) -> None:
        monkeypatch.setenv(name, value)
        assert apply_env_overrides({"fetch": {"timeout": 30.0}}) == {"fetch": {"timeout": 30.0}}

    def test_does_not_mutate_input(self, monkeypatch) -> None:
        monkeypatch.setenv("TODOSYNC_TIMEOUT", "1")
        original = {"fetch": {"timeout": 30.0}}
        apply_env_overrides(original)
        assert original == {"fetch": {"timeout": 30.0}}


class TestLoadConfig:
    """Test suite for load_config precedence and caching."""

    def test_defaults_without_files(self, project_dir) -> None:
        assert load_config(project_dir) == TodoSyncConfig()

    def test_precedence(self, project_dir, user_config_dir, monkeypatch) -> None:
        """defaults < user config < project config < env."""
        (user_config_dir / "config.json").write_text(
            json.dumps(
                {
                    "database": {"path": "user.db"},
                    "fetch": {"timeout": 10, "max_delay": 2},
                    "sync": {"default_concurrency": "2"},
                }
            )
        )
        (project_dir / ".todosync.json").write_text(
            json.dumps({"fetch": {"timeout": 20}, "sync": {"default_concurrency": "3"}})
        )
        monkeypatch.setenv("TODOSYNC_CONCURRENCY", "4")

        config = load_config(project_dir, use_cache=False)

        assert config.database.path == "user.db"
        assert config.fetch.max_delay == 2
        assert config.fetch.timeout == 20
        assert config.fetch.base_delay == 0.1
        assert config.sync.default_concurrency == "4"

    def test_malformed_project_file_is_ignored(self, project_dir) -> None:
        (project_dir / ".todosync.json").write_text("{oops")
        assert load_config(project_dir, use_cache=False) == TodoSyncConfig()

    def test_invalid_value_raises(self, project_dir) -> None:
        (project_dir / ".todosync.json").write_text(json.dumps({"fetch": {"timeout": -1}}))
        with pytest.raises(ValidationError):
            load_config(project_dir, use_cache=False)

    def test_cache(self, project_dir) -> None:
        first = load_config(project_dir)
        (project_dir / ".todosync.json").write_text(json.dumps({"database": {"path": "x.db"}}))

        assert load_config(project_dir) is first

        clear_cache()
        assert load_config(project_dir).database.path == "x.db"


class TestLayeredEnv:
    """Test suite for .env loading."""

    def test_project_env_overrides_user_env(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("TODOSYNC_TEST_A", raising=False)
        monkeypatch.delenv("TODOSYNC_TEST_B", raising=False)
        user_env = tmp_path / "user.env"
        user_env.write_text("TODOSYNC_TEST_A=user\nTODOSYNC_TEST_B=user\n")
        project_env = tmp_path / "project.env"
        project_env.write_text("TODOSYNC_TEST_A=project\n")

        try:
            loaded = load_layered_env(
                user_env_paths=[user_env], project_env_paths=[project_env]
            )
            assert loaded == {"TODOSYNC_TEST_A", "TODOSYNC_TEST_B"}
            assert os.environ["TODOSYNC_TEST_A"] == "project"
            assert os.environ["TODOSYNC_TEST_B"] == "user"
        finally:
            os.environ.pop("TODOSYNC_TEST_A", None)
            os.environ.pop("TODOSYNC_TEST_B", None)

    def test_existing_environment_wins(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("TODOSYNC_TEST_C", "shell")
        project_env = tmp_path / ".env"
        project_env.write_text("TODOSYNC_TEST_C=file\n")

        loaded = load_layered_env(user_env_paths=[], project_env_paths=[project_env])

        assert loaded == set()
        assert os.environ["TODOSYNC_TEST_C"] == "shell"
