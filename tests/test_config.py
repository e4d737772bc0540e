"""
Tests for configuration loading and validation.
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from blogrefresh.config import Config, ConfigModel, SearchConfig, load_config, save_config
from blogrefresh.config.loader import CONFIG_ENV_VAR, default_config_path


class TestLoadConfig:
    """Tests for YAML loading."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.search.max_results == 2
        assert config.extraction.min_content_chars == 500
        assert config.pipeline.batch_size == 1

    def test_partial_override(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "pipeline:\n"
            "  batch_size: 5\n"
            "catalog:\n"
            "  base_url: https://example.com/blogs\n"
            "logging:\n"
            "  level: debug\n"
        )
        config = load_config(path)
        assert config.pipeline.batch_size == 5
        assert config.pipeline.lease_minutes == 30
        assert config.catalog.base_url == "https://example.com/blogs/"
        assert config.logging.level == "DEBUG"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("pipeline: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("search:\n  max_results: 0\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        model = ConfigModel(pipeline={"batch_size": 3})
        save_config(model, path)
        assert load_config(path) == model


class TestModels:
    """Tests for individual validators."""

    def test_search_url_needs_placeholder(self):
        with pytest.raises(ValidationError):
            SearchConfig(search_url="https://search.test/html/")

    def test_search_results_capped_at_two(self):
        assert SearchConfig(max_results=2).max_results == 2
        with pytest.raises(ValidationError):
            SearchConfig(max_results=3)

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            ConfigModel(logging={"level": "LOUD"})


class TestConfig:
    """Tests for the Config wrapper and secret lookup."""

    def test_secrets_from_environment(self, monkeypatch):
        monkeypatch.setenv("TEST_DB_PASSWORD", "s3cret")
        monkeypatch.setenv("TEST_OPENAI_KEY", "sk-test")
        config = Config.from_model(
            ConfigModel(
                postgres={"password_env": "TEST_DB_PASSWORD"},
                llm={"api_key_env": "TEST_OPENAI_KEY"},
            )
        )
        assert config.get_db_config()["password"] == "s3cret"
        assert config.get_llm_config()["api_key"] == "sk-test"

    def test_unset_environment_leaves_value(self, monkeypatch):
        monkeypatch.delenv("TEST_OPENAI_KEY", raising=False)
        config = Config.from_model(ConfigModel(llm={"api_key_env": "TEST_OPENAI_KEY"}))
        assert config.get_llm_config()["api_key"] is None

    def test_default_path_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "custom.yaml"))
        assert default_config_path() == tmp_path / "custom.yaml"

    def test_default_path_fallback(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert default_config_path() == Path.home() / ".config" / "blogrefresh" / "config.yaml"

    def test_inline_secrets_used_without_environment(self, monkeypatch):
        monkeypatch.delenv("TEST_DB_PASSWORD", raising=False)
        config = Config.from_model(
            ConfigModel(postgres={"password": "inline", "password_env": "TEST_DB_PASSWORD"})
        )
        db_config = config.get_db_config()
        assert db_config["password"] == "inline"
        assert "password_env" not in db_config

    def test_environment_overrides_inline_secret(self, monkeypatch):
        monkeypatch.setenv("TEST_OPENAI_KEY", "sk-env")
        config = Config.from_model(ConfigModel(llm={"api_key": "sk-inline", "api_key_env": "TEST_OPENAI_KEY"}))
        assert config.get_llm_config()["api_key"] == "sk-env"
