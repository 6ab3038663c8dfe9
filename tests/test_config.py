"""Tests for engine settings loading."""

import pytest
from pydantic import ValidationError

from obey.config import ConfigError, EngineSettings, config_path, load_settings


class TestEngineSettings:
    def test_defaults(self):
        settings = EngineSettings()
        assert settings.concurrent is False
        assert settings.action_timeout is None

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            EngineSettings(action_timeout=0)

    def test_merged_ignores_none(self):
        base = EngineSettings(concurrent=True, action_timeout=2.0)
        merged = base.merged({"concurrent": None, "action_timeout": 5})
        assert merged.concurrent is True
        assert merged.action_timeout == 5.0

    def test_merged_without_overrides_is_same(self):
        base = EngineSettings()
        assert base.merged(None) is base


class TestLoadSettings:
    def test_env_var_controls_path(self, isolated_config):
        assert config_path() == isolated_config

    def test_missing_file_gives_defaults(self, isolated_config):
        assert not isolated_config.exists()
        assert load_settings() == EngineSettings()

    def test_reads_yaml(self, isolated_config):
        isolated_config.write_text("concurrent: true\naction_timeout: 1.5\n")
        settings = load_settings()
        assert settings.concurrent is True
        assert settings.action_timeout == 1.5

    def test_empty_file_gives_defaults(self, isolated_config):
        isolated_config.write_text("")
        assert load_settings() == EngineSettings()

    def test_unknown_key(self, isolated_config):
        isolated_config.write_text("parallelism: 4\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings()

    def test_not_a_mapping(self, isolated_config):
        isolated_config.write_text("- concurrent\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings()

    def test_bad_yaml(self, isolated_config):
        isolated_config.write_text("concurrent: [true\n")
        with pytest.raises(ConfigError, match="YAML parse error"):
            load_settings()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "other.yaml"
        path.write_text("concurrent: true\n")
        assert load_settings(path).concurrent is True
