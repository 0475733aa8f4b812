"""Tests for configuration loading and environment overrides."""

import pytest

from compliance_config import (
    CONFIG_ENV_VAR,
    DATABASE_URL_ENV_VAR,
    ModeDefinition,
    get_active_config,
)
from compliance_config.loader import compute_checksum, parse_config
from compliance_kernel.exceptions import ConfigurationError

MINIMAL = """
config_id: test
database:
  url: sqlite:///test.db
modes:
  - name: 2To1
    allowed_direct: 2
"""


def _write(tmp_path, text, name="runner.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaultConfig:
    def test_packaged_default_loads(self):
        config = get_active_config(env={})

        assert config.config_id == "default"
        assert config.database.url == "sqlite:///compliance.db"
        assert config.log_level == "INFO"
        assert config.modes == (
            ModeDefinition("2To1", 2),
            ModeDefinition("3To1", 3),
        )
        assert config.mode("3To1").allowed_direct == 3
        assert config.mode("4To1") is None
        assert len(config.checksum) == 64


class TestResolution:
    def test_explicit_path(self, tmp_path):
        config = get_active_config(_write(tmp_path, MINIMAL), env={})
        assert config.config_id == "test"
        assert config.database.pool_size == 5

    def test_env_path(self, tmp_path):
        path = _write(tmp_path, MINIMAL)
        config = get_active_config(env={CONFIG_ENV_VAR: str(path)})
        assert config.config_id == "test"

    def test_database_url_override(self, tmp_path):
        config = get_active_config(
            _write(tmp_path, MINIMAL),
            env={DATABASE_URL_ENV_VAR: "postgresql://u:p@db/compliance"},
        )
        assert config.database.url == "postgresql://u:p@db/compliance"

    def test_load_is_logged(self, tmp_path, captured_logs):
        get_active_config(_write(tmp_path, MINIMAL), env={})
        loaded = [r for r in captured_logs() if r["message"] == "config_loaded"]
        assert loaded[0]["config_id"] == "test"
        assert loaded[0]["database_url_overridden"] is False


class TestInvalidConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="file not found"):
            get_active_config(tmp_path / "absent.yaml", env={})

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError, match="invalid YAML"):
            get_active_config(_write(tmp_path, "modes: [unclosed"), env={})

    def test_top_level_not_mapping(self, tmp_path):
        with pytest.raises(ConfigurationError, match="top level must be a mapping"):
            get_active_config(_write(tmp_path, "- a\n- b\n"), env={})

    def test_missing_database_url(self, tmp_path):
        text = MINIMAL.replace("  url: sqlite:///test.db\n", "  echo: true\n")
        with pytest.raises(ConfigurationError) as exc_info:
            get_active_config(_write(tmp_path, text), env={})
        assert "missing required key 'database.url'" in str(exc_info.value)

    def test_bad_allowed_direct(self):
        data = {
            "config_id": "x",
            "database": {"url": "sqlite://"},
            "modes": [{"name": "2To1", "allowed_direct": 0}],
        }
        with pytest.raises(ConfigurationError, match="at least 1"):
            parse_config(data)

    def test_empty_modes(self):
        data = {"config_id": "x", "database": {"url": "sqlite://"}, "modes": []}
        with pytest.raises(ConfigurationError, match="non-empty list"):
            parse_config(data)


def test_checksum_ignores_key_order():
    assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
