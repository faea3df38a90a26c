"""
Unit tests for configuration management.
"""

from pathlib import Path

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError

from gostman.core import config as config_module
from gostman.core.config import (
    APIConfig,
    ExecutorConfig,
    GostmanConfig,
    LoggingConfig,
    StorageConfig,
    default_data_dir,
    get_store_path,
    load_config,
    reload_config,
)


@pytest.fixture
def clean_global_config(monkeypatch):
    """Isolate the module-level configuration instance."""
    monkeypatch.setattr(config_module, "_config", None)


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = GostmanConfig()
        assert config.storage.file_name == "gostman.json"
        assert config.executor.timeout == 30.0
        assert config.executor.verify_ssl is True
        assert config.api.port == 8000

    def test_default_data_dir_is_per_profile(self, monkeypatch):
        monkeypatch.setattr(config_module.sys, "platform", "linux")
        assert default_data_dir() == str(Path.home() / ".local" / "share" / "Gostman")

    def test_default_data_dir_on_windows(self, monkeypatch, temp_dir):
        monkeypatch.setattr(config_module.sys, "platform", "win32")
        monkeypatch.setenv("APPDATA", str(temp_dir))
        assert default_data_dir() == str(temp_dir / "Gostman")

    def test_store_path(self, temp_dir):
        config = GostmanConfig(storage={"data_dir": str(temp_dir), "file_name": "x.json"})
        assert config.store_path == temp_dir / "x.json"


class TestValidation:
    """Tests for section validators."""

    @given(level=st.sampled_from(["debug", "Info", "WARNING", "error", "CRITICAL"]))
    def test_log_level_is_normalized(self, level):
        assert LoggingConfig(level=level).level == level.upper()

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    @given(port=st.integers(min_value=1, max_value=65535))
    def test_valid_ports(self, port):
        assert APIConfig(port=port).port == port

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_invalid_ports(self, port):
        with pytest.raises(ValidationError):
            APIConfig(port=port)

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ValidationError):
            ExecutorConfig(timeout=timeout)

    @pytest.mark.parametrize("file_name", ["", "sub/gostman.json", "../gostman.json"])
    def test_invalid_file_name(self, file_name):
        with pytest.raises(ValidationError):
            StorageConfig(file_name=file_name)


class TestEnvironmentOverrides:
    """Tests for GOSTMAN_ environment variables."""

    def test_nested_overrides(self, monkeypatch, temp_dir):
        monkeypatch.setenv("GOSTMAN_EXECUTOR__TIMEOUT", "12")
        monkeypatch.setenv("GOSTMAN_STORAGE__DATA_DIR", str(temp_dir))
        monkeypatch.setenv("GOSTMAN_API__PORT", "9100")

        config = GostmanConfig()

        assert config.executor.timeout == 12.0
        assert config.store_path == temp_dir / "gostman.json"
        assert config.api.port == 9100

    def test_env_file(self, temp_dir):
        env_file = temp_dir / "gostman.env"
        env_file.write_text("GOSTMAN_DEBUG=true\nGOSTMAN_EXECUTOR__VERIFY_SSL=false\n")

        config = load_config(env_file)

        assert config.debug is True
        assert config.executor.verify_ssl is False

    def test_missing_env_file_uses_defaults(self, temp_dir):
        assert load_config(temp_dir / "missing.env").executor.timeout == 30.0


class TestGlobalConfig:
    """Tests for the module-level configuration helpers."""

    def test_get_config_is_cached(self, clean_global_config):
        assert config_module.get_config() is config_module.get_config()

    def test_reload_from_env_file(self, clean_global_config, temp_dir):
        env_file = temp_dir / "gostman.env"
        env_file.write_text("GOSTMAN_DEBUG=true\n")

        config = reload_config(env_file)

        assert config is config_module.get_config()
        assert config.debug is True

    def test_reload_and_store_path(self, clean_global_config, monkeypatch, temp_dir):
        monkeypatch.setenv("GOSTMAN_STORAGE__DATA_DIR", str(temp_dir))
        reload_config()
        assert get_store_path() == temp_dir / "gostman.json"
