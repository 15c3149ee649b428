"""Tests for configuration loading and validation."""

import pytest
from pydantic import ValidationError

from couchbase_exporter.config.loader import ConfigLoader
from couchbase_exporter.config.models import CouchbaseConfig, ExporterConfig, LoggingConfig
from couchbase_exporter.config.settings import Settings

FULL_CONFIG = """
couchbase:
  url: "http://cb.example.com:8091/"
  username: "${CB_TEST_USER}"
  password: "${CB_TEST_PASSWORD}"
collection:
  refresh_interval: 30
  rebalance_retry:
    max_attempts: 5
exporter:
  port: 9420
logging:
  level: debug
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(FULL_CONFIG)
    return path


class TestConfigLoader:
    """Test suite for ConfigLoader."""

    def test_load_with_env_substitution(self, config_file, monkeypatch):
        monkeypatch.setenv("CB_TEST_USER", "Administrator")
        monkeypatch.setenv("CB_TEST_PASSWORD", "s3cret")

        config = ConfigLoader.load_from_file(str(config_file))

        assert config.couchbase.username == "Administrator"
        assert config.couchbase.password == "s3cret"
        assert config.couchbase.url == "http://cb.example.com:8091"
        assert config.collection.refresh_interval == 30
        assert config.exporter.port == 9420
        assert config.logging.level == "DEBUG"

    def test_unset_env_var_becomes_empty(self, config_file, monkeypatch):
        monkeypatch.delenv("CB_TEST_USER", raising=False)

        config = ConfigLoader.load_from_file(str(config_file))

        assert config.couchbase.username == ""

    def test_defaults(self, config_file):
        config = ConfigLoader.load_from_file(str(config_file))

        assert config.collection.node_retry.interval_seconds == 20
        assert config.collection.node_retry.max_attempts == 8
        assert config.collection.node_retry.timeout_seconds == 60
        assert config.collection.rebalance_retry.max_attempts == 5
        assert config.collection.rebalance_retry.interval_seconds == 20
        assert config.exporter.namespace == "cbpernodebucket"
        assert config.exporter.listen_address == "0.0.0.0"

    def test_minimal_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("couchbase:\n  url: https://cb:18091\n")

        config = ConfigLoader.load_from_file(str(path))

        assert config.collection.refresh_interval == 60
        assert config.collection.rebalance_retry.timeout_seconds == 600
        assert config.exporter.port == 9091
        assert config.logging.level == "INFO"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load_from_file(str(tmp_path / "absent.yaml"))

    def test_missing_couchbase_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("exporter:\n  port: 9091\n")

        with pytest.raises(ValidationError):
            ConfigLoader.load_from_file(str(path))


class TestModels:
    """Validation rules on configuration models."""

    def test_url_scheme_required(self):
        with pytest.raises(ValidationError):
            CouchbaseConfig(url="cb.example.com:8091")

    def test_namespace_characters(self):
        with pytest.raises(ValidationError):
            ExporterConfig(namespace="cb-pernode")

    def test_port_range(self):
        with pytest.raises(ValidationError):
            ExporterConfig(port=70000)

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


class TestSettings:
    """Test suite for environment Settings."""

    def test_get_default(self, monkeypatch):
        monkeypatch.delenv("CB_TEST_MISSING", raising=False)
        assert Settings.get("CB_TEST_MISSING", "fallback") == "fallback"

    def test_get_missing_without_default(self, monkeypatch):
        monkeypatch.delenv("CB_TEST_MISSING", raising=False)
        assert Settings.get("CB_TEST_MISSING") == ""

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert Settings().LOG_LEVEL == "DEBUG"

    def test_log_level_unset_is_empty(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert Settings().LOG_LEVEL == ""

    def test_validate_required(self, monkeypatch):
        monkeypatch.setenv("CB_USERNAME", "Administrator")
        monkeypatch.delenv("CB_PASSWORD", raising=False)

        with pytest.raises(ValueError, match="CB_PASSWORD"):
            Settings.validate_required()

    def test_credential_accessors(self, monkeypatch):
        monkeypatch.setenv("CB_USERNAME", "Administrator")
        monkeypatch.setenv("CB_PASSWORD", "s3cret")

        settings = Settings()

        assert settings.CB_USERNAME == "Administrator"
        assert settings.CB_PASSWORD == "s3cret"
