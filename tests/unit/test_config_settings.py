"""
Unit tests for configuration management.
"""

from pathlib import Path

import pytest

from odataproxy.config.settings import (
    _expand_env_vars,
    get_default_config,
    get_default_config_path,
    load_config,
)
from odataproxy.exceptions import InvalidConfigurationError


class TestDefaults:
    """Test default configuration values."""

    def test_default_config(self):
        config = get_default_config()
        assert config.entities == {}
        assert config.logging.level == "INFO"
        assert config.connection.timeout_seconds == 30.0
        assert config.connection.allow_unsecure_connection is False

    def test_default_path(self):
        assert get_default_config_path().endswith(".odataproxy/config.yaml")

    def test_missing_file_returns_defaults(self, temp_dir: Path):
        config = load_config(str(temp_dir / "missing.yaml"))
        assert config == get_default_config()

    def test_empty_file_returns_defaults(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text("")
        assert load_config(str(path)) == get_default_config()


class TestLoadConfig:
    """Test loading configuration files."""

    def test_sample_config(self, sample_config_path: Path):
        config = load_config(str(sample_config_path))

        assert config.connection.allow_unsecure_connection is True
        assert config.connection.headers == {"X-Client": "tests"}
        assert sorted(config.entities) == ["Product", "System"]

        product = config.get_entity("Product")
        assert product.resource_uri == "http://h/s.svc/Product"
        assert product.protocol == "odata"
        assert product.private_data["EntityTypeName"] == "ODataDemo.Product"

        system = config.get_entity("System")
        assert system.protocol == "redfish"
        assert system.private_data["ActionTargets"] == "Reset=System"

    def test_credential_and_env_expansion(self, temp_dir: Path, monkeypatch):
        monkeypatch.setenv("ODATA_PASSWORD", "secret")
        monkeypatch.delenv("ODATA_ROOT", raising=False)
        path = temp_dir / "config.yaml"
        path.write_text(
            "connection:\n"
            "  connection_uri: ${ODATA_ROOT:https://h/s.svc}\n"
            "  credential:\n"
            "    username: root\n"
            "    password: ${ODATA_PASSWORD}\n"
            "  timeout_seconds: 5\n"
        )
        config = load_config(str(path))
        assert config.connection.connection_uri == "https://h/s.svc"
        assert config.connection.credential.username == "root"
        assert config.connection.credential.password == "secret"
        assert config.connection.timeout_seconds == 5.0

    def test_protocol_is_lower_cased(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text(
            "entities:\n"
            "  Product:\n"
            "    resource_uri: https://h/s.svc/Product\n"
            "    protocol: ODataV4\n"
        )
        assert load_config(str(path)).get_entity("Product").protocol == "odatav4"

    def test_unknown_entity(self, sample_config_path: Path):
        config = load_config(str(sample_config_path))
        with pytest.raises(InvalidConfigurationError, match="not configured"):
            config.get_entity("Order")


class TestInvalidConfig:
    """Test validation errors."""

    def write(self, temp_dir: Path, content: str) -> str:
        path = temp_dir / "config.yaml"
        path.write_text(content)
        return str(path)

    def test_malformed_yaml(self, temp_dir: Path):
        path = self.write(temp_dir, "connection: [unclosed\n")
        with pytest.raises(InvalidConfigurationError, match="Failed to parse"):
            load_config(path)

    def test_non_mapping(self, temp_dir: Path):
        with pytest.raises(InvalidConfigurationError, match="mapping"):
            load_config(self.write(temp_dir, "- a\n- b\n"))

    def test_invalid_log_level(self, temp_dir: Path):
        with pytest.raises(InvalidConfigurationError, match="logging level"):
            load_config(self.write(temp_dir, "logging:\n  level: LOUD\n"))

    def test_invalid_log_format(self, temp_dir: Path):
        with pytest.raises(InvalidConfigurationError, match="logging format"):
            load_config(self.write(temp_dir, "logging:\n  format: xml\n"))

    def test_non_positive_timeout(self, temp_dir: Path):
        with pytest.raises(InvalidConfigurationError, match="timeout_seconds"):
            load_config(self.write(temp_dir, "connection:\n  timeout_seconds: 0\n"))

    def test_entity_without_uri(self, temp_dir: Path):
        with pytest.raises(InvalidConfigurationError, match="resource_uri"):
            load_config(self.write(temp_dir, "entities:\n  Product:\n    protocol: odata\n"))

    def test_unknown_protocol(self, temp_dir: Path):
        content = "entities:\n  Product:\n    resource_uri: https://h/P\n    protocol: soap\n"
        with pytest.raises(InvalidConfigurationError, match="protocol"):
            load_config(self.write(temp_dir, content))

    def test_entity_not_mapping(self, temp_dir: Path):
        with pytest.raises(InvalidConfigurationError, match="must be a mapping"):
            load_config(self.write(temp_dir, "entities:\n  Product: 3\n"))


class TestExpandEnvVars:
    """Test environment variable substitution."""

    def test_nested_values(self, monkeypatch):
        monkeypatch.setenv("BMC_HOST", "bmc1")
        result = _expand_env_vars({"a": ["https://${BMC_HOST}/redfish"], "b": 3})
        assert result == {"a": ["https://bmc1/redfish"], "b": 3}

    def test_default_value(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR", raising=False)
        assert _expand_env_vars("${UNSET_VAR:fallback}") == "fallback"
        assert _expand_env_vars("${UNSET_VAR}") == ""
