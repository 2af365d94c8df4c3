"""
Configuration management for ODataProxy.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from odataproxy.core.policy import POLICIES
from odataproxy.exceptions import InvalidConfigurationError
from odataproxy.logging_config import get_logger

logger = get_logger(__name__)


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${ODATA_PASSWORD}" -> value of ODATA_PASSWORD env var
        "${ODATA_HOST:localhost}" -> value of ODATA_HOST or "localhost" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class CredentialConfig:
    """Basic authentication credential."""

    username: str = ""
    password: str = ""


@dataclass
class ConnectionConfig:
    """Connection settings shared by every entity."""

    connection_uri: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    credential: Optional[CredentialConfig] = None
    certificate_thumbprint: str = ""
    allow_unsecure_connection: bool = False
    allow_additional_data: bool = False
    pass_inner_exception: bool = False
    skip_certificate_check: bool = False
    timeout_seconds: float = 30.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"


@dataclass
class EntityConfig:
    """One logical entity exposed by a service."""

    name: str
    resource_uri: str
    protocol: str = "odata"
    private_data: Dict[str, str] = field(default_factory=dict)


@dataclass
class ODataProxyConfig:
    """Main ODataProxy configuration."""

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    entities: Dict[str, EntityConfig] = field(default_factory=dict)

    def get_entity(self, name: str) -> EntityConfig:
        """
        Look up a configured entity.

        Raises:
            InvalidConfigurationError: If the entity is not configured
        """
        if name not in self.entities:
            raise InvalidConfigurationError(
                f"Entity '{name}' is not configured; known entities: {sorted(self.entities)}"
            )
        return self.entities[name]


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.odataproxy/config.yaml")


def get_default_config() -> ODataProxyConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        ODataProxyConfig: Default configuration object
    """
    return ODataProxyConfig(
        connection=ConnectionConfig(),
        logging=LoggingConfig(level="INFO", file="", format="console"),
        entities={},
    )


def load_config(config_path: Optional[str] = None) -> ODataProxyConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        ODataProxyConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(config_path)

    if not os.path.exists(config_path):
        logger.info("config_not_found", path=config_path)
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug("config_loaded", path=config_path)
    except yaml.YAMLError as e:
        logger.error("config_parse_failed", path=config_path, error=str(e))
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error("config_read_failed", path=config_path, error=str(e))
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.info("config_empty", path=config_path)
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError as e:
        logger.error("config_invalid", path=config_path, error=str(e))
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e
    except (TypeError, ValueError, AttributeError) as e:
        logger.error("config_invalid", path=config_path, error=str(e))
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    logger.info("config_validated", path=config_path, entities=len(config.entities))
    return config


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _build_connection(data: Dict[str, Any]) -> ConnectionConfig:
    defaults = ConnectionConfig()

    credential = None
    credential_data = data.get('credential')
    if credential_data:
        credential = CredentialConfig(
            username=str(credential_data.get('username', '')),
            password=str(credential_data.get('password', '')),
        )

    return ConnectionConfig(
        connection_uri=data.get('connection_uri') or defaults.connection_uri,
        headers={str(k): str(v) for k, v in (data.get('headers') or {}).items()},
        credential=credential,
        certificate_thumbprint=data.get('certificate_thumbprint') or defaults.certificate_thumbprint,
        allow_unsecure_connection=_parse_bool(data.get('allow_unsecure_connection', False)),
        allow_additional_data=_parse_bool(data.get('allow_additional_data', False)),
        pass_inner_exception=_parse_bool(data.get('pass_inner_exception', False)),
        skip_certificate_check=_parse_bool(data.get('skip_certificate_check', False)),
        timeout_seconds=float(data.get('timeout_seconds', defaults.timeout_seconds)),
    )


def _build_config_from_dict(config_data: Dict[str, Any]) -> ODataProxyConfig:
    """
    Build ODataProxyConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.

    Args:
        config_data: Dictionary loaded from YAML file

    Returns:
        ODataProxyConfig: Configuration object

    Raises:
        InvalidConfigurationError: If an entity section is malformed
    """
    default_config = get_default_config()

    connection = _build_connection(config_data.get('connection') or {})

    logging_data = config_data.get('logging') or {}
    logging = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)),
        file=os.path.expanduser(str(logging_data.get('file') or default_config.logging.file)),
        format=str(logging_data.get('format', default_config.logging.format)),
    )

    entities: Dict[str, EntityConfig] = {}
    for name, entity_data in (config_data.get('entities') or {}).items():
        if not isinstance(entity_data, dict):
            raise InvalidConfigurationError(f"Entity '{name}' must be a mapping")
        entities[name] = EntityConfig(
            name=name,
            resource_uri=str(entity_data.get('resource_uri') or ""),
            protocol=str(entity_data.get('protocol', 'odata')).lower(),
            private_data={
                str(k): str(v) for k, v in (entity_data.get('private_data') or {}).items()
            },
        )

    return ODataProxyConfig(connection=connection, logging=logging, entities=entities)


def _validate_config(config: ODataProxyConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )

    valid_formats = ["json", "console"]
    if config.logging.format not in valid_formats:
        raise InvalidConfigurationError(
            f"logging format must be one of {valid_formats}, "
            f"got '{config.logging.format}'"
        )

    if config.connection.timeout_seconds <= 0:
        raise InvalidConfigurationError(
            f"timeout_seconds must be positive, got {config.connection.timeout_seconds}"
        )

    for name, entity in config.entities.items():
        if not entity.resource_uri:
            raise InvalidConfigurationError(f"Entity '{name}' has no resource_uri")
        if entity.protocol not in POLICIES:
            raise InvalidConfigurationError(
                f"Entity '{name}' protocol must be one of {sorted(POLICIES)}, "
                f"got '{entity.protocol}'"
            )
