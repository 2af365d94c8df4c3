"""
Configuration management for ODataProxy.

Handles loading and validation of configuration files.
"""

from odataproxy.config.settings import (
    ConnectionConfig,
    CredentialConfig,
    EntityConfig,
    LoggingConfig,
    ODataProxyConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "ConnectionConfig",
    "CredentialConfig",
    "EntityConfig",
    "LoggingConfig",
    "ODataProxyConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
