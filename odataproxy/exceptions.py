"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Exception hierarchy for ODataProxy.

All custom exceptions inherit from ODataProxyError base class.
"""

from typing import Optional


class ODataProxyError(Exception):
    """Base exception for all ODataProxy errors."""
    pass


# Request Construction Errors
class RequestConstructionError(ODataProxyError):
    """Base exception for errors raised while building a request."""
    pass


class MalformedUriError(RequestConstructionError):
    """Raised when a resource URI lacks the expected path separator."""
    pass


class MalformedMethodNameError(RequestConstructionError):
    """Raised when a method name does not follow Verb[:Qualifier:Target]."""
    pass


class MalformedPropertyNameError(RequestConstructionError):
    """Raised when a property filter name has the wrong number of segments."""
    pass


class NullKeyValueError(RequestConstructionError):
    """Raised when a key in an entity reference has no value."""

    def __init__(self, key_name: str):
        self.key_name = key_name
        super().__init__(f"Value for key '{key_name}' cannot be null")


class UnsupportedMethodError(RequestConstructionError):
    """Raised when a bare method name is not Create, Update or Delete."""
    pass


class DuplicateQueryOptionError(RequestConstructionError):
    """Raised when the same query option is set twice on one request."""
    pass


class NavigationError(RequestConstructionError):
    """Raised when an @odata.id or action target cannot be resolved."""
    pass


# Configuration Errors
class ConfigurationError(ODataProxyError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass


class MissingMetadataError(ConfigurationError):
    """Raised when required per-entity metadata is absent."""

    def __init__(self, key: str, command: Optional[str] = None):
        self.key = key
        self.command = command
        where = f" for command '{command}'" if command else ""
        super().__init__(
            f"Required entity metadata '{key}' is missing{where}. "
            f"Add '{key}' to the entity's private_data."
        )


# Invocation Errors
class InvocationError(ODataProxyError):
    """Base exception for errors raised at the invocation boundary."""
    pass


class UnsecureConnectionError(InvocationError):
    """Raised when an unencrypted URI is used without explicit allowance."""

    def __init__(self, uri: str, command: Optional[str] = None):
        self.uri = uri
        self.command = command
        super().__init__(
            f"Command '{command or 'unknown'}' refused to connect to '{uri}' over an "
            "unsecure connection. Use an https 'connection_uri' or set "
            "'allow_unsecure_connection'."
        )


class RequestInvocationError(InvocationError):
    """Raised when the transport fails to complete a request."""

    def __init__(self, uri: str, command: Optional[str] = None):
        self.uri = uri
        self.command = command
        super().__init__(
            f"Request to '{uri}' issued by command '{command or 'unknown'}' failed"
        )


class TypeCoercionError(InvocationError):
    """Raised when a response object cannot be coerced to its entity type."""

    def __init__(self, entity_type: str, reason: str = ""):
        self.entity_type = entity_type
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Response data could not be converted to '{entity_type}'{detail}. "
            f"The server sent members that '{entity_type}' does not declare; "
            "set 'allow_additional_data' to receive the raw objects."
        )


class TransportError(InvocationError):
    """Raised by a transport adapter when the service answers with an error status."""

    def __init__(self, status_code: int, uri: str, detail: str = ""):
        self.status_code = status_code
        self.uri = uri
        self.detail = detail
        suffix = f": {detail}" if detail else ""
        super().__init__(f"{uri} returned HTTP {status_code}{suffix}")
