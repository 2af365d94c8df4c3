"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Resource path construction for OData endpoints.

Builds the entity endpoint URI (honouring a connection override), renders
key predicates in either embedded ``(Id=7, Name='apple')`` or separate
``/7/apple`` form, and rewrites the trailing entity segment for
association targets.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Tuple
from urllib.parse import urlsplit, urlunsplit

from odataproxy.exceptions import MalformedUriError, NullKeyValueError
from odataproxy.logging_config import get_logger

logger = get_logger(__name__)

Key = Tuple[str, Any]


class KeyFormat(Enum):
    """How key values are placed in the resource path."""
    EMBEDDED = "EmbeddedKey"  # Product(Id=7,Name='apple')
    SEPARATE = "SeparateKey"  # Product/7/apple


@dataclass(frozen=True)
class EntityReference:
    """Identifies an entity set, singleton or instance on the service.

    ``keys`` is empty for collection and singleton operations, non-empty
    for instance operations. Order is significant.
    """
    entity_name: str
    keys: Tuple[Key, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, entity_name: str, keys: Optional[Iterable[Key]] = None) -> EntityReference:
        return cls(entity_name=entity_name, keys=tuple(keys or ()))

    @property
    def is_instance(self) -> bool:
        return bool(self.keys)


def _split_last_segment(uri: str) -> Tuple[str, str]:
    if not uri:
        raise MalformedUriError(f"Resource URI '{uri}' is empty")
    index = uri.rfind("/")
    if index <= 0:
        raise MalformedUriError(
            f"Resource URI '{uri}' does not contain a path separator"
        )
    return uri[:index], uri[index + 1:]


def build_endpoint(default_uri: str, connection_override: Optional[str] = None) -> str:
    """
    Resolve the entity endpoint, optionally moving it to another service root.

    The default URI is the service root plus the entity name. When a
    connection override is given only the trailing entity segment is kept
    and appended to the override.

    Args:
        default_uri: Declared entity URI (e.g. ``http://h/s.svc/Product``)
        connection_override: Alternate service root, or None

    Returns:
        Endpoint URI for the entity

    Raises:
        MalformedUriError: If the default URI has no usable ``/``
    """
    if not connection_override:
        return default_uri

    _, entity_name = _split_last_segment(default_uri)
    endpoint = f"{connection_override.rstrip('/')}/{entity_name}"
    logger.debug("endpoint_override", default_uri=default_uri, endpoint=endpoint)
    return endpoint


def _quote(text: str) -> str:
    # Single quotes inside a literal are doubled
    return "'" + text.replace("'", "''") + "'"


def format_key_value(value: Any) -> str:
    """Render one key value as an OData literal."""
    # bool is an int subclass but is not an integral key literal
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, uuid.UUID):
        return "guid" + _quote(str(value))
    return _quote(str(value))


def format_key_predicate(
    keys: Sequence[Key],
    key_format: KeyFormat = KeyFormat.EMBEDDED,
) -> str:
    """
    Render the key predicate for an entity instance.

    Args:
        keys: Ordered ``(name, value)`` pairs
        key_format: Embedded ``(k=v, ...)`` or separate ``/v/...`` form

    Returns:
        Key predicate, or an empty string when there are no keys

    Raises:
        NullKeyValueError: If any key value is None
    """
    if not keys:
        return ""

    for name, value in keys:
        if value is None:
            raise NullKeyValueError(name)

    if key_format is KeyFormat.SEPARATE:
        return "".join(f"/{value}" for _, value in keys)

    pairs = ", ".join(f"{name}={format_key_value(value)}" for name, value in keys)
    return f"({pairs})"


def rewrite_base_uri(uri: str, replacement_entity_name: str) -> Tuple[str, str]:
    """
    Replace the trailing entity segment of a URI.

    Args:
        uri: URI ending in an entity segment
        replacement_entity_name: Segment to put in its place

    Returns:
        ``(rewritten_uri, original_trailing_segment)``

    Raises:
        MalformedUriError: If the URI has no usable ``/``
    """
    prefix, original = _split_last_segment(uri)
    return f"{prefix}/{replacement_entity_name}", original


def replace_uri_path(host_uri: str, path: str) -> str:
    """Return ``host_uri`` with its path replaced by ``path``."""
    parts = urlsplit(host_uri)
    if not path.startswith("/"):
        path = "/" + path
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def is_unsecure_uri(uri: str) -> bool:
    """True when the URI uses the unencrypted ``http`` scheme."""
    return urlsplit(uri).scheme.lower() == "http"
