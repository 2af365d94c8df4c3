"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Protocol version policies.

OData v1-3, OData v4 and Redfish services differ in a fixed set of points:
key predicate layout, default headers, the ``$format`` option, singleton
detection, action addressing and how association targets are rewritten.
Each point is a plain function; a ``VersionPolicy`` is the table of those
functions for one protocol and is chosen once per client.

    ============================  ==========  ==============  ==============
    Policy point                  odata       odatav4         redfish
    ============================  ==========  ==============  ==============
    key predicate                 embedded    per metadata    per metadata
    default headers               none        Accept,         Accept,
                                              OData-Version   OData-Version
    ``$format=json``              yes         no              no
    singleton                     has keys    keys or flag    keys or flag
    unbound action parameters     no          yes             yes
    association base rewrite      rewrite     unchanged       unchanged
    ``@odata.id`` targeting       no          no              yes
    ============================  ==========  ==============  ==============
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from odataproxy.core.metadata import EntityMetadata
from odataproxy.core.resource_path import (
    Key,
    KeyFormat,
    build_endpoint,
    format_key_predicate,
    rewrite_base_uri,
)

DEFAULT_RESPONSE_FORMAT = "json"
DEFAULT_RESPONSE_MIME_TYPE = "application/json"
ACCEPT_HEADER = "Accept"
ODATA_VERSION_HEADER = "OData-Version"
DEFAULT_ODATA_VERSION = "4.0"

ODATA = "odata"
ODATA_V4 = "odatav4"
REDFISH = "redfish"


# -- Endpoint resolution ------------------------------------------------------

def entity_endpoint(default_uri: str, connection_override: Optional[str]) -> str:
    return build_endpoint(default_uri, connection_override)


def service_endpoint(default_uri: str, connection_override: Optional[str]) -> str:
    # Redfish treats the override as the full host URI
    if not connection_override:
        return default_uri
    return connection_override


# -- Key predicates ------------------------------------------------------------

def embedded_key_predicate(keys: Sequence[Key], metadata: EntityMetadata) -> str:
    return format_key_predicate(keys, KeyFormat.EMBEDDED)


def configured_key_predicate(keys: Sequence[Key], metadata: EntityMetadata) -> str:
    return format_key_predicate(keys, metadata.key_format)


# -- Headers ---------------------------------------------------------------------

def add_header_if_missing(headers: Optional[Mapping[str, str]], name: str, value: str) -> Dict[str, str]:
    """Return a copy of ``headers`` with ``name`` added unless already present."""
    result = dict(headers or {})
    if any(existing.lower() == name.lower() for existing in result):
        return result
    result[name] = value
    return result


def no_default_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    return dict(headers or {})


def v4_default_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    result = add_header_if_missing(headers, ACCEPT_HEADER, DEFAULT_RESPONSE_MIME_TYPE)
    return add_header_if_missing(result, ODATA_VERSION_HEADER, DEFAULT_ODATA_VERSION)


# -- Singleton detection ---------------------------------------------------------

def keyed_single_instance(key_predicate: str, metadata: EntityMetadata) -> bool:
    return bool(key_predicate)


def keyed_or_singleton_instance(key_predicate: str, metadata: EntityMetadata) -> bool:
    return bool(key_predicate) or metadata.is_singleton


# -- Association base rewrite ------------------------------------------------------

def rewrite_association_base(endpoint: str, referred_resource: str) -> Tuple[str, str]:
    return rewrite_base_uri(endpoint, referred_resource)


def keep_association_base(endpoint: str, referred_resource: str) -> Tuple[str, str]:
    return endpoint, referred_resource


@dataclass(frozen=True)
class VersionPolicy:
    """Behavior table for one protocol version."""
    name: str
    resolve_endpoint: Callable[[str, Optional[str]], str]
    key_predicate: Callable[[Sequence[Key], EntityMetadata], str]
    default_headers: Callable[[Optional[Mapping[str, str]]], Dict[str, str]]
    is_single_instance: Callable[[str, EntityMetadata], bool]
    association_base: Callable[[str, str], Tuple[str, str]]
    include_format: bool = True
    unbound_action_parameters: bool = False
    action_type_from_method: bool = False
    resolves_odata_id: bool = False
    inner_exception_from_metadata: bool = False

    def format_parameters(self) -> Dict[str, str]:
        """Literal query parameters appended to reads, actions and updates."""
        if not self.include_format:
            return {}
        return {"$format": DEFAULT_RESPONSE_FORMAT}


BASE_POLICY = VersionPolicy(
    name=ODATA,
    resolve_endpoint=entity_endpoint,
    key_predicate=embedded_key_predicate,
    default_headers=no_default_headers,
    is_single_instance=keyed_single_instance,
    association_base=rewrite_association_base,
)

V4_POLICY = VersionPolicy(
    name=ODATA_V4,
    resolve_endpoint=entity_endpoint,
    key_predicate=configured_key_predicate,
    default_headers=v4_default_headers,
    is_single_instance=keyed_or_singleton_instance,
    association_base=keep_association_base,
    include_format=False,
    unbound_action_parameters=True,
    action_type_from_method=True,
)

REDFISH_POLICY = VersionPolicy(
    name=REDFISH,
    resolve_endpoint=service_endpoint,
    key_predicate=configured_key_predicate,
    default_headers=v4_default_headers,
    is_single_instance=keyed_or_singleton_instance,
    association_base=keep_association_base,
    include_format=False,
    unbound_action_parameters=True,
    action_type_from_method=True,
    resolves_odata_id=True,
    inner_exception_from_metadata=True,
)

POLICIES: Dict[str, VersionPolicy] = {
    policy.name: policy for policy in (BASE_POLICY, V4_POLICY, REDFISH_POLICY)
}


def get_policy(name: str) -> VersionPolicy:
    """Look up a policy by protocol name (``odata``, ``odatav4``, ``redfish``)."""
    try:
        return POLICIES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown protocol '{name}', expected one of {sorted(POLICIES)}"
        ) from None
