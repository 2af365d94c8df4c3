"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Request construction core: resource paths, query options, method
dispatch and version policies. Nothing in this package performs I/O.
"""

from odataproxy.core.dispatcher import ReadRequest, RequestDispatcher
from odataproxy.core.invocation import MethodInvocation, RequestKind, parse_method_name
from odataproxy.core.metadata import EntityMetadata
from odataproxy.core.policy import BASE_POLICY, REDFISH_POLICY, V4_POLICY, VersionPolicy, get_policy
from odataproxy.core.query import QueryBuilder, QueryOption, QuerySpec, apply_query_options
from odataproxy.core.records import RecordKind, RecordProcessor, ResponseRecord, TypeRegistry
from odataproxy.core.request import HttpRequestSpec, TransportResult
from odataproxy.core.resource_path import (
    EntityReference,
    KeyFormat,
    build_endpoint,
    format_key_predicate,
    rewrite_base_uri,
)

__all__ = [
    "BASE_POLICY",
    "EntityMetadata",
    "EntityReference",
    "HttpRequestSpec",
    "KeyFormat",
    "MethodInvocation",
    "QueryBuilder",
    "QueryOption",
    "QuerySpec",
    "REDFISH_POLICY",
    "ReadRequest",
    "RecordKind",
    "RecordProcessor",
    "RequestDispatcher",
    "RequestKind",
    "ResponseRecord",
    "TransportResult",
    "TypeRegistry",
    "V4_POLICY",
    "VersionPolicy",
    "apply_query_options",
    "build_endpoint",
    "format_key_predicate",
    "get_policy",
    "parse_method_name",
    "rewrite_base_uri",
]
