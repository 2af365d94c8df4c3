"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Request-kind dispatcher.

Turns a property-filter query or a method invocation into the outbound
``HttpRequestSpec`` for one entity, following the entity's version policy.
Structural problems (bad method names, null keys, missing metadata) are
raised here, before anything reaches the transport. Mutating operations
pass the confirmation gate; a declined operation produces no request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from odataproxy.core.confirmation import ConfirmationGate
from odataproxy.core.invocation import MethodInvocation, MethodName, RequestKind
from odataproxy.core.metadata import ENTITY_TYPE_NAME, EntityMetadata, NavigationLink
from odataproxy.core.navigation import navigate, resolve_action_target, resolve_odata_id
from odataproxy.core.policy import VersionPolicy
from odataproxy.core.query import QueryBuilder, append_query_parameters, apply_query_options
from odataproxy.core.request import HttpRequestSpec
from odataproxy.core.resource_path import Key, replace_uri_path
from odataproxy.core.serialization import JSON_CONTENT_TYPE, build_body, encode_body
from odataproxy.exceptions import NavigationError, UnsupportedMethodError
from odataproxy.logging_config import get_logger, log_request_dispatch

logger = get_logger(__name__)

ODATA_ID_PARAMETER = "OdataId"
RESOURCE_PARAMETER = "Resource"
ASSOCIATION_VALUE_PARAMETER = "Value"
LINKS_SEGMENT = "$links"


@dataclass
class ReadRequest:
    """A GET request together with how its response is unpacked."""
    request: HttpRequestSpec
    single_instance: bool


def _lookup(name: str, *sources: Mapping[str, Any]) -> Any:
    # Case-insensitive parameter lookup across several mappings
    for source in sources:
        for key, value in source.items():
            if key.lower() == name.lower():
                return value
    return None


class RequestDispatcher:
    """
    Builds requests for one entity under one version policy.

    Args:
        policy: Version policy selected for the entity
        metadata: The entity's private metadata
        resource_uri: Declared entity URI (service root plus entity name)
        gate: Confirmation gate for mutating operations
        connection_uri: Optional service root override
        headers: Caller-supplied headers, never mutated
        certificate_thumbprint: Forwarded on every request
    """

    def __init__(
        self,
        policy: VersionPolicy,
        metadata: EntityMetadata,
        resource_uri: str,
        gate: ConfirmationGate,
        connection_uri: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        certificate_thumbprint: Optional[str] = None,
    ):
        self.policy = policy
        self.metadata = metadata
        self.resource_uri = resource_uri
        self.connection_uri = connection_uri
        self._gate = gate
        self._headers = dict(headers or {})
        self._certificate_thumbprint = certificate_thumbprint

    @property
    def headers(self) -> Dict[str, str]:
        """Effective headers, including the policy's defaults."""
        return self.policy.default_headers(self._headers)

    def endpoint(self) -> str:
        return self.policy.resolve_endpoint(self.resource_uri, self.connection_uri)

    def key_predicate(self, keys: Sequence[Key]) -> str:
        return self.policy.key_predicate(keys, self.metadata)

    def _with_format(self, uri: str) -> str:
        return append_query_parameters(uri, self.policy.format_parameters())

    def _request(self, verb: str, uri: str, kind: str, body: Optional[Dict[str, Any]] = None) -> HttpRequestSpec:
        request = HttpRequestSpec(
            verb=verb,
            uri=uri,
            headers=self.headers,
            body=encode_body(body),
            content_type=JSON_CONTENT_TYPE if body is not None else None,
            certificate_thumbprint=self._certificate_thumbprint,
        )
        log_request_dispatch(logger, verb, uri, kind, self.policy.name)
        return request

    # -- Reads -------------------------------------------------------------

    def build_reads(
        self,
        query: QueryBuilder,
        parent_type: Optional[str] = None,
        bound_objects: Optional[Mapping[str, Any]] = None,
    ) -> List[ReadRequest]:
        """
        Build the GET requests for a property-filter query.

        Args:
            query: Accumulated keys and query options
            parent_type: Name of the parent type the objects in
                ``bound_objects`` belong to (Redfish navigation)
            bound_objects: Response-shaped objects bound to the call

        Returns:
            One request for plain and association reads, one per target
            for Redfish navigation reads
        """
        bound = bound_objects or {}

        if self.policy.resolves_odata_id and parent_type:
            link = self.metadata.navigation_link(parent_type)
            if link is not None:
                return self._navigation_reads(query, parent_type, link, bound)

        key_predicate = self.key_predicate(query.keys)
        endpoint = self.endpoint()

        if query.referred_resource is not None:
            if self.policy.resolves_odata_id:
                value = _lookup(ASSOCIATION_VALUE_PARAMETER, bound)
                uri = replace_uri_path(endpoint, resolve_odata_id(value))
            else:
                base, segment = self.policy.association_base(endpoint, query.referred_resource)
                uri = self._with_format(f"{base}{key_predicate}/{segment}")
            single_instance = False
        else:
            uri = self._with_format(endpoint + key_predicate)
            single_instance = self.policy.is_single_instance(key_predicate, self.metadata)

        uri = apply_query_options(uri, query.spec)
        return [ReadRequest(self._request("GET", uri, "get"), single_instance)]

    def _navigation_reads(
        self,
        query: QueryBuilder,
        parent_type: str,
        link: NavigationLink,
        bound: Mapping[str, Any],
    ) -> List[ReadRequest]:
        parents = _lookup(parent_type, bound)
        if parents is None:
            raise NavigationError(f"No '{parent_type}' objects were supplied to navigate from")
        if isinstance(parents, Mapping):
            parents = [parents]

        endpoint = self.endpoint()
        reads = []
        for parent in parents:
            for odata_id in navigate(parent, link):
                uri = apply_query_options(replace_uri_path(endpoint, odata_id), query.spec)
                reads.append(ReadRequest(self._request("GET", uri, "navigation"), True))
        return reads

    # -- Response typing ---------------------------------------------------

    def response_entity_type(self, method_name: Optional[MethodName] = None) -> str:
        """
        Entity type the response objects are coerced to.

        Raises:
            MissingMetadataError: If ``EntityTypeName`` is required and absent
        """
        if (
            method_name is not None
            and method_name.kind is RequestKind.ACTION
            and method_name.target
            and self.policy.action_type_from_method
            and ENTITY_TYPE_NAME not in self.metadata
        ):
            return method_name.target
        return self.metadata.entity_type_name

    # -- Method invocations ------------------------------------------------

    def dispatch(self, invocation: MethodInvocation) -> Optional[HttpRequestSpec]:
        """
        Build the request for a method invocation.

        Returns:
            The request, or None when the confirmation gate declined it

        Raises:
            MalformedMethodNameError: If the method name is malformed
            UnsupportedMethodError: If the method is not supported
            NullKeyValueError: If a key has no value
            MissingMetadataError: If required metadata is absent
            NavigationError: If a Redfish target cannot be resolved
        """
        name = invocation.parsed_name()

        if self.policy.resolves_odata_id:
            return self._dispatch_by_odata_id(invocation, name)

        if name.kind is RequestKind.ACTION:
            return self._dispatch_action(invocation, name)
        if name.kind.is_association:
            return self._dispatch_association(invocation, name)
        return self._dispatch_crud(invocation, name)

    def _confirmed(self, invocation: MethodInvocation, uri: str, is_action: bool) -> bool:
        return self._gate.confirm(invocation.method_name, uri, is_action, force=invocation.force)

    def _dispatch_crud(self, invocation: MethodInvocation, name: MethodName) -> Optional[HttpRequestSpec]:
        keys = invocation.keys()
        key_predicate = self.key_predicate(keys)
        endpoint = self.endpoint()

        if name.kind is RequestKind.CREATE:
            uri = endpoint
            verb = self.metadata.create_verb
            body = build_body(keys, invocation.non_keys(), self.metadata.entity_type_name)
        elif name.kind is RequestKind.UPDATE:
            uri = self._with_format(endpoint + key_predicate)
            verb = self.metadata.update_verb
            body = build_body(None, invocation.non_keys(), self.metadata.entity_type_name)
        else:
            uri = self._with_format(endpoint + key_predicate)
            verb = "DELETE"
            body = None

        if not self._confirmed(invocation, uri, is_action=False):
            return None
        return self._request(verb, uri, name.kind.value, body)

    def _action_uri(self, invocation: MethodInvocation, action_name: str) -> str:
        keys = invocation.keys()
        key_predicate = self.key_predicate(keys)
        endpoint = self.endpoint()

        if key_predicate or not self.policy.unbound_action_parameters:
            return self._with_format(f"{endpoint}{key_predicate}/{action_name}")

        # Unbound action: Name(p1=v1,p2=v2)
        uri = endpoint + action_name
        arguments = [(k, v) for k, v in invocation.non_keys() if v is not None]
        if arguments:
            uri += "(" + ",".join(f"{k}={v}" for k, v in arguments) + ")"
        return self._with_format(uri)

    def _dispatch_action(self, invocation: MethodInvocation, name: MethodName) -> Optional[HttpRequestSpec]:
        uri = self._action_uri(invocation, name.qualifier)
        verb = self.metadata.create_verb
        body = build_body(None, invocation.non_keys())

        if not self._confirmed(invocation, uri, is_action=True):
            return None
        return self._request(verb, uri, name.kind.value, body)

    def _dispatch_association(self, invocation: MethodInvocation, name: MethodName) -> Optional[HttpRequestSpec]:
        keys = invocation.keys()
        key_predicate = self.key_predicate(keys)
        endpoint = self.endpoint()

        rewritten, own_segment = self.policy.association_base(endpoint, name.target)
        referred_predicate = self.key_predicate(invocation.non_keys())
        uri = rewritten + key_predicate
        links = f"{uri}/{LINKS_SEGMENT}/{own_segment}"

        if not self._confirmed(invocation, uri, is_action=False):
            return None

        if name.kind is RequestKind.ASSOCIATION_CREATE:
            body = {"url": endpoint + referred_predicate}
            return self._request("POST", links, name.kind.value, body)
        return self._request("DELETE", links + referred_predicate, name.kind.value)

    def _dispatch_by_odata_id(self, invocation: MethodInvocation, name: MethodName) -> Optional[HttpRequestSpec]:
        # Redfish addresses every resource by its @odata.id
        if name.kind.is_association:
            raise UnsupportedMethodError(
                f"Method '{name.raw}' is not supported by the {self.policy.name} protocol"
            )

        skipped = {ODATA_ID_PARAMETER.lower()}
        odata_id = _lookup(ODATA_ID_PARAMETER, invocation.parameters)

        if name.kind is RequestKind.DELETE and not odata_id:
            resource = _lookup(RESOURCE_PARAMETER, invocation.parameters, invocation.bound_objects)
            if resource is not None:
                odata_id = resolve_odata_id(resource)
        elif name.kind is RequestKind.ACTION:
            target_parameter = self.metadata.action_target_parameter(name.qualifier)
            if target_parameter:
                skipped.add(target_parameter.lower())
                target_object = _lookup(target_parameter, invocation.parameters, invocation.bound_objects)
                if target_object is not None:
                    odata_id = resolve_action_target(target_object, name.qualifier)

        if not odata_id:
            raise NavigationError(f"Method '{name.raw}' has no target resource to address")

        uri = replace_uri_path(self.endpoint(), odata_id)
        parameters = [
            (k, v) for k, v in invocation.present_parameters() if k.lower() not in skipped
        ]

        if name.kind is RequestKind.DELETE:
            verb, body = "DELETE", None
        elif name.kind is RequestKind.UPDATE:
            verb, body = self.metadata.update_verb, build_body(None, parameters)
        else:
            verb, body = self.metadata.create_verb, build_body(None, parameters)

        if not self._confirmed(invocation, uri, is_action=name.kind is RequestKind.ACTION):
            return None
        return self._request(verb, uri, name.kind.value, body)
