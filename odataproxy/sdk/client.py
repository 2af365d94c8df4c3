"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

ODataProxy Client & Builder.

One client serves one logical entity of an OData or Redfish service:

    - ``ODataProxyClient(resource_uri=..., private_data=...)`` for the common case
    - ``ODataProxyBuilder().set_resource_uri(...).use(...).build()`` for advanced setup

The client is the invocation boundary. It enforces connection security,
hands requests to the transport, wraps transport failures and forwards
the response records to the host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from odataproxy.config.settings import ConnectionConfig, ODataProxyConfig
from odataproxy.core.confirmation import ConfirmationGate
from odataproxy.core.dispatcher import RequestDispatcher
from odataproxy.core.invocation import MethodInvocation
from odataproxy.core.metadata import EntityMetadata
from odataproxy.core.policy import ODATA, get_policy
from odataproxy.core.query import QueryBuilder
from odataproxy.core.records import RecordKind, RecordProcessor, ResponseRecord, TypeRegistry
from odataproxy.core.request import HttpRequestSpec
from odataproxy.core.resource_path import is_unsecure_uri
from odataproxy.exceptions import (
    InvalidConfigurationError,
    RequestInvocationError,
    UnsecureConnectionError,
)
from odataproxy.logging_config import (
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_request_failure,
    set_correlation_id,
)
from odataproxy.sdk.adapters.base import BaseAdapter
from odataproxy.sdk.adapters.http import HttpAdapter
from odataproxy.sdk.extensions import ODataProxyExtension
from odataproxy.sdk.hooks import HookRegistry, RequestScope
from odataproxy.sdk.host import CollectingHost, InvocationHost

logger = get_logger(__name__)


@dataclass
class ConnectionOptions:
    """Per-client connection settings."""
    connection_uri: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    credential: Optional[Tuple[str, str]] = None
    certificate_thumbprint: Optional[str] = None
    allow_unsecure_connection: bool = False
    allow_additional_data: bool = False
    pass_inner_exception: bool = False
    skip_certificate_check: bool = False
    timeout_seconds: float = 30.0

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> ConnectionOptions:
        credential = None
        if config.credential is not None and config.credential.username:
            credential = (config.credential.username, config.credential.password)
        return cls(
            connection_uri=config.connection_uri or None,
            headers=dict(config.headers),
            credential=credential,
            certificate_thumbprint=config.certificate_thumbprint or None,
            allow_unsecure_connection=config.allow_unsecure_connection,
            allow_additional_data=config.allow_additional_data,
            pass_inner_exception=config.pass_inner_exception,
            skip_certificate_check=config.skip_certificate_check,
            timeout_seconds=config.timeout_seconds,
        )


class ODataProxyClient:
    """Client for one entity of an OData or Redfish service.

    Quick start::

        client = ODataProxyClient(
            resource_uri="https://h/s.svc/Product",
            private_data={"EntityTypeName": "ODataDemo.Product", ...},
        )
        query = client.query().filter_by_property("Filter", ["Price gt 10"])
        products = await client.get(query)

    Args:
        resource_uri: Declared entity URI (service root plus entity name).
        private_data: The entity's metadata table.
        protocol: ``odata``, ``odatav4`` or ``redfish``.
        options: Connection settings.
        adapter: Custom transport (overrides the default ``HttpAdapter``).
        host: Receives records and answers confirmation prompts.
        type_registry: Entity types response objects are coerced to.
        command: Name of the command this client serves, used in messages.
    """

    def __init__(
        self,
        resource_uri: str,
        private_data: Optional[Mapping[str, str]] = None,
        protocol: str = ODATA,
        options: Optional[ConnectionOptions] = None,
        adapter: Optional[BaseAdapter] = None,
        host: Optional[InvocationHost] = None,
        type_registry: Optional[TypeRegistry] = None,
        command: Optional[str] = None,
    ) -> None:
        self.options = options or ConnectionOptions()
        self.policy = get_policy(protocol)
        self.command = command
        self.metadata = EntityMetadata(private_data, command)

        self._host = host or CollectingHost()
        self._hooks = HookRegistry()
        self._registry = type_registry or TypeRegistry()
        self._adapter = adapter or HttpAdapter(
            credential=self.options.credential,
            timeout=self.options.timeout_seconds,
            verify=not self.options.skip_certificate_check,
        )
        self._dispatcher = RequestDispatcher(
            policy=self.policy,
            metadata=self.metadata,
            resource_uri=resource_uri,
            gate=ConfirmationGate(self._host, self.metadata, command),
            connection_uri=self.options.connection_uri,
            headers=self.options.headers,
            certificate_thumbprint=self.options.certificate_thumbprint,
        )
        self._scope = RequestScope(command=command, protocol=self.policy.name)
        self._extensions: List[ODataProxyExtension] = []
        logger.info("client_initialized", command=command, protocol=self.policy.name)

    @classmethod
    def from_config(
        cls,
        config: ODataProxyConfig,
        entity_name: str,
        **kwargs: Any,
    ) -> ODataProxyClient:
        """Build a client for a configured entity."""
        entity = config.get_entity(entity_name)
        kwargs.setdefault("options", ConnectionOptions.from_config(config.connection))
        kwargs.setdefault("command", entity_name)
        return cls(
            resource_uri=entity.resource_uri,
            private_data=entity.private_data,
            protocol=entity.protocol,
            **kwargs,
        )

    # -- Extension registration --------------------------------------------

    def use(self, extension: ODataProxyExtension) -> ODataProxyClient:
        """Register an extension plugin.

        Returns:
            ``self`` for method chaining.
        """
        extension.install(self._hooks)
        self._extensions.append(extension)
        logger.info("extension_installed", name=extension.name, version=extension.version)
        return self

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    @property
    def host(self) -> InvocationHost:
        return self._host

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def pass_inner_exception(self) -> bool:
        if self.options.pass_inner_exception:
            return True
        return self.policy.inner_exception_from_metadata and self.metadata.pass_inner_exception

    # -- Public API --------------------------------------------------------

    def query(self) -> QueryBuilder:
        """Start a new property-filter query."""
        return QueryBuilder()

    async def get(
        self,
        query: Optional[QueryBuilder] = None,
        parent_type: Optional[str] = None,
        bound_objects: Optional[Mapping[str, Any]] = None,
    ) -> List[Any]:
        """
        Read entities.

        Args:
            query: Keys and query options; all instances when omitted
            parent_type: Parent type of the objects in ``bound_objects``
                (Redfish navigation)
            bound_objects: Response-shaped objects bound to the call

        Returns:
            Output objects, in the order they were written to the host
        """
        owns_correlation_id = self._begin_invocation()
        try:
            reads = self._dispatcher.build_reads(query or QueryBuilder(), parent_type, bound_objects)
            entity_type = self._dispatcher.response_entity_type()

            outputs: List[Any] = []
            for read in reads:
                outputs.extend(await self._invoke(read.request, read.single_instance, entity_type))
            return outputs
        finally:
            self._end_invocation(owns_correlation_id)

    async def invoke(self, invocation: MethodInvocation) -> List[Any]:
        """
        Run a Create, Update, Delete, Action or Association method.

        Returns:
            Output objects; empty when the host declined the operation
        """
        owns_correlation_id = self._begin_invocation()
        try:
            name = invocation.parsed_name()
            request = self._dispatcher.dispatch(invocation)
            if request is None:
                logger.info("invocation_declined", method=invocation.method_name, command=self.command)
                return []
            entity_type = self._dispatcher.response_entity_type(name)
            return await self._invoke(request, True, entity_type)
        finally:
            self._end_invocation(owns_correlation_id)

    @staticmethod
    def _begin_invocation() -> bool:
        # An id set by the caller is kept for the whole call
        if get_correlation_id() is not None:
            return False
        set_correlation_id()
        return True

    @staticmethod
    def _end_invocation(owns_correlation_id: bool) -> None:
        if owns_correlation_id:
            clear_correlation_id()

    async def _invoke(self, request: HttpRequestSpec, single_instance: bool, entity_type: str) -> List[Any]:
        processor = RecordProcessor(
            self._registry, entity_type, self.options.allow_additional_data
        )

        request = self._hooks.fire_before_request(request, self._scope)
        # Hooks may rewrite the URI
        if is_unsecure_uri(request.uri) and not self.options.allow_unsecure_connection:
            raise UnsecureConnectionError(request.uri, self.command)

        try:
            result = await self._adapter.send(request)
        except Exception as exc:
            self._hooks.fire_error(exc)
            if self.pass_inner_exception:
                log_request_failure(logger, request.uri, exc, wrapped=False)
                raise
            log_request_failure(logger, request.uri, exc, wrapped=True)
            raise RequestInvocationError(request.uri, self.command) from exc
        self._hooks.fire_after_response(result, self._scope)

        outputs: List[Any] = []
        # Transport records reach the host even if coercion fails
        self._emit(result.records, outputs)
        self._emit(processor.process(result.body, single_instance), outputs)
        return outputs

    def _emit(self, records: Iterable[ResponseRecord], outputs: List[Any]) -> None:
        for record in records:
            self._host.emit(record)
            if record.kind is RecordKind.OUTPUT:
                outputs.append(record.payload)

    # -- Lifecycle ---------------------------------------------------------

    async def aclose(self) -> None:
        """Release the transport, closing connections eagerly when supported."""
        if isinstance(self._adapter, HttpAdapter):
            await self._adapter.aclose()
        else:
            self._adapter.close()
        logger.debug("client_closed", command=self.command)

    def close(self) -> None:
        """Release all resources without awaiting.

        Open HTTP connections are only closed by :meth:`aclose`; call that
        from async code.
        """
        self._adapter.close()
        logger.debug("client_closed", command=self.command)


class ODataProxyBuilder:
    """Fluent builder for advanced ODataProxyClient configuration.

    Example::

        client = (
            ODataProxyBuilder()
            .set_resource_uri("https://bmc/redfish/v1/Systems")
            .set_protocol("redfish")
            .set_private_data({"EntityTypeName": "ComputerSystem", ...})
            .set_options(ConnectionOptions(credential=("root", "secret")))
            .use(TracingExtension())
            .build()
        )
    """

    def __init__(self) -> None:
        self._resource_uri: Optional[str] = None
        self._private_data: Dict[str, str] = {}
        self._protocol: str = ODATA
        self._options: Optional[ConnectionOptions] = None
        self._adapter: Optional[BaseAdapter] = None
        self._host: Optional[InvocationHost] = None
        self._registry: Optional[TypeRegistry] = None
        self._command: Optional[str] = None
        self._extensions: List[ODataProxyExtension] = []

    def set_resource_uri(self, uri: str) -> ODataProxyBuilder:
        self._resource_uri = uri
        return self

    def set_private_data(self, private_data: Mapping[str, str]) -> ODataProxyBuilder:
        self._private_data = dict(private_data)
        return self

    def set_protocol(self, protocol: str) -> ODataProxyBuilder:
        self._protocol = protocol
        return self

    def set_options(self, options: ConnectionOptions) -> ODataProxyBuilder:
        self._options = options
        return self

    def set_transport(self, adapter: BaseAdapter) -> ODataProxyBuilder:
        """Override the default HTTP adapter with a custom transport."""
        self._adapter = adapter
        return self

    def set_host(self, host: InvocationHost) -> ODataProxyBuilder:
        self._host = host
        return self

    def set_type_registry(self, registry: TypeRegistry) -> ODataProxyBuilder:
        self._registry = registry
        return self

    def set_command(self, command: str) -> ODataProxyBuilder:
        self._command = command
        return self

    def use(self, extension: ODataProxyExtension) -> ODataProxyBuilder:
        """Queue an extension for installation after build."""
        self._extensions.append(extension)
        return self

    def build(self) -> ODataProxyClient:
        """Construct the client and install all queued extensions.

        Raises:
            InvalidConfigurationError: If no resource URI was set or the
                protocol is unknown.
        """
        if not self._resource_uri:
            raise InvalidConfigurationError(
                "ODataProxyBuilder.build() requires set_resource_uri()."
            )
        try:
            get_policy(self._protocol)
        except ValueError as e:
            raise InvalidConfigurationError(str(e)) from e

        client = ODataProxyClient(
            resource_uri=self._resource_uri,
            private_data=self._private_data,
            protocol=self._protocol,
            options=self._options,
            adapter=self._adapter,
            host=self._host,
            type_registry=self._registry,
            command=self._command,
        )

        for ext in self._extensions:
            client.use(ext)

        client.hooks.fire_initialize()

        logger.info("client_built", extensions=len(self._extensions))
        return client
