"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Extension base class.

Extensions register callbacks on the :class:`HookRegistry` during
:meth:`install` and are activated via ``client.use(extension)``.

Example::

    class TracingExtension(ODataProxyExtension):
        @property
        def name(self) -> str:
            return "tracing"

        @property
        def version(self) -> str:
            return "1.0.0"

        def install(self, hooks: HookRegistry) -> None:
            hooks.on_before_request(self._tag)

        def _tag(self, request, scope):
            request.headers["X-Request-Source"] = scope.command or "odataproxy"
            return request
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from odataproxy.sdk.hooks import HookRegistry


class ODataProxyExtension(ABC):
    """Base class for client extensions."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique, human-readable extension name."""
        ...

    @property
    @abstractmethod
    def version(self) -> str:
        """SemVer version string (e.g. ``"1.0.0"``)."""
        ...

    @abstractmethod
    def install(self, hooks: HookRegistry) -> None:
        """Register callbacks on lifecycle hooks.

        Called exactly once when the extension is attached to a client.
        """
        ...
