"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Transport adapter base class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from odataproxy.core.request import HttpRequestSpec, TransportResult

__all__ = ["BaseAdapter", "HttpRequestSpec", "TransportResult"]


class BaseAdapter(ABC):
    """Abstract base for all transport adapters."""

    @abstractmethod
    async def send(self, request: HttpRequestSpec) -> TransportResult:
        """Send a request and return the response."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release adapter resources."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the adapter is in a usable state."""
        ...
