"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Mock transport adapter for local testing.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from odataproxy.exceptions import TransportError
from odataproxy.sdk.adapters.base import BaseAdapter, HttpRequestSpec, TransportResult


class MockAdapter(BaseAdapter):
    """In-memory mock adapter for unit tests.

    Args:
        responses: Mapping from ``(verb, uri)`` tuples to
            ``TransportResult`` instances. Unmapped requests and results
            with an error status raise ``TransportError``.

    Example::

        adapter = MockAdapter({
            ("GET", "https://h/s.svc/Product"): TransportResult(200, body={"value": []}),
        })
    """

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, str], TransportResult]] = None,
    ) -> None:
        self._responses: Dict[Tuple[str, str], TransportResult] = responses or {}
        self._sent: List[HttpRequestSpec] = []

    def add_response(self, verb: str, uri: str, result: TransportResult) -> None:
        self._responses[(verb.upper(), uri)] = result

    async def send(self, request: HttpRequestSpec) -> TransportResult:
        self._sent.append(request)
        key = (request.verb.upper(), request.uri)
        if key not in self._responses:
            raise TransportError(404, request.uri, "not mocked")
        result = self._responses[key]
        if result.status_code >= 400:
            raise TransportError(result.status_code, request.uri)
        return result

    def close(self) -> None:
        self._responses.clear()
        self._sent.clear()

    @property
    def is_connected(self) -> bool:
        return True

    @property
    def sent_requests(self) -> List[HttpRequestSpec]:
        """All requests that have been sent through this adapter."""
        return list(self._sent)
