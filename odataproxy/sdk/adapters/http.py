"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

HTTP/REST transport adapter (default).
"""

from __future__ import annotations

import time
from typing import Any, Optional, Tuple

import httpx

from odataproxy.core.records import ResponseRecord
from odataproxy.exceptions import TransportError
from odataproxy.logging_config import get_logger
from odataproxy.sdk.adapters.base import BaseAdapter, HttpRequestSpec, TransportResult

logger = get_logger(__name__)


class HttpAdapter(BaseAdapter):
    """Default HTTP transport using ``httpx.AsyncClient``.

    Args:
        credential: Optional ``(username, password)`` sent as basic auth.
        timeout: Request timeout in seconds.
        verify: Verify the server certificate.
    """

    def __init__(
        self,
        credential: Optional[Tuple[str, str]] = None,
        timeout: float = 30,
        verify: bool = True,
    ) -> None:
        self._credential = credential
        self._timeout = timeout
        self._verify = verify
        self._client: Optional[httpx.AsyncClient] = None
        self._connected = False

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            auth = httpx.BasicAuth(*self._credential) if self._credential else None
            self._client = httpx.AsyncClient(
                auth=auth,
                timeout=self._timeout,
                verify=self._verify,
            )
            self._connected = True
        return self._client

    @staticmethod
    def _decode(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    async def send(self, request: HttpRequestSpec) -> TransportResult:
        client = self._ensure_client()

        headers = dict(request.headers)
        if request.content_type:
            headers["Content-Type"] = request.content_type
        if request.certificate_thumbprint:
            # Client certificates by thumbprint need a platform store
            logger.debug("certificate_thumbprint_ignored", uri=request.uri)

        records = [
            ResponseRecord.verbose(
                f"{request.verb} {request.uri} with {len(request.body or '')}-byte payload"
            )
        ]

        start = time.monotonic()
        resp = await client.request(
            method=request.verb,
            url=request.uri,
            headers=headers,
            content=request.body,
        )
        elapsed = (time.monotonic() - start) * 1000

        if resp.is_error:
            raise TransportError(resp.status_code, request.uri, resp.text)

        records.append(
            ResponseRecord.verbose(
                f"received {len(resp.content)}-byte response of content type "
                f"{resp.headers.get('content-type', 'unknown')}"
            )
        )

        return TransportResult(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=self._decode(resp),
            elapsed_ms=round(elapsed, 2),
            records=records,
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
        self._client = None
        self._connected = False

    def close(self) -> None:
        """Drop the client without closing its connections.

        Pooled sockets stay open until garbage collection; :meth:`aclose`
        is the complete shutdown.
        """
        if self._client is not None:
            logger.warning(
                "http_client_dropped_unclosed",
                hint="await aclose() to close pooled connections",
            )
            self._client = None
            self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected
