"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Request and response values exchanged with the transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from odataproxy.core.records import ResponseRecord


@dataclass
class HttpRequestSpec:
    """Outbound request representation.

    ``body`` is already encoded JSON text; ``content_type`` is set whenever
    a body is present.
    """
    verb: str
    uri: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    content_type: Optional[str] = None
    certificate_thumbprint: Optional[str] = None


@dataclass
class TransportResult:
    """Inbound response representation.

    ``records`` carries non-terminating messages produced while the
    request ran (verbose, warning, debug and the like), in order.
    """
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    elapsed_ms: float = 0.0
    records: List[ResponseRecord] = field(default_factory=list)
