"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Transport adapters.
"""

from odataproxy.sdk.adapters.base import BaseAdapter, HttpRequestSpec, TransportResult
from odataproxy.sdk.adapters.http import HttpAdapter
from odataproxy.sdk.adapters.mock import MockAdapter

__all__ = [
    "BaseAdapter",
    "HttpRequestSpec",
    "TransportResult",
    "HttpAdapter",
    "MockAdapter",
]
