"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

ODataProxy SDK - public API surface.

Quick start::

    from odataproxy.sdk import ODataProxyClient
    client = ODataProxyClient(resource_uri="https://h/s.svc/Product", private_data={...})

Advanced::

    from odataproxy.sdk import ODataProxyBuilder
    client = ODataProxyBuilder().set_resource_uri(...).use(MyExtension()).build()
"""

from odataproxy.sdk.adapters import BaseAdapter, HttpAdapter, MockAdapter
from odataproxy.sdk.client import ConnectionOptions, ODataProxyBuilder, ODataProxyClient
from odataproxy.sdk.extensions import ODataProxyExtension
from odataproxy.sdk.hooks import HookRegistry, RequestScope
from odataproxy.sdk.host import CollectingHost, InvocationHost

__all__ = [
    "ODataProxyClient",
    "ODataProxyBuilder",
    "ConnectionOptions",
    "HookRegistry",
    "RequestScope",
    "ODataProxyExtension",
    "InvocationHost",
    "CollectingHost",
    "BaseAdapter",
    "HttpAdapter",
    "MockAdapter",
]
