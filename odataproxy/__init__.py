"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

ODataProxy - declarative command proxies for OData and Redfish services

ODataProxy turns property filters and method invocations declared for a
logical entity into OData v1-3, OData v4 or Redfish HTTP requests.
"""

from odataproxy._version import __version__

__all__ = ["__version__"]
