"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Request body serialization.

Bodies are ordered mappings: keys first (only those with a value), then
ordinary parameters. Sequence values are wrapped as ``{"results": [...]}``
following the OData v1-3 multi-value convention, and CRUD bodies carry a
``__metadata`` type discriminator.
"""

import json
from typing import Any, Dict, Optional, Sequence

from odataproxy.core.resource_path import Key

JSON_CONTENT_TYPE = "application/json;charset=utf-8"


def _is_multi_value(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


def add_parameter(body: Dict[str, Any], name: str, value: Any) -> Dict[str, Any]:
    """Add one parameter to ``body``; None values are skipped."""
    if value is None:
        return body
    if _is_multi_value(value):
        body[name] = {"results": list(value)}
    else:
        body[name] = value
    return body


def build_body(
    keys: Optional[Sequence[Key]],
    parameters: Optional[Sequence[Key]],
    entity_type_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the ordered body mapping for a request.

    Args:
        keys: Key pairs to include, or None
        parameters: Ordinary parameter pairs, or None
        entity_type_name: When given, appended as the ``__metadata`` type

    Returns:
        Body mapping in insertion order
    """
    body: Dict[str, Any] = {}

    for name, value in keys or ():
        add_parameter(body, name, value)

    for name, value in parameters or ():
        add_parameter(body, name, value)

    if entity_type_name is not None:
        body["__metadata"] = {"type": entity_type_name}

    return body


def encode_body(body: Optional[Dict[str, Any]]) -> Optional[str]:
    """Encode a body mapping as JSON text."""
    if body is None:
        return None
    return json.dumps(body, default=str)
