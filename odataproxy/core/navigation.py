"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Navigation over response-shaped object graphs.

Redfish resources link to each other through ``@odata.id`` members and
advertise operations under ``Actions["#Name"].target``. Objects are plain
trees of mappings, sequences and scalars as decoded from JSON.
"""

from typing import Any, List, Mapping, Sequence

from odataproxy.core.metadata import NavigationLink
from odataproxy.exceptions import NavigationError

ODATA_ID = "@odata.id"
ACTIONS = "Actions"
ACTION_TARGET = "target"


def get_member(obj: Any, name: str) -> Any:
    """Return member ``name`` of a mapping node."""
    if not isinstance(obj, Mapping):
        raise NavigationError(
            f"Cannot read member '{name}' from a {type(obj).__name__} value"
        )
    if name not in obj:
        raise NavigationError(f"Object has no member '{name}'")
    return obj[name]


def resolve_odata_id(obj: Any) -> str:
    """Return the ``@odata.id`` of a resource object."""
    odata_id = get_member(obj, ODATA_ID)
    if not isinstance(odata_id, str) or not odata_id:
        raise NavigationError(f"Member '{ODATA_ID}' is not a non-empty string")
    return odata_id


def resolve_action_target(obj: Any, action_name: str) -> str:
    """Return ``Actions["#<action_name>"].target`` of a resource object."""
    actions = get_member(obj, ACTIONS)
    action = get_member(actions, f"#{action_name}")
    target = get_member(action, ACTION_TARGET)
    if not isinstance(target, str) or not target:
        raise NavigationError(f"Action '{action_name}' has no usable target")
    return target


def navigate(parent: Any, link: NavigationLink) -> List[str]:
    """
    Collect the ``@odata.id`` values reachable from ``parent`` through ``link``.

    Args:
        parent: Parent resource object
        link: Which member to follow and whether it holds a collection

    Returns:
        ``@odata.id`` values in document order
    """
    member = get_member(parent, link.property_name)
    if not link.is_collection:
        return [resolve_odata_id(member)]
    if isinstance(member, (str, bytes)) or not isinstance(member, Sequence):
        raise NavigationError(
            f"Member '{link.property_name}' is expected to be a collection"
        )
    return [resolve_odata_id(item) for item in member]
