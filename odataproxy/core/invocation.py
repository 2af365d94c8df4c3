"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Method invocation descriptors.

A method name is either a bare CRUD verb (``Create``, ``Update``,
``Delete``) or a compound ``Category:Qualifier:Target`` token where the
category is ``Action`` or ``Association``. Parameters named
``<Property>:Key`` identify the target instance; all others are ordinary
parameters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from odataproxy.core.resource_path import Key
from odataproxy.exceptions import MalformedMethodNameError, UnsupportedMethodError

FORCE_PARAMETER = "Force"
KEY_SUFFIX = "Key"


class RequestKind(Enum):
    """Classification of a method invocation."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ACTION = "action"
    ASSOCIATION_CREATE = "association_create"
    ASSOCIATION_DELETE = "association_delete"

    @property
    def is_association(self) -> bool:
        return self in (RequestKind.ASSOCIATION_CREATE, RequestKind.ASSOCIATION_DELETE)


_BARE_KINDS = {
    "Create": RequestKind.CREATE,
    "Update": RequestKind.UPDATE,
    "Delete": RequestKind.DELETE,
}

_ASSOCIATION_KINDS = {
    "Create": RequestKind.ASSOCIATION_CREATE,
    "Delete": RequestKind.ASSOCIATION_DELETE,
}


@dataclass(frozen=True)
class MethodName:
    """Parsed method name."""
    raw: str
    kind: RequestKind
    qualifier: Optional[str] = None  # action name for actions
    target: Optional[str] = None  # response type (actions) or referred entity (associations)


def parse_method_name(method_name: str) -> MethodName:
    """
    Classify a method name.

    Raises:
        UnsupportedMethodError: If a bare name is not a CRUD verb
        MalformedMethodNameError: If a compound name does not follow the grammar
    """
    tokens = method_name.split(":")
    if len(tokens) == 1:
        kind = _BARE_KINDS.get(method_name)
        if kind is None:
            raise UnsupportedMethodError(f"Method '{method_name}' is not supported")
        return MethodName(raw=method_name, kind=kind)

    if len(tokens) != 3:
        raise MalformedMethodNameError(f"Method name '{method_name}' is incorrect")

    category, qualifier, target = tokens
    if category == "Action":
        return MethodName(raw=method_name, kind=RequestKind.ACTION, qualifier=qualifier, target=target)
    if category == "Association":
        kind = _ASSOCIATION_KINDS.get(qualifier)
        if kind is None:
            raise MalformedMethodNameError(f"Method name '{method_name}' is incorrect")
        return MethodName(raw=method_name, kind=kind, qualifier=qualifier, target=target)

    raise MalformedMethodNameError(f"Method name '{method_name}' is incorrect")


@dataclass
class MethodInvocation:
    """A mutating (or action) call against an entity.

    Args:
        method_name: Bare verb or ``Category:Qualifier:Target``.
        parameters: Ordered parameter mapping. ``None`` marks a parameter
            that was declared but not supplied.
        force: Skip the continue prompt of the confirmation gate.
        bound_objects: Response-shaped objects bound to the call (Redfish
            parent objects), keyed by parameter name.
    """
    method_name: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    force: bool = False
    bound_objects: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_parameters(
        cls,
        method_name: str,
        parameters: Mapping[str, Any],
        force: bool = False,
        bound_objects: Optional[Mapping[str, Any]] = None,
    ) -> MethodInvocation:
        """Build an invocation, lifting a ``Force`` parameter into the flag."""
        params = dict(parameters)
        force = bool(params.pop(FORCE_PARAMETER, False)) or force
        return cls(
            method_name=method_name,
            parameters=params,
            force=force,
            bound_objects=dict(bound_objects or {}),
        )

    def parsed_name(self) -> MethodName:
        return parse_method_name(self.method_name)

    def keys(self) -> List[Key]:
        """Parameters named ``<Property>:Key``, in declaration order."""
        result = []
        for name, value in self.parameters.items():
            parts = name.split(":")
            if len(parts) > 1 and parts[1] == KEY_SUFFIX:
                result.append((parts[0], value))
        return result

    def non_keys(self) -> List[Key]:
        """Parameters without a ``:`` qualifier, in declaration order."""
        return [(name, value) for name, value in self.parameters.items() if ":" not in name]

    def present_parameters(self) -> List[Key]:
        """All parameters that carry a value."""
        return [(name, value) for name, value in self.parameters.items() if value is not None]
