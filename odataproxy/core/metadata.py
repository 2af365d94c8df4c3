"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Per-entity metadata.

Every logical entity is declared with a flat string-to-string table
(entity type name, entity set name, HTTP verbs, key format and so on).
``EntityMetadata`` wraps that table with typed accessors and raises
``MissingMetadataError`` for required entries that are absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from odataproxy.core.resource_path import KeyFormat
from odataproxy.exceptions import MissingMetadataError

ENTITY_TYPE_NAME = "EntityTypeName"
ENTITY_SET_NAME = "EntitySetName"
CREATE_REQUEST_METHOD = "CreateRequestMethod"
UPDATE_REQUEST_METHOD = "UpdateRequestMethod"
URI_RESOURCE_PATH_KEY_FORMAT = "UriResourcePathKeyFormat"
IS_SINGLETON = "IsSingleton"
NAMESPACE = "Namespace"
ACTION_TARGETS = "ActionTargets"
PASS_INNER_EXCEPTION = "PassInnerException"
NAVIGATION_LINK_PREFIX = "NavigationLink"


@dataclass(frozen=True)
class ActionTarget:
    """Maps an action name to the parameter holding its bound object."""
    action_name: str
    parameter_name: str


@dataclass(frozen=True)
class NavigationLink:
    """Describes how to reach child resources from a parent object.

    Parsed from ``a|b|PropertyName|...[|Collection]``; only the property
    name and the trailing collection marker are significant.
    """
    property_name: str
    is_collection: bool

    @classmethod
    def parse(cls, descriptor: str) -> NavigationLink:
        parts = descriptor.split("|")
        if len(parts) < 3:
            raise ValueError(f"Navigation link descriptor '{descriptor}' is malformed")
        return cls(
            property_name=parts[2],
            is_collection=parts[-1].lower() == "collection",
        )


class EntityMetadata:
    """Read-only view over one entity's private metadata table.

    Args:
        private_data: String-to-string metadata entries.
        command: Name of the command the metadata belongs to; used in
            error messages so the operator knows what to fix.
    """

    def __init__(self, private_data: Optional[Mapping[str, str]] = None, command: Optional[str] = None):
        self._data: Dict[str, str] = dict(private_data or {})
        self.command = command

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._data.get(key, default)

    def require(self, key: str) -> str:
        """Return a required entry or raise ``MissingMetadataError``."""
        if key not in self._data:
            raise MissingMetadataError(key, self.command)
        return self._data[key]

    def as_dict(self) -> Dict[str, str]:
        return dict(self._data)

    @property
    def entity_type_name(self) -> str:
        return self.require(ENTITY_TYPE_NAME)

    @property
    def entity_set_name(self) -> str:
        return self.require(ENTITY_SET_NAME)

    @property
    def namespace(self) -> str:
        return self.require(NAMESPACE)

    @property
    def create_verb(self) -> str:
        return self.require(CREATE_REQUEST_METHOD).upper()

    @property
    def update_verb(self) -> str:
        return self.require(UPDATE_REQUEST_METHOD).upper()

    @property
    def key_format(self) -> KeyFormat:
        # Any value other than EmbeddedKey selects separate keys
        value = self._data.get(URI_RESOURCE_PATH_KEY_FORMAT)
        if value is None or value == KeyFormat.EMBEDDED.value:
            return KeyFormat.EMBEDDED
        return KeyFormat.SEPARATE

    @property
    def is_singleton(self) -> bool:
        return _parse_bool(self._data.get(IS_SINGLETON))

    @property
    def pass_inner_exception(self) -> bool:
        return _parse_bool(self._data.get(PASS_INNER_EXCEPTION))

    def action_targets(self) -> List[ActionTarget]:
        """Parse ``ActionTargets`` (``Name=ParamName|...``)."""
        raw = self.require(ACTION_TARGETS)
        targets = []
        for entry in raw.split("|"):
            if "=" not in entry:
                continue
            name, parameter = entry.split("=", 1)
            targets.append(ActionTarget(action_name=name.strip(), parameter_name=parameter.strip()))
        return targets

    def action_target_parameter(self, action_name: str) -> Optional[str]:
        """Parameter holding the object bound to ``action_name``, if declared."""
        result = None
        for target in self.action_targets():
            if target.action_name.lower().startswith(action_name.lower()):
                result = target.parameter_name
        return result

    def navigation_link(self, parent_type_name: str) -> Optional[NavigationLink]:
        descriptor = self._data.get(f"{NAVIGATION_LINK_PREFIX}{parent_type_name}")
        if descriptor is None:
            return None
        return NavigationLink.parse(descriptor)


def _parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() == "true"
