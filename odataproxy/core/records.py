"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Response record mapping.

A transport call yields a stream of records: output objects, non-terminating
errors, warnings and verbose, debug and information messages. Output
objects are coerced to the entity's registered Python type on a best-effort
basis; everything else is forwarded unchanged and in order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from odataproxy.exceptions import TypeCoercionError
from odataproxy.logging_config import get_logger, log_type_coercion

logger = get_logger(__name__)

COLLECTION_MEMBER = "value"
ADDITIONAL_INFO_TAG = "AdditionalInfo"
ODATA_ID_MEMBER = "@odata.id"
ODATA_ID_ATTRIBUTE = "odata_id"


class RecordKind(Enum):
    """Channel a response record belongs to."""
    OUTPUT = "output"
    ERROR = "error"
    WARNING = "warning"
    VERBOSE = "verbose"
    DEBUG = "debug"
    INFORMATION = "information"


@dataclass(frozen=True)
class ResponseRecord:
    """One item of the response stream."""
    kind: RecordKind
    payload: Any
    tags: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def output(cls, obj: Any) -> ResponseRecord:
        return cls(RecordKind.OUTPUT, obj)

    @classmethod
    def error(cls, error: Any) -> ResponseRecord:
        return cls(RecordKind.ERROR, error)

    @classmethod
    def warning(cls, message: str) -> ResponseRecord:
        return cls(RecordKind.WARNING, message)

    @classmethod
    def verbose(cls, message: str) -> ResponseRecord:
        return cls(RecordKind.VERBOSE, message)

    @classmethod
    def debug(cls, message: str) -> ResponseRecord:
        return cls(RecordKind.DEBUG, message)

    @classmethod
    def information(cls, data: Any, tags: Iterable[str] = ()) -> ResponseRecord:
        return cls(RecordKind.INFORMATION, data, tuple(tags))


Factory = Callable[[Mapping[str, Any]], Any]


class TypeRegistry:
    """Maps entity type names to factories building Python objects.

    A factory receives the decoded JSON object and returns the typed
    object, or None when it does not recognise the data. Raising signals
    that the data cannot be represented by the type.

    Example::

        registry = TypeRegistry()
        registry.register("ODataDemo.Product", lambda data: Product(**data))
    """

    def __init__(self) -> None:
        self._factories: Dict[str, Factory] = {}

    def register(self, entity_type: str, factory: Factory) -> None:
        self._factories[entity_type] = factory

    def unregister(self, entity_type: str) -> None:
        self._factories.pop(entity_type, None)

    def get(self, entity_type: str) -> Optional[Factory]:
        return self._factories.get(entity_type)

    def __contains__(self, entity_type: str) -> bool:
        return entity_type in self._factories


def copy_odata_id(source: Any, target: Any) -> None:
    """Copy ``@odata.id`` from the raw object onto the coerced one, if possible."""
    if not isinstance(source, Mapping) or ODATA_ID_MEMBER not in source:
        return
    if not hasattr(target, ODATA_ID_ATTRIBUTE):
        return
    try:
        setattr(target, ODATA_ID_ATTRIBUTE, source[ODATA_ID_MEMBER])
    except (AttributeError, TypeError):
        # The coerced object is still emitted without the id
        logger.debug("odata_id_not_copied", target_type=type(target).__name__)


class RecordProcessor:
    """
    Turns a decoded response body into output records.

    Args:
        registry: Known entity types
        entity_type: Type name the objects are coerced to
        allow_additional_data: Emit raw objects without attempting coercion
    """

    def __init__(self, registry: TypeRegistry, entity_type: str, allow_additional_data: bool = False):
        self._registry = registry
        self._entity_type = entity_type
        self._allow_additional_data = allow_additional_data

    def process(self, body: Any, single_instance: bool) -> List[ResponseRecord]:
        """
        Map a response body onto records.

        Collection bodies of the form ``{"value": [...], ...}`` produce one
        ``AdditionalInfo`` information record holding the remaining members,
        followed by one output record per element.

        Raises:
            TypeCoercionError: If an object cannot be coerced and
                additional data is not allowed
        """
        if body is None:
            return []

        if single_instance:
            return self.coerce(body)

        records: List[ResponseRecord] = []
        if isinstance(body, Mapping) and isinstance(body.get(COLLECTION_MEMBER), list):
            additional = {k: v for k, v in body.items() if k != COLLECTION_MEMBER}
            if additional:
                records.append(ResponseRecord.information(additional, tags=[ADDITIONAL_INFO_TAG]))
            items = body[COLLECTION_MEMBER]
        elif isinstance(body, list):
            items = body
        else:
            items = [body]

        for item in items:
            records.extend(self.coerce(item))
        return records

    def coerce(self, obj: Any) -> List[ResponseRecord]:
        if obj is None:
            return []
        if self._allow_additional_data:
            return [ResponseRecord.output(obj)]

        factory = self._registry.get(self._entity_type)
        result = None
        if factory is not None:
            try:
                result = factory(obj)
            except Exception as e:
                log_type_coercion(logger, self._entity_type, False, reason=str(e))
                raise TypeCoercionError(self._entity_type, str(e)) from e

        if result is None:
            log_type_coercion(logger, self._entity_type, False, reason="no matching type")
            return [
                ResponseRecord.warning(
                    f"Response data could not be converted to '{self._entity_type}'; "
                    "returning the object as received"
                ),
                ResponseRecord.output(obj),
            ]

        copy_odata_id(obj, result)
        log_type_coercion(logger, self._entity_type, True)
        return [ResponseRecord.output(result)]
