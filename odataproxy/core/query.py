"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

OData query option composition.

``QueryBuilder`` ingests property-filter calls one at a time, sorting each
property into the key list or into an immutable ``QuerySpec``. The spec is
rendered onto a URI in a fixed option order by ``apply_query_options``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from odataproxy.core.resource_path import Key
from odataproxy.exceptions import DuplicateQueryOptionError, MalformedPropertyNameError
from odataproxy.logging_config import get_logger

logger = get_logger(__name__)

QUERY_OPTION_PREFIX = "QueryOption"
ASSOCIATION_KEY_SUFFIX = "Key"
DEFAULT_CONCATENATION_OPERATOR = "&"


class QueryOption(Enum):
    """Recognized query options, declared in wire order."""
    FILTER = "Filter"
    ORDER_BY = "OrderBy"
    SELECT = "Select"
    INCLUDE_TOTAL_RESPONSE_COUNT = "IncludeTotalResponseCount"
    SKIP = "Skip"
    TOP = "Top"

    @classmethod
    def from_property_name(cls, name: str) -> Optional[QueryOption]:
        # Exact, case-sensitive match
        for option in cls:
            if option.value == name:
                return option
        return None


_CLAUSE_PREFIXES = {
    QueryOption.FILTER: "$filter",
    QueryOption.ORDER_BY: "$orderby",
    QueryOption.SELECT: "$select",
    QueryOption.INCLUDE_TOTAL_RESPONSE_COUNT: "$inlinecount",
    QueryOption.SKIP: "$skip",
    QueryOption.TOP: "$top",
}


@dataclass(frozen=True)
class QuerySpec:
    """Immutable set of query options for one read request."""
    options: Tuple[Tuple[QueryOption, str], ...] = ()
    concatenation_operator: str = DEFAULT_CONCATENATION_OPERATOR

    def get(self, option: QueryOption) -> Optional[str]:
        for current, value in self.options:
            if current is option:
                return value
        return None

    def with_option(self, option: QueryOption, value: Any) -> QuerySpec:
        """
        Return a copy of this spec with ``option`` set.

        Raises:
            DuplicateQueryOptionError: If ``option`` is already set
        """
        if self.get(option) is not None:
            raise DuplicateQueryOptionError(
                f"Query option '{option.value}' was specified more than once"
            )
        return replace(self, options=self.options + ((option, str(value)),))

    def with_filter(self, expression: str) -> QuerySpec:
        return self.with_option(QueryOption.FILTER, expression)

    def with_order_by(self, expression: str) -> QuerySpec:
        return self.with_option(QueryOption.ORDER_BY, expression)

    def with_select(self, properties: Iterable[Any]) -> QuerySpec:
        return self.with_option(QueryOption.SELECT, ",".join(str(p) for p in properties))

    def with_skip(self, count: int) -> QuerySpec:
        return self.with_option(QueryOption.SKIP, count)

    def with_top(self, count: int) -> QuerySpec:
        return self.with_option(QueryOption.TOP, count)

    def with_total_count(self) -> QuerySpec:
        return self.with_option(QueryOption.INCLUDE_TOTAL_RESPONSE_COUNT, "allpages")

    @property
    def is_empty(self) -> bool:
        return not self.options

    def clauses(self) -> List[str]:
        """Render set options as ``$name=value`` clauses in wire order."""
        result = []
        for option in QueryOption:
            value = self.get(option)
            if value is None:
                continue
            if option is QueryOption.INCLUDE_TOTAL_RESPONSE_COUNT:
                value = "allpages"
            result.append(f"{_CLAUSE_PREFIXES[option]}={value}")
        return result


def _join_onto(uri: str, clause: str, operator: str) -> str:
    separator = operator if "?" in uri else "?"
    return f"{uri}{separator}{clause}"


def apply_query_options(base_uri: str, spec: Optional[QuerySpec]) -> str:
    """
    Append the query options in ``spec`` to ``base_uri``.

    Returns ``base_uri`` unchanged when no option is set.
    """
    if spec is None or spec.is_empty:
        return base_uri
    operator = spec.concatenation_operator
    return _join_onto(base_uri, operator.join(spec.clauses()), operator)


def append_query_parameters(uri: str, parameters: Mapping[str, str]) -> str:
    """
    Append literal query parameters such as ``$format=json``.

    Args:
        uri: Base URI
        parameters: Parameters in insertion order
    """
    for name, value in parameters.items():
        uri = _join_onto(uri, f"{name}={value}", DEFAULT_CONCATENATION_OPERATOR)
    return uri


@dataclass
class QueryBuilder:
    """
    Accumulates property filters into keys and query options.

    Each ``filter_by_property`` call binds one logical property. Property
    names are decomposed on ``:``:

    - ``Name`` is a key or a query option
    - ``QueryOption:Name`` names a query option explicitly
    - ``Referred:Name:Key`` is a key of the referred (associated) resource
    """
    keys: List[Key] = field(default_factory=list)
    spec: QuerySpec = field(default_factory=QuerySpec)
    referred_resource: Optional[str] = None

    def filter_by_property(self, property_name: str, values: Iterable[Any]) -> QueryBuilder:
        if property_name is None:
            raise ValueError("property_name cannot be None")
        if values is None:
            raise ValueError("values cannot be None")

        segments = property_name.split(":")
        if len(segments) == 1:
            base_name = property_name
        elif len(segments) == 2 and segments[0].lower() == QUERY_OPTION_PREFIX.lower():
            base_name = segments[1]
        elif len(segments) == 3:
            if segments[2] != ASSOCIATION_KEY_SUFFIX:
                raise MalformedPropertyNameError(
                    f"Property name '{property_name}' must end with ':Key'"
                )
            self.referred_resource = segments[0]
            base_name = segments[1]
        else:
            raise MalformedPropertyNameError(
                f"Property name '{property_name}' is not in a supported format"
            )

        iterator = iter(values)
        value = next(iterator, None)
        if value is None:
            return self

        # Select is the only multi-valued option
        if base_name.lower() == QueryOption.SELECT.value.lower():
            selected = [str(value)] + [str(v) for v in iterator if v is not None]
            value = ",".join(selected)

        option = QueryOption.from_property_name(base_name)
        if option is not None:
            self.spec = self.spec.with_option(option, value)
        else:
            self.keys.append((base_name, value))

        logger.debug(
            "property_filter",
            property_name=property_name,
            query_option=option.value if option else None,
        )
        return self
