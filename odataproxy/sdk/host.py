"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Invocation hosts.

A host is whatever runs the client on behalf of a user: it answers
confirmation prompts and receives the response records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Tuple

from odataproxy.core.records import RecordKind, ResponseRecord


class InvocationHost(ABC):
    """Receives response records and answers confirmation prompts."""

    @abstractmethod
    def write_object(self, obj: Any) -> None:
        ...

    @abstractmethod
    def write_error(self, error: Any) -> None:
        ...

    @abstractmethod
    def write_warning(self, message: str) -> None:
        ...

    @abstractmethod
    def write_verbose(self, message: str) -> None:
        ...

    @abstractmethod
    def write_debug(self, message: str) -> None:
        ...

    @abstractmethod
    def write_information(self, data: Any, tags: Iterable[str] = ()) -> None:
        ...

    @abstractmethod
    def should_process(self, message: str) -> bool:
        """First confirmation step; False skips the operation."""
        ...

    @abstractmethod
    def should_continue(self, message: str) -> bool:
        """Second confirmation step, skipped when forced."""
        ...

    def emit(self, record: ResponseRecord) -> None:
        """Route a record to the matching ``write_*`` method."""
        if record.kind is RecordKind.OUTPUT:
            self.write_object(record.payload)
        elif record.kind is RecordKind.ERROR:
            self.write_error(record.payload)
        elif record.kind is RecordKind.WARNING:
            self.write_warning(record.payload)
        elif record.kind is RecordKind.VERBOSE:
            self.write_verbose(record.payload)
        elif record.kind is RecordKind.DEBUG:
            self.write_debug(record.payload)
        else:
            self.write_information(record.payload, record.tags)


class CollectingHost(InvocationHost):
    """Host that keeps everything in memory.

    Args:
        process: Answer to ``should_process`` prompts.
        proceed: Answer to ``should_continue`` prompts.
    """

    def __init__(self, process: bool = True, proceed: bool = True) -> None:
        self.process = process
        self.proceed = proceed
        self.objects: List[Any] = []
        self.errors: List[Any] = []
        self.warnings: List[str] = []
        self.verbose: List[str] = []
        self.debug: List[str] = []
        self.information: List[Tuple[Any, Tuple[str, ...]]] = []
        self.prompts: List[str] = []

    def write_object(self, obj: Any) -> None:
        self.objects.append(obj)

    def write_error(self, error: Any) -> None:
        self.errors.append(error)

    def write_warning(self, message: str) -> None:
        self.warnings.append(message)

    def write_verbose(self, message: str) -> None:
        self.verbose.append(message)

    def write_debug(self, message: str) -> None:
        self.debug.append(message)

    def write_information(self, data: Any, tags: Iterable[str] = ()) -> None:
        self.information.append((data, tuple(tags)))

    def should_process(self, message: str) -> bool:
        self.prompts.append(message)
        return self.process

    def should_continue(self, message: str) -> bool:
        self.prompts.append(message)
        return self.proceed
