"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Confirmation gate for mutating operations.

Every Create, Update, Delete, Action and Association call is offered to
the host for confirmation before any request is built for the transport.
A declined operation is skipped silently.
"""

from __future__ import annotations

from typing import Optional, Protocol

from odataproxy.core.metadata import EntityMetadata
from odataproxy.logging_config import get_logger, log_confirmation_decision

logger = get_logger(__name__)


class ConfirmationHost(Protocol):
    """The part of the host that answers confirmation prompts."""

    def should_process(self, message: str) -> bool:
        ...

    def should_continue(self, message: str) -> bool:
        ...


class ConfirmationGate:
    """Asks the host whether a mutating operation may proceed.

    Args:
        host: Host answering the prompts.
        metadata: Entity metadata used to describe the target.
        command: Name of the command, quoted in the continue prompt.
    """

    def __init__(self, host: ConfirmationHost, metadata: EntityMetadata, command: Optional[str] = None):
        self._host = host
        self._metadata = metadata
        self._command = command or metadata.command or "unknown"

    def _messages(self, uri: str, is_action: bool):
        if is_action:
            namespace = self._metadata.namespace
            process = f"Invoke action in namespace '{namespace}' at '{uri}'"
            cont = (
                f"Command '{self._command}' will invoke an action in namespace "
                f"'{namespace}' at '{uri}'. Do you want to continue?"
            )
        else:
            type_name = self._metadata.entity_type_name
            set_name = self._metadata.entity_set_name
            process = f"Modify '{type_name}' in entity set '{set_name}' at '{uri}'"
            cont = (
                f"Command '{self._command}' will modify '{type_name}' in entity set "
                f"'{set_name}' at '{uri}'. Do you want to continue?"
            )
        return process, cont

    def confirm(self, operation: str, uri: str, is_action: bool, force: bool = False) -> bool:
        """
        Run the process and continue prompts for one operation.

        Args:
            operation: Method name being confirmed
            uri: Target URI
            is_action: Describe the target by namespace rather than entity set
            force: Skip the continue prompt

        Returns:
            True when the operation may proceed

        Raises:
            MissingMetadataError: If the metadata needed for the prompt is absent
        """
        process_message, continue_message = self._messages(uri, is_action)

        confirmed = False
        if self._host.should_process(process_message):
            confirmed = force or self._host.should_continue(continue_message)

        log_confirmation_decision(logger, operation, uri, confirmed, forced=force)
        return confirmed
