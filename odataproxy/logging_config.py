"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Logging configuration for ODataProxy.

Provides centralized structured logging setup with JSON output for production
and human-readable output for development. Supports correlation IDs so every
record emitted while serving one invocation can be traced together.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict


# Context variable for correlation ID
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add correlation ID to log events if present in context.

    Args:
        logger: Logger instance
        method_name: Name of the logging method
        event_dict: Event dictionary to modify

    Returns:
        Modified event dictionary with correlation_id if available
    """
    correlation_id = correlation_id_var.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set correlation ID for the current context.

    Args:
        correlation_id: Optional correlation ID. If None, generates a new UUID.

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Clear correlation ID from the current context."""
    correlation_id_var.set(None)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context, or None if not set."""
    return correlation_id_var.get()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Configure structured logging for ODataProxy.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs only to stderr.
        json_format: If True, use JSON format. If False, use human-readable format.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(stderr_handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Structured logger instance.
    """
    return structlog.get_logger(f"odataproxy.{name}")


# Convenience functions for common logging patterns

def log_request_dispatch(
    logger: structlog.stdlib.BoundLogger,
    verb: str,
    uri: str,
    request_kind: str,
    policy: str,
    **kwargs: Any,
) -> None:
    """
    Log a request handed to the transport.

    Args:
        logger: Logger instance
        verb: HTTP verb
        uri: Fully composed request URI
        request_kind: Classified request kind ("get", "create", "action", ...)
        policy: Name of the version policy that built the request
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "request_dispatch",
        "verb": verb,
        "uri": uri,
        "request_kind": request_kind,
        "policy": policy,
    }

    log_data.update(kwargs)

    logger.info("request_dispatch", **log_data)


def log_confirmation_decision(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    uri: str,
    confirmed: bool,
    forced: bool = False,
    **kwargs: Any,
) -> None:
    """
    Log the outcome of the confirmation gate for a mutating operation.

    Args:
        logger: Logger instance
        operation: Method name being confirmed
        uri: Target URI
        confirmed: Whether the operation may proceed
        forced: Whether the force flag skipped the continue prompt
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "confirmation_decision",
        "operation": operation,
        "uri": uri,
        "confirmed": confirmed,
        "forced": forced,
    }

    log_data.update(kwargs)

    logger.info("confirmation_decision", **log_data)


def log_request_failure(
    logger: structlog.stdlib.BoundLogger,
    uri: str,
    error: Exception,
    wrapped: bool,
    **kwargs: Any,
) -> None:
    """
    Log a transport failure at the invocation boundary.

    Args:
        logger: Logger instance
        uri: URI of the failed request
        error: Exception raised by the transport
        wrapped: Whether the error is being wrapped into RequestInvocationError
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "request_failure",
        "uri": uri,
        "error_type": type(error).__name__,
        "error_message": str(error),
        "wrapped": wrapped,
    }

    log_data.update(kwargs)

    logger.error("request_failure", **log_data)


def log_type_coercion(
    logger: structlog.stdlib.BoundLogger,
    entity_type: str,
    success: bool,
    reason: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log the result of coercing a response object to its entity type.

    Args:
        logger: Logger instance
        entity_type: Name of the target entity type
        success: Whether coercion succeeded
        reason: Reason for failure if not successful
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "type_coercion",
        "entity_type": entity_type,
        "success": success,
    }

    if reason is not None:
        log_data["reason"] = reason

    log_data.update(kwargs)

    if success:
        logger.debug("type_coercion", **log_data)
    else:
        logger.warning("type_coercion", **log_data)
