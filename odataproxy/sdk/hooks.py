"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Lifecycle Hook Registry.

Extensions subscribe to these hooks to observe or adjust requests without
touching the dispatcher.

Available hooks:
- on_initialize: Fired once when the builder finishes setup
- on_before_request: Fired before every request handed to the transport
- on_after_response: Fired after every transport response
- on_error: Fired on any transport error
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from odataproxy.core.request import HttpRequestSpec, TransportResult
from odataproxy.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RequestScope:
    """What a hook callback knows about the request's origin."""
    command: Optional[str] = None
    protocol: Optional[str] = None


InitializeCallback = Callable[..., None]
BeforeRequestCallback = Callable[[HttpRequestSpec, RequestScope], HttpRequestSpec]
AfterResponseCallback = Callable[[TransportResult, RequestScope], None]
ErrorCallback = Callable[[Exception], None]


class HookRegistry:
    """
    Manages lifecycle hooks for a client.

    Multiple callbacks per hook are supported and run in registration
    order. A failing callback is logged and reported to ``on_error``
    callbacks; it never aborts the request.
    """

    def __init__(self) -> None:
        self._initialize_callbacks: List[InitializeCallback] = []
        self._before_request_callbacks: List[BeforeRequestCallback] = []
        self._after_response_callbacks: List[AfterResponseCallback] = []
        self._error_callbacks: List[ErrorCallback] = []

    def on_initialize(self, callback: InitializeCallback) -> None:
        self._initialize_callbacks.append(callback)
        logger.debug("hook_registered", hook="on_initialize")

    def on_before_request(self, callback: BeforeRequestCallback) -> None:
        """Register a callback fired before every outbound request.

        The callback receives ``(request, scope)`` and **must** return
        an ``HttpRequestSpec`` (possibly modified).
        """
        self._before_request_callbacks.append(callback)
        logger.debug("hook_registered", hook="on_before_request")

    def on_after_response(self, callback: AfterResponseCallback) -> None:
        self._after_response_callbacks.append(callback)
        logger.debug("hook_registered", hook="on_after_response")

    def on_error(self, callback: ErrorCallback) -> None:
        self._error_callbacks.append(callback)
        logger.debug("hook_registered", hook="on_error")

    def fire_initialize(self, **kwargs: Any) -> None:
        for cb in self._initialize_callbacks:
            try:
                cb(**kwargs)
            except Exception as exc:
                logger.error("hook_failed", hook="on_initialize", error=str(exc), exc_info=True)
                self.fire_error(exc)

    def fire_before_request(self, request: HttpRequestSpec, scope: RequestScope) -> HttpRequestSpec:
        """Run on_before_request callbacks as a pipeline.

        A callback returning None is treated as failed; the request it was
        given is passed on unchanged.
        """
        current = request
        for cb in self._before_request_callbacks:
            try:
                result = cb(current, scope)
                if result is None:
                    raise TypeError("on_before_request callback returned None")
                current = result
            except Exception as exc:
                logger.error("hook_failed", hook="on_before_request", error=str(exc), exc_info=True)
                self.fire_error(exc)
        return current

    def fire_after_response(self, response: TransportResult, scope: RequestScope) -> None:
        for cb in self._after_response_callbacks:
            try:
                cb(response, scope)
            except Exception as exc:
                logger.error("hook_failed", hook="on_after_response", error=str(exc), exc_info=True)
                self.fire_error(exc)

    def fire_error(self, error: Exception) -> None:
        for cb in self._error_callbacks:
            try:
                cb(error)
            except Exception:
                # No recursion into fire_error
                logger.error("hook_failed", hook="on_error", exc_info=True)
