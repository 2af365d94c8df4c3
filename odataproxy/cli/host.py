"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Terminal host and dry-run transport for CLI commands.
"""

import json
from typing import Any, Iterable

import click

from odataproxy.core.request import HttpRequestSpec, TransportResult
from odataproxy.sdk.adapters.base import BaseAdapter
from odataproxy.sdk.host import InvocationHost


def format_object(obj: Any) -> str:
    """Render an output object for the terminal."""
    if isinstance(obj, (dict, list)):
        return json.dumps(obj, indent=2, default=str)
    if hasattr(obj, "__dict__"):
        return json.dumps(vars(obj), indent=2, default=str)
    return str(obj)


class ClickHost(InvocationHost):
    """Writes records to the terminal and confirms with ``click.confirm``.

    Args:
        verbose: Show verbose and debug records.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def write_object(self, obj: Any) -> None:
        click.echo(format_object(obj))

    def write_error(self, error: Any) -> None:
        click.echo(f"Error: {error}", err=True)

    def write_warning(self, message: str) -> None:
        click.echo(f"Warning: {message}", err=True)

    def write_verbose(self, message: str) -> None:
        if self.verbose:
            click.echo(f"VERBOSE: {message}", err=True)

    def write_debug(self, message: str) -> None:
        if self.verbose:
            click.echo(f"DEBUG: {message}", err=True)

    def write_information(self, data: Any, tags: Iterable[str] = ()) -> None:
        label = ",".join(tags) or "Information"
        click.echo(f"{label}: {json.dumps(data, default=str)}", err=True)

    def should_process(self, message: str) -> bool:
        if self.verbose:
            click.echo(f"What if: {message}", err=True)
        return True

    def should_continue(self, message: str) -> bool:
        return click.confirm(message, default=False)


class DryRunAdapter(BaseAdapter):
    """Transport that prints each request instead of sending it."""

    def __init__(self):
        self.sent = []

    async def send(self, request: HttpRequestSpec) -> TransportResult:
        self.sent.append(request)
        click.echo(f"{request.verb} {request.uri}")
        for name, value in request.headers.items():
            click.echo(f"  {name}: {value}")
        if request.content_type:
            click.echo(f"  Content-Type: {request.content_type}")
        if request.body is not None:
            click.echo(f"  {request.body}")
        return TransportResult(status_code=200)

    def close(self) -> None:
        self.sent.clear()

    @property
    def is_connected(self) -> bool:
        return True
