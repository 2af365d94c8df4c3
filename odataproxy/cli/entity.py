"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

CLI commands for configured entities.

Provides commands for reading entities, invoking methods on them and
listing what the configuration declares.
"""

import asyncio
import json
import sys
import uuid
from typing import Any, Dict, List, Optional

import click

from odataproxy.cli.host import ClickHost, DryRunAdapter
from odataproxy.core.invocation import MethodInvocation
from odataproxy.core.query import QueryBuilder
from odataproxy.exceptions import ODataProxyError
from odataproxy.sdk.client import ConnectionOptions, ODataProxyClient


def parse_value(raw: str) -> Any:
    """
    Convert a command-line value to the type used for key rendering.

    Integers become ``int``, GUIDs become ``uuid.UUID``, JSON objects and
    arrays are decoded, and single-quoted text stays a string.
    """
    if len(raw) >= 2 and raw[0] == raw[-1] == "'":
        return raw[1:-1]
    if raw.lstrip("-").isdigit():
        return int(raw)
    if raw[:1] in ("{", "["):
        try:
            return json.loads(raw)
        except ValueError:
            return raw
    try:
        return uuid.UUID(raw)
    except ValueError:
        return raw


def validate_assignments(ctx, param, value) -> Dict[str, Any]:
    """
    Validate repeated ``Name=Value`` options and collect them into a mapping.

    Args:
        ctx: Click context
        param: Click parameter
        value: Raw option values

    Returns:
        Mapping of names to parsed values, in the order given

    Raises:
        click.BadParameter: If an item is not in Name=Value form
    """
    result: Dict[str, Any] = {}
    for item in value or ():
        if '=' not in item:
            raise click.BadParameter(f"'{item}' is not in Name=Value form")
        name, raw = item.split('=', 1)
        name = name.strip()
        if not name:
            raise click.BadParameter(f"'{item}' has an empty name")
        result[name] = parse_value(raw.strip())
    return result


def build_client(cli_ctx, entity: str, dry_run: bool, connection_uri: Optional[str] = None) -> ODataProxyClient:
    """
    Create an ODataProxyClient for a configured entity.

    Args:
        cli_ctx: CLI context holding the configuration
        entity: Configured entity name
        dry_run: Print requests instead of sending them
        connection_uri: Service root override for this call

    Returns:
        ODataProxyClient instance
    """
    config = cli_ctx.config
    options = ConnectionOptions.from_config(config.connection)
    if connection_uri:
        options.connection_uri = connection_uri
    return ODataProxyClient.from_config(
        config,
        entity,
        options=options,
        host=ClickHost(verbose=cli_ctx.verbose),
        adapter=DryRunAdapter() if dry_run else None,
    )


def build_query(
    keys: Dict[str, Any],
    filter_expr: Optional[str],
    select: tuple,
    orderby: Optional[str],
    top: Optional[int],
    skip: Optional[int],
    count: bool,
) -> QueryBuilder:
    query = QueryBuilder()
    for name, value in keys.items():
        query.filter_by_property(name, [value])
    if filter_expr:
        query.filter_by_property("Filter", [filter_expr])
    if select:
        query.filter_by_property("Select", list(select))
    if orderby:
        query.filter_by_property("OrderBy", [orderby])
    if skip is not None:
        query.filter_by_property("Skip", [skip])
    if top is not None:
        query.filter_by_property("Top", [top])
    if count:
        query.filter_by_property("IncludeTotalResponseCount", [True])
    return query


async def _run_get(client: ODataProxyClient, query: QueryBuilder) -> List[Any]:
    try:
        return await client.get(query)
    finally:
        await client.aclose()


async def _run_invoke(client: ODataProxyClient, invocation: MethodInvocation) -> List[Any]:
    try:
        return await client.invoke(invocation)
    finally:
        await client.aclose()


@click.command('get')
@click.argument('entity')
@click.option(
    '--key',
    '-k',
    'keys',
    multiple=True,
    callback=validate_assignments,
    help='Key as Name=Value (can be specified multiple times)',
)
@click.option('--filter', '-f', 'filter_expr', default=None, help='OData $filter expression')
@click.option('--select', '-s', multiple=True, help='Property to select (can be specified multiple times)')
@click.option('--orderby', '-o', default=None, help='OData $orderby expression')
@click.option('--top', type=click.IntRange(min=0), default=None, help='Maximum number of entities')
@click.option('--skip', type=click.IntRange(min=0), default=None, help='Number of entities to skip')
@click.option('--count', is_flag=True, help='Ask the service for the total count')
@click.option('--connection-uri', default=None, help='Service root to use instead of the configured one')
@click.option('--dry-run', is_flag=True, help='Print the request instead of sending it')
@click.pass_context
def get(ctx, entity: str, keys: Dict[str, Any], filter_expr: Optional[str], select: tuple,
        orderby: Optional[str], top: Optional[int], skip: Optional[int], count: bool,
        connection_uri: Optional[str], dry_run: bool):
    """
    Read instances of a configured entity.

    Examples:

        odataproxy get Product --filter "Price gt 10" --top 5

        odataproxy get Product --key Id=7 --select Name --select Price
    """
    try:
        query = build_query(keys, filter_expr, select, orderby, top, skip, count)
        client = build_client(ctx.obj, entity, dry_run, connection_uri)
        asyncio.run(_run_get(client, query))
    except ODataProxyError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.command('invoke')
@click.argument('entity')
@click.argument('method')
@click.option(
    '--param',
    '-p',
    'params',
    multiple=True,
    callback=validate_assignments,
    help='Parameter as Name=Value, or Name:Key=Value for keys (can be specified multiple times)',
)
@click.option('--force', is_flag=True, help='Do not ask before continuing')
@click.option('--dry-run', is_flag=True, help='Print the request instead of sending it')
@click.pass_context
def invoke(ctx, entity: str, method: str, params: Dict[str, Any], force: bool, dry_run: bool):
    """
    Invoke a method on a configured entity.

    METHOD is Create, Update, Delete, Action:<Name>:<ResultType> or
    Association:Create|Delete:<Entity>.

    Examples:

        odataproxy invoke Product Update -p Id:Key=7 -p Price=12

        odataproxy invoke Order Action:Ship:Order -p Id:Key=5 --force
    """
    try:
        invocation = MethodInvocation.from_parameters(method, params, force=force)
        client = build_client(ctx.obj, entity, dry_run)
        outputs = asyncio.run(_run_invoke(client, invocation))
        if not outputs and ctx.obj.verbose:
            click.echo("No objects returned.", err=True)
    except ODataProxyError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.command('entities')
@click.pass_context
def entities(ctx):
    """
    List configured entities.
    """
    config = ctx.obj.config
    if not config.entities:
        click.echo("No entities configured.")
        return

    click.echo(f"{'Name':<24} {'Protocol':<10} Resource URI")
    click.echo("-" * 72)
    for name, entity in sorted(config.entities.items()):
        click.echo(f"{name:<24} {entity.protocol:<10} {entity.resource_uri}")
