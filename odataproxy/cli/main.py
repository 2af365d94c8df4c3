"""
CLI entry point for ODataProxy.

Provides command-line access to configured OData and Redfish entities:
reading entities with keys and query options, and invoking Create, Update,
Delete, Action and Association methods.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from odataproxy._version import __version__
from odataproxy.cli.context import CLIContext, pass_context
from odataproxy.config.settings import get_default_config_path, load_config
from odataproxy.exceptions import InvalidConfigurationError
from odataproxy.logging_config import setup_logging


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (default: from configuration)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='odataproxy')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], log_level: Optional[str], verbose: bool):
    """
    ODataProxy - command proxies for OData and Redfish services.

    Reads and modifies entities declared in the configuration file.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None

    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    effective_log_level = log_level.upper() if log_level else ctx.config.logging.level
    log_file = Path(ctx.config.logging.file) if ctx.config.logging.file else None
    setup_logging(
        level=effective_log_level,
        log_file=log_file,
        json_format=ctx.config.logging.format == "json",
    )

    if verbose:
        logger = logging.getLogger("odataproxy")
        logger.info(f"Loaded configuration from: {ctx.config_path or 'defaults'}")
        logger.info(f"Log level: {effective_log_level}")


# Import and register entity commands
from odataproxy.cli.entity import entities, get, invoke  # noqa: E402

cli.add_command(get)
cli.add_command(invoke)
cli.add_command(entities)


if __name__ == '__main__':
    cli()
