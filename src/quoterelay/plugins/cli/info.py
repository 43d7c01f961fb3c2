"""
CLI command: info

Displays the quoterelay package version and the tracked symbols.
"""

import logging
from importlib.metadata import PackageNotFoundError, version

import click

from quoterelay.app import settings_from_context
from quoterelay.relay.errors import ConfigurationError

# Configure module-level logger
logger = logging.getLogger("quoterelay.cli.info")


@click.command("info")
@click.pass_context
def cli(ctx) -> None:
    """
    Show package metadata and tracked symbols.
    """
    # Retrieve package version, fallback if not installed
    try:
        pkg_version = version("quoterelay")
        logger.debug("Retrieved package version: %s", pkg_version)
    except PackageNotFoundError:
        pkg_version = "0.0.0-dev"
        logger.warning(
            "Package 'quoterelay' not found; using development version placeholder."
        )

    click.echo(f"quoterelay version: {pkg_version}")

    settings = settings_from_context(ctx)
    try:
        symbols = settings.tracked_symbols()
    except ConfigurationError as e:
        logger.error("Failed to load symbols: %s", e)
        click.echo(f"✗ {e}")
        raise click.Abort()

    click.echo("\nTracked symbols:")
    for symbol in symbols:
        click.echo(f"  - {symbol}")
