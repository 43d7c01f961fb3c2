"""
CLI command: config

Configuration inspection commands.
"""

import logging

import click

from quoterelay.app import settings_from_context
from quoterelay.relay.errors import ConfigurationError

# Configure module-level logger
logger = logging.getLogger("quoterelay.cli.config")


@click.group("config")
def cli():
    """
    Configuration management commands.
    """
    pass


@cli.command("show")
@click.pass_context
def show_config(ctx):
    """
    Show current configuration.
    """
    settings = settings_from_context(ctx)

    click.echo("quoterelay Configuration")
    click.echo("=" * 30)
    click.echo(f"Provider URL: {settings.provider_url}")
    click.echo(f"API Key: {settings.masked_api_key()}")
    click.echo(f"Broker URL: {settings.broker_url or '<not set>'}")
    try:
        click.echo(f"Symbols: {', '.join(settings.tracked_symbols())}")
    except ConfigurationError as e:
        click.echo(f"Symbols: <unavailable: {e}>")
        logger.error("Failed to load symbols: %s", e)
    click.echo(f"Interval: {settings.interval_seconds:g}s")
    click.echo(f"Request Timeout: {settings.request_timeout:g}s")
    click.echo(f"Max Workers: {settings.max_workers}")
    click.echo(f"Run On Start: {settings.run_on_start}")
    click.echo(f"Log Level: {settings.log_level}")


@cli.command("check")
@click.pass_context
def check_config(ctx):
    """
    Validate that the relay can start with the current configuration.
    """
    settings = settings_from_context(ctx)
    try:
        settings.require()
    except ConfigurationError as e:
        click.echo(f"✗ {e}")
        raise click.Abort()
    click.echo("✓ Configuration is complete")
