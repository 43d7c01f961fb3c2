"""
CLI command: quote

Fetches and prints the current price of one symbol without publishing it.
"""

import logging

import click

from quoterelay.app import settings_from_context
from quoterelay.relay.errors import ConfigurationError, FetchError
from quoterelay.relay.fetcher import QuoteFetcher

# Configure module-level logger
logger = logging.getLogger("quoterelay.cli.quote")


@click.command("quote")
@click.argument("symbol", type=click.STRING)
@click.pass_context
def cli(ctx, symbol: str) -> None:
    """
    Print the latest price for SYMBOL.
    """
    settings = settings_from_context(ctx)

    try:
        fetcher = QuoteFetcher(settings.provider_config())
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}")
        raise click.Abort()

    try:
        price = fetcher.fetch_price(symbol)
    except FetchError as exc:
        logger.error("Failed to fetch %s: %s", symbol, exc)
        click.echo(f"✗ {symbol}: {exc}")
        raise click.Abort()

    click.echo(f"{symbol}: {price}")
