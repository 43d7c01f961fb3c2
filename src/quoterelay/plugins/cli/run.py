"""
CLI command: run

Runs the relay loop until interrupted.
"""

import logging
import signal

import click

from quoterelay.app import build_scheduler, settings_from_context
from quoterelay.relay.errors import ConfigurationError

# Configure module-level logger
logger = logging.getLogger("quoterelay.cli.run")


@click.command("run")
@click.option(
    "--interval", type=click.FloatRange(min=0, min_open=True), help="Seconds between cycles"
)
@click.option("--cycles", type=click.IntRange(min=1), help="Stop after N cycles")
@click.option("--run-now", is_flag=True, help="Run the first cycle immediately")
@click.option("--symbols", help="Comma separated symbols, overrides configuration")
@click.pass_context
def cli(ctx, interval: float, cycles: int, run_now: bool, symbols: str) -> None:
    """
    Fetch quotes and relay them to the broker every INTERVAL seconds.
    """
    settings = settings_from_context(ctx)

    try:
        scheduler = build_scheduler(
            settings,
            symbols=symbols.split(",") if symbols else None,
            interval=interval,
            run_on_start=True if run_now else None,
        )
    except ConfigurationError as exc:
        logger.critical("Cannot start relay: %s", exc)
        click.echo(f"Error: {exc}")
        raise click.Abort()

    def _handle_sigterm(signum, frame):
        logger.info("Received signal %s; stopping after the current symbol", signum)
        scheduler.stop()

    previous = signal.signal(signal.SIGTERM, _handle_sigterm)
    try:
        scheduler.run(max_cycles=cycles)
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping relay")
        scheduler.stop()
    finally:
        signal.signal(signal.SIGTERM, previous)
