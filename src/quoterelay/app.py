"""
Wiring of settings into a ready-to-run relay.
"""

import logging
from typing import Optional, Sequence

import requests

from .relay.fetcher import QuoteFetcher
from .relay.publisher import BrokerPublisher
from .relay.scheduler import RelayScheduler
from .settings import Settings, parse_symbols

logger = logging.getLogger(__name__)


def settings_from_context(ctx) -> Settings:
    """Settings stored on the click context by the CLI group, or fresh ones."""
    obj = ctx.find_object(dict) if ctx is not None else None
    if obj and isinstance(obj.get("settings"), Settings):
        return obj["settings"]
    return Settings()


def build_scheduler(
    settings: Settings,
    symbols: Optional[Sequence[str]] = None,
    interval: Optional[float] = None,
    run_on_start: Optional[bool] = None,
    session: Optional[requests.Session] = None,
) -> RelayScheduler:
    """
    Build a scheduler from settings, with optional overrides.

    Args:
        settings: Loaded application settings
        symbols: Symbols to track instead of the configured ones
        interval: Cycle interval in seconds instead of the configured one
        run_on_start: Whether the first cycle runs immediately
        session: HTTP session shared by the fetcher and the publisher; when
            omitted each worker thread uses its own

    Raises:
        ConfigurationError: If required settings are missing
    """
    settings.require()

    tracked = parse_symbols(symbols) if symbols else settings.tracked_symbols()

    fetcher = QuoteFetcher(settings.provider_config(), session)
    publisher = BrokerPublisher(settings.broker_config(), session)

    logger.debug(f"Built relay: {fetcher} -> {publisher}")
    return RelayScheduler(
        tracked,
        fetcher.fetch_price,
        publisher.publish,
        interval=interval if interval is not None else settings.interval_seconds,
        max_workers=settings.max_workers,
        run_on_start=(
            run_on_start if run_on_start is not None else settings.run_on_start
        ),
    )
