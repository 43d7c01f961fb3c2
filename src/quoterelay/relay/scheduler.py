"""
Fixed-interval scheduler driving the fetch, build, publish cycle.

Each tick walks the tracked symbols in configured order. A symbol whose fetch
or publish fails is logged and skipped for that tick only; nothing a single
symbol does can stop its siblings or later ticks.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from ..data.models import UpdateRecord, utc_now
from .errors import ConfigurationError, RelayError

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], float]
PublishFn = Callable[[UpdateRecord], None]

DEFAULT_INTERVAL = 10.0


class ItemStatus(Enum):
    """
    Outcome of one symbol in one cycle.
    """

    PUBLISHED = "published"
    FETCH_FAILED = "fetch_failed"
    PUBLISH_FAILED = "publish_failed"
    SKIPPED = "skipped"


@dataclass
class ItemResult:
    """
    Result of relaying a single symbol.
    """

    symbol: str
    status: ItemStatus
    record: Optional[UpdateRecord] = None
    error: Optional[BaseException] = None
    elapsed: float = 0.0

    @property
    def success(self) -> bool:
        return self.status is ItemStatus.PUBLISHED

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


@dataclass
class CycleReport:
    """
    Results of one tick, one entry per symbol in configured order.
    """

    cycle: int
    started_at: datetime
    results: List[ItemResult] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def published(self) -> List[ItemResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[ItemResult]:
        return [
            r
            for r in self.results
            if r.status in (ItemStatus.FETCH_FAILED, ItemStatus.PUBLISH_FAILED)
        ]

    @property
    def ok(self) -> bool:
        return not self.failed


class RelayScheduler:
    """
    Runs the relay cycle every ``interval`` seconds until stopped.

    Ticks never overlap. When a cycle takes longer than the interval the
    missed ticks are dropped and the cadence resumes at the next future tick.
    """

    def __init__(
        self,
        symbols: Iterable[str],
        fetch: FetchFn,
        publish: PublishFn,
        interval: float = DEFAULT_INTERVAL,
        max_workers: int = 1,
        run_on_start: bool = False,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utc_now,
    ):
        self.symbols: Tuple[str, ...] = tuple(symbols)
        if not self.symbols:
            raise ConfigurationError(["symbols"], "No symbols configured")
        if interval <= 0:
            raise ValueError("Interval must be positive")
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.fetch = fetch
        self.publish = publish
        self.interval = float(interval)
        self.max_workers = max_workers
        self.run_on_start = run_on_start
        self._clock = clock
        self._now = now
        self._stop = threading.Event()
        self._cycle = 0

    @property
    def cycles_run(self) -> int:
        return self._cycle

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        """Ask the loop to finish; checked between ticks and between symbols."""
        self._stop.set()

    def process_symbol(self, symbol: str) -> ItemResult:
        """
        Fetch, build and publish one symbol. Never raises.
        """
        started = self._clock()

        try:
            price = self.fetch(symbol)
            record = UpdateRecord(symbol=symbol, price=price, observed_at=self._now())
        except RelayError as e:
            logger.error(f"Error fetching data for {symbol}: {e}")
            return self._result(symbol, ItemStatus.FETCH_FAILED, started, error=e)
        except Exception as e:
            logger.exception(f"Unexpected error fetching data for {symbol}")
            return self._result(symbol, ItemStatus.FETCH_FAILED, started, error=e)

        try:
            self.publish(record)
        except RelayError as e:
            logger.error(f"Error sending update for {symbol}: {e}")
            return self._result(
                symbol, ItemStatus.PUBLISH_FAILED, started, record=record, error=e
            )
        except Exception as e:
            logger.exception(f"Unexpected error sending update for {symbol}")
            return self._result(
                symbol, ItemStatus.PUBLISH_FAILED, started, record=record, error=e
            )

        logger.info(f"Successfully sent update: {record}")
        return self._result(symbol, ItemStatus.PUBLISHED, started, record=record)

    def run_cycle(self) -> CycleReport:
        """
        Execute one tick over every tracked symbol.
        """
        self._cycle += 1
        report = CycleReport(cycle=self._cycle, started_at=self._now())
        started = self._clock()

        if self.max_workers > 1 and len(self.symbols) > 1:
            report.results = self._run_parallel()
        else:
            report.results = self._run_sequential()

        report.elapsed = self._clock() - started
        logger.info(
            f"Cycle {report.cycle} complete: {len(report.published)}/"
            f"{len(report.results)} published in {report.elapsed:.2f}s"
        )
        return report

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Block running ticks until :meth:`stop` is called or ``max_cycles``
        ticks have completed.

        Returns:
            Number of cycles executed
        """
        logger.info(
            f"Starting relay for {len(self.symbols)} symbols "
            f"({', '.join(self.symbols)}) every {self.interval:g}s"
        )
        executed = 0
        next_tick = self._clock() + (0.0 if self.run_on_start else self.interval)

        while not self._stop.is_set():
            if max_cycles is not None and executed >= max_cycles:
                break

            delay = next_tick - self._clock()
            if delay > 0 and self._stop.wait(delay):
                break

            self.run_cycle()
            executed += 1
            next_tick = self._next_tick(next_tick)

        logger.info(f"Relay stopped after {executed} cycle(s)")
        return executed

    def _next_tick(self, previous: float) -> float:
        next_tick = previous + self.interval
        now = self._clock()
        if next_tick < now:
            missed = int((now - next_tick) // self.interval) + 1
            logger.warning(f"Cycle overran the interval; dropping {missed} tick(s)")
            next_tick += missed * self.interval
        return next_tick

    def _run_sequential(self) -> List[ItemResult]:
        return [self._process_unless_stopped(symbol) for symbol in self.symbols]

    def _run_parallel(self) -> List[ItemResult]:
        workers = min(self.max_workers, len(self.symbols))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                symbol: executor.submit(self._process_unless_stopped, symbol)
                for symbol in self.symbols
            }
            # Report in configured order, not completion order
            return [futures[symbol].result() for symbol in self.symbols]

    def _process_unless_stopped(self, symbol: str) -> ItemResult:
        if self._stop.is_set():
            logger.debug(f"Skipping {symbol}: relay is stopping")
            return ItemResult(symbol=symbol, status=ItemStatus.SKIPPED)
        return self.process_symbol(symbol)

    def _result(
        self,
        symbol: str,
        status: ItemStatus,
        started: float,
        record: Optional[UpdateRecord] = None,
        error: Optional[BaseException] = None,
    ) -> ItemResult:
        return ItemResult(
            symbol=symbol,
            status=status,
            record=record,
            error=error,
            elapsed=self._clock() - started,
        )


def run(
    interval: float,
    items: Iterable[str],
    fetch: FetchFn,
    publish: PublishFn,
    max_cycles: Optional[int] = None,
    **kwargs,
) -> int:
    """Convenience function to build a scheduler and run it."""
    scheduler = RelayScheduler(items, fetch, publish, interval=interval, **kwargs)
    return scheduler.run(max_cycles=max_cycles)
