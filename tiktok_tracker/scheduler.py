"""Fixed-interval tick loop: extract every target, persist the batch once."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from .logging_setup import LOGGER_NAME
from .scraper_observability import StepTimer, log_event, new_run_id
from .scrapers.tiktok_playwright import extract as default_extract
from .types import MetricRecord

logger = logging.getLogger(LOGGER_NAME)

Extractor = Callable[..., Optional[MetricRecord]]


class MetricsRepository(Protocol):
    def persist(self, records: Sequence[MetricRecord]) -> bool: ...


@dataclass
class TickResult:
    tick_id: str
    attempted: int
    records: List[MetricRecord] = field(default_factory=list)
    failed_urls: List[str] = field(default_factory=list)
    persisted: bool = False


class TickScheduler:
    """
    Idle -> running a tick -> idle, forever.

    A tick starts every ``interval_seconds`` measured from the start of the
    previous one on ``clock``. A tick that overruns the interval is followed
    immediately by the next; ticks never overlap and missed ones are not
    replayed.
    """

    def __init__(
        self,
        targets: Sequence[str],
        store: MetricsRepository,
        interval_seconds: float,
        extract: Extractor = default_extract,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.targets = list(targets)
        self.store = store
        self.interval_seconds = interval_seconds
        self.extract = extract
        self.clock = clock
        self.sleep = sleep
        self.ticks_run = 0

    def run_tick(self) -> TickResult:
        tick_id = new_run_id()
        timer = StepTimer()
        result = TickResult(tick_id=tick_id, attempted=len(self.targets))
        logger.info("Starting new scraping iteration (%s targets)", len(self.targets))
        log_event("START", tick_id=tick_id, targets=len(self.targets))

        for url in self.targets:
            try:
                record = self.extract(url, run_id=tick_id)
            except Exception:
                logger.exception("Extractor raised for %s; skipping this tick", url)
                record = None
            if record is None:
                result.failed_urls.append(url)
                continue
            result.records.append(record)

        result.persisted = self.store.persist(result.records)
        self.ticks_run += 1
        log_event(
            "END",
            tick_id=tick_id,
            success=result.persisted,
            records=len(result.records),
            failed=len(result.failed_urls),
            duration_ms=timer.elapsed_ms(),
        )
        return result

    def run_forever(self, max_ticks: Optional[int] = None) -> None:
        logger.info(
            "Scheduler started: %s target(s) every %ss",
            len(self.targets),
            self.interval_seconds,
        )
        done = 0
        while max_ticks is None or done < max_ticks:
            started = self.clock()
            self.run_tick()
            done += 1
            if max_ticks is not None and done >= max_ticks:
                break
            remaining = self.interval_seconds - (self.clock() - started)
            if remaining > 0:
                self.sleep(remaining)
            else:
                logger.warning(
                    "Tick took longer than the %ss interval; starting next tick now",
                    self.interval_seconds,
                )
