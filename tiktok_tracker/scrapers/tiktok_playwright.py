from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional

from ..logging_setup import LOGGER_NAME
from ..normalize import normalize
from ..scraper_observability import StepTimer, log_event
from ..types import METRIC_FIELDS, PLACEHOLDER, MetricRecord
from .browser import BrowserSession, launch_playwright

logger = logging.getLogger(LOGGER_NAME)

SCRAPER = "tiktok_playwright"

# Stable data-e2e hooks rendered next to each counter on a video page.
DEFAULT_SELECTORS: dict[str, str] = {
    "views": 'strong[data-e2e="video-views"]',
    "likes": 'strong[data-e2e="like-count"]',
    "comments": 'strong[data-e2e="comment-count"]',
    "shares": 'strong[data-e2e="share-count"]',
}

# Any counter label; the page is usable once one of these is rendered.
READY_SELECTOR = "strong"

# Playwright only offers zero-connection idle; it is bounded by the timeout.
WAIT_UNTIL = "networkidle"
NAV_TIMEOUT_MS = 45000
SELECTOR_TIMEOUT_MS = 15000


def read_metrics(
    session: BrowserSession, selectors: Mapping[str, str]
) -> dict[str, str]:
    out: dict[str, str] = {}
    for name in METRIC_FIELDS:
        text = session.query_text(selectors[name])
        # Rendered text is kept verbatim; only blank text counts as missing.
        out[name] = text if text and text.strip() else PLACEHOLDER
    return out


def extract(
    url: str,
    launcher: Optional[Callable[[], BrowserSession]] = None,
    selectors: Optional[Mapping[str, str]] = None,
    now: Optional[Callable[[], datetime]] = None,
    nav_timeout_ms: int = NAV_TIMEOUT_MS,
    selector_timeout_ms: int = SELECTOR_TIMEOUT_MS,
    run_id: Optional[str] = None,
) -> Optional[MetricRecord]:
    """
    Render ``url`` and read its engagement counters.

    - Returns None on any navigation, wait or engine failure (logged with the URL).
    - A counter that is not on the page is recorded as the placeholder.
    - The browser session is closed on every path.
    """
    launch = launcher or launch_playwright
    selectors = {**DEFAULT_SELECTORS, **(selectors or {})}
    fetch_timer = StepTimer()

    try:
        session = launch()
        try:
            session.navigate(url, wait_until=WAIT_UNTIL, timeout_ms=nav_timeout_ms)
            session.wait_for(READY_SELECTOR, timeout_ms=selector_timeout_ms)
            raw = read_metrics(session, selectors)
        finally:
            session.close()
    except Exception:
        logger.exception("Error scraping metadata for %s", url)
        log_event(
            "FETCH",
            scraper=SCRAPER,
            run_id=run_id,
            url=url,
            ok=False,
            latency_ms=fetch_timer.elapsed_ms(),
        )
        return None

    log_event(
        "FETCH",
        scraper=SCRAPER,
        run_id=run_id,
        url=url,
        ok=True,
        latency_ms=fetch_timer.elapsed_ms(),
    )

    record = normalize(raw, now=now)
    missing = [name for name in METRIC_FIELDS if raw[name] == PLACEHOLDER]
    log_event(
        "PARSE",
        scraper=SCRAPER,
        run_id=run_id,
        url=url,
        items_found=len(METRIC_FIELDS) - len(missing),
        missing=missing,
    )
    logger.info("Scraped %s -> %s", url, record.summary())
    return record
