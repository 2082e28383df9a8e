from __future__ import annotations

import os
from dataclasses import dataclass, field

from .scrapers.tiktok_playwright import NAV_TIMEOUT_MS, SELECTOR_TIMEOUT_MS
from .store import DEFAULT_PATH, DEFAULT_SHEET

DEFAULT_URLS = [
    "https://www.tiktok.com/@audracoteee/video/7403581594914606378?is_from_webapp=1",
]

# Ten minutes between ticks.
DEFAULT_INTERVAL_SECONDS = 600.0

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    urls: list[str] = field(default_factory=lambda: list(DEFAULT_URLS))
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    xlsx_path: str = DEFAULT_PATH
    sheet_name: str = DEFAULT_SHEET
    nav_timeout_ms: int = NAV_TIMEOUT_MS
    selector_timeout_ms: int = SELECTOR_TIMEOUT_MS
    headless: bool = True
    log_level: str = "INFO"


def parse_urls(raw: str) -> list[str]:
    return [u.strip() for u in raw.split(",") if u.strip()]


def _positive(name: str, value: float) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings() -> Settings:
    raw_urls = os.getenv("TRACKER_URLS")
    urls = parse_urls(raw_urls) if raw_urls is not None else list(DEFAULT_URLS)
    if not urls:
        raise ValueError("TRACKER_URLS is set but contains no URLs")

    return Settings(
        urls=urls,
        interval_seconds=_positive(
            "TRACKER_INTERVAL_SECONDS",
            float(os.getenv("TRACKER_INTERVAL_SECONDS", str(DEFAULT_INTERVAL_SECONDS))),
        ),
        xlsx_path=os.getenv("TRACKER_XLSX_PATH", DEFAULT_PATH).strip() or DEFAULT_PATH,
        sheet_name=os.getenv("TRACKER_SHEET_NAME", DEFAULT_SHEET).strip() or DEFAULT_SHEET,
        nav_timeout_ms=int(
            _positive(
                "TRACKER_NAV_TIMEOUT_MS",
                int(os.getenv("TRACKER_NAV_TIMEOUT_MS", str(NAV_TIMEOUT_MS))),
            )
        ),
        selector_timeout_ms=int(
            _positive(
                "TRACKER_SELECTOR_TIMEOUT_MS",
                int(os.getenv("TRACKER_SELECTOR_TIMEOUT_MS", str(SELECTOR_TIMEOUT_MS))),
            )
        ),
        headless=os.getenv("TRACKER_HEADLESS", "1").strip().lower() in _TRUTHY,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
