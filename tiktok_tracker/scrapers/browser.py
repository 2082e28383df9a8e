"""Headless browser sessions used by the scrapers."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from ..logging_setup import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class BrowserUnavailable(RuntimeError):
    """Raised when the Playwright package or its browsers cannot be loaded."""


class BrowserSession(Protocol):
    def navigate(self, url: str, wait_until: str, timeout_ms: int) -> None: ...

    def wait_for(self, selector: str, timeout_ms: int) -> None: ...

    def query_text(self, selector: str) -> Optional[str]: ...

    def close(self) -> None: ...


def _playwright_available() -> bool:
    try:
        import playwright  # noqa: F401

        return True
    except Exception:
        return False


class PlaywrightSession:
    """One Chromium browser with a single page, driven by the sync API."""

    def __init__(self, headless: bool = True) -> None:
        try:
            from playwright.sync_api import sync_playwright
        except Exception as exc:
            raise BrowserUnavailable("Playwright sync API unavailable") from exc

        self._driver: Any = sync_playwright().start()
        self._browser: Any = None
        self._page: Any = None
        try:
            self._browser = self._driver.chromium.launch(headless=headless)
            self._page = self._browser.new_page()
        except Exception:
            self.close()
            raise

    def navigate(self, url: str, wait_until: str, timeout_ms: int) -> None:
        self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)

    def wait_for(self, selector: str, timeout_ms: int) -> None:
        self._page.wait_for_selector(selector, timeout=timeout_ms)

    def query_text(self, selector: str) -> Optional[str]:
        handle = self._page.query_selector(selector)
        if handle is None:
            return None
        return handle.text_content()

    def close(self) -> None:
        # Safe to call more than once; each layer is torn down independently.
        for attr, closer in (
            ("_page", "close"),
            ("_browser", "close"),
            ("_driver", "stop"),
        ):
            obj = getattr(self, attr, None)
            if obj is None:
                continue
            setattr(self, attr, None)
            try:
                getattr(obj, closer)()
            except Exception as exc:
                logger.warning("Failed to close browser %s: %s", attr.lstrip("_"), exc)


def launch_playwright(headless: bool = True) -> PlaywrightSession:
    if not _playwright_available():
        raise BrowserUnavailable("Playwright not installed")
    return PlaywrightSession(headless=headless)
