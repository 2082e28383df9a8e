import logging
import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


class FakeSession:
    """Canned DOM: selector -> text. Records every call."""

    def __init__(self, texts=None, fail_on=None, error=None):
        self.texts = dict(texts or {})
        self.fail_on = fail_on
        self.error = error or RuntimeError("engine exploded")
        self.calls = []
        self.closed = 0

    def navigate(self, url, wait_until, timeout_ms):
        self.calls.append(("navigate", url, wait_until, timeout_ms))
        if self.fail_on == "navigate":
            raise self.error

    def wait_for(self, selector, timeout_ms):
        self.calls.append(("wait_for", selector, timeout_ms))
        if self.fail_on == "wait_for":
            raise self.error

    def query_text(self, selector):
        self.calls.append(("query_text", selector))
        if self.fail_on == "query_text":
            raise self.error
        return self.texts.get(selector)

    def close(self):
        self.closed += 1


@pytest.fixture()
def fake_session_factory():
    def _make(**kwargs):
        return FakeSession(**kwargs)

    return _make


@pytest.fixture()
def fixed_clock():
    """Wall clock that advances one minute on every call."""
    state = {"t": datetime(2026, 10, 18, 9, 30, 0, 123000, tzinfo=timezone.utc)}

    def _now():
        current = state["t"]
        state["t"] = current + timedelta(minutes=1)
        return current

    return _now


@pytest.fixture()
def xlsx_path(tmp_path):
    return tmp_path / "metrics.xlsx"


@pytest.fixture(autouse=True)
def restore_tracker_logger():
    """Drop console handlers a test attached to a since-replaced stdout."""
    from tiktok_tracker.logging_setup import LOGGER_NAME

    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)
