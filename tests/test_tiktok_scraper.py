import pytest

from tiktok_tracker.logging_setup import LOGGER_NAME
from tiktok_tracker.scrapers.browser import BrowserUnavailable
from tiktok_tracker.scrapers.tiktok_playwright import (
    DEFAULT_SELECTORS,
    READY_SELECTOR,
    WAIT_UNTIL,
    extract,
)

URL = "https://www.tiktok.com/@someone/video/1"

FULL_PAGE = {
    DEFAULT_SELECTORS["views"]: "10K",
    DEFAULT_SELECTORS["likes"]: " 500 ",
    DEFAULT_SELECTORS["comments"]: "31",
    DEFAULT_SELECTORS["shares"]: "20",
}


def test_extract_reads_all_four_counters(fake_session_factory, fixed_clock):
    session = fake_session_factory(texts=FULL_PAGE)
    rec = extract(URL, launcher=lambda: session, now=fixed_clock)

    assert rec is not None
    assert rec.as_row() == ["10K", " 500 ", "31", "20", "2026-10-18T09:30:00.123Z"]
    assert all(isinstance(v, str) and v for v in rec.as_row())
    assert session.closed == 1


def test_extract_waits_for_network_idle_then_label(fake_session_factory, fixed_clock):
    session = fake_session_factory(texts=FULL_PAGE)
    extract(
        URL,
        launcher=lambda: session,
        now=fixed_clock,
        nav_timeout_ms=1000,
        selector_timeout_ms=500,
    )
    assert session.calls[0] == ("navigate", URL, WAIT_UNTIL, 1000)
    assert session.calls[1] == ("wait_for", READY_SELECTOR, 500)


def test_missing_selector_gives_placeholder(fake_session_factory, fixed_clock):
    texts = dict(FULL_PAGE)
    del texts[DEFAULT_SELECTORS["comments"]]
    session = fake_session_factory(texts=texts)

    rec = extract(URL, launcher=lambda: session, now=fixed_clock)

    assert rec.comments == "N/A"
    assert rec.views == "10K"
    assert rec.likes == " 500 "
    assert rec.shares == "20"


def test_blank_text_is_placeholder_and_other_text_kept_verbatim(fake_session_factory, fixed_clock):
    texts = dict(FULL_PAGE)
    texts[DEFAULT_SELECTORS["shares"]] = "   "
    session = fake_session_factory(texts=texts)

    rec = extract(URL, launcher=lambda: session, now=fixed_clock)

    assert rec.shares == "N/A"
    assert rec.likes == " 500 "

def test_custom_selectors_override_defaults(fake_session_factory, fixed_clock):
    texts = dict(FULL_PAGE)
    texts['strong[data-e2e="undefined-count"]'] = "7"
    session = fake_session_factory(texts=texts)

    rec = extract(
        URL,
        launcher=lambda: session,
        now=fixed_clock,
        selectors={"comments": 'strong[data-e2e="undefined-count"]'},
    )
    assert rec.comments == "7"
    assert rec.views == "10K"


@pytest.mark.parametrize("stage", ["navigate", "wait_for", "query_text"])
def test_engine_failure_returns_none_and_closes(fake_session_factory, fixed_clock, stage):
    session = fake_session_factory(texts=FULL_PAGE, fail_on=stage)
    rec = extract(URL, launcher=lambda: session, now=fixed_clock)
    assert rec is None
    assert session.closed == 1


def test_failure_is_logged_with_url(fake_session_factory, fixed_clock, caplog):
    session = fake_session_factory(fail_on="wait_for", error=TimeoutError("timed out"))
    with caplog.at_level("ERROR", logger=LOGGER_NAME):
        assert extract(URL, launcher=lambda: session, now=fixed_clock) is None
    assert URL in caplog.text


def test_launch_failure_returns_none(fixed_clock):
    def _launcher():
        raise BrowserUnavailable("Playwright not installed")

    assert extract(URL, launcher=_launcher, now=fixed_clock) is None
