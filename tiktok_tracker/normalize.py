"""Shape raw extracted text into a timestamped MetricRecord."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Mapping, Optional

from .scraper_observability import iso_timestamp, utc_now
from .types import METRIC_FIELDS, MetricRecord


def normalize(
    raw: Mapping[str, Optional[str]],
    now: Optional[Callable[[], datetime]] = None,
) -> MetricRecord:
    """Attach the capture time to a raw ``{metric: text}`` mapping.

    Absent or blank metrics become the placeholder; values are not otherwise
    validated, so abbreviated counts such as ``"1.2M"`` pass through.
    """
    clock = now or utc_now
    fields = {name: raw.get(name) for name in METRIC_FIELDS}
    return MetricRecord(timestamp=iso_timestamp(clock()), **fields)
