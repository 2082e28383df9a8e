from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Iterable, Optional


# Sentinel written when a metric element is missing from the page.
PLACEHOLDER = "N/A"

METRIC_FIELDS: tuple[str, ...] = ("views", "likes", "comments", "shares")

# Worksheet layout: key, header, column width. Order is the on-disk order.
COLUMNS: list[dict[str, str | int]] = [
    {"key": "views", "header": "Views", "width": 15},
    {"key": "likes", "header": "Likes", "width": 15},
    {"key": "comments", "header": "Comments", "width": 15},
    {"key": "shares", "header": "Shares", "width": 15},
    {"key": "timestamp", "header": "Timestamp", "width": 25},
]

COLUMN_KEYS: list[str] = [str(c["key"]) for c in COLUMNS]
HEADERS: list[str] = [str(c["header"]) for c in COLUMNS]


def _metric_or_placeholder(value: Optional[object]) -> str:
    if value is None:
        return PLACEHOLDER
    text = str(value)
    return text if text.strip() else PLACEHOLDER


@dataclass(frozen=True)
class MetricRecord:
    """One timestamped observation of a video's engagement counters."""

    views: str
    likes: str
    comments: str
    shares: str
    timestamp: str

    def __post_init__(self) -> None:
        for name in METRIC_FIELDS:
            object.__setattr__(
                self, name, _metric_or_placeholder(getattr(self, name))
            )
        if not self.timestamp or not str(self.timestamp).strip():
            raise ValueError("MetricRecord.timestamp must be a non-empty string")
        object.__setattr__(self, "timestamp", str(self.timestamp).strip())

    def as_row(self) -> list[str]:
        return list(astuple(self))

    @classmethod
    def from_row(cls, values: Iterable[object]) -> "MetricRecord":
        cells = list(values)
        if len(cells) < len(COLUMN_KEYS):
            raise ValueError(
                f"expected {len(COLUMN_KEYS)} cells, got {len(cells)}"
            )
        return cls(*(None if c is None else str(c) for c in cells[: len(COLUMN_KEYS)]))

    def summary(self) -> str:
        return (
            f"Views: {self.views} | Likes: {self.likes} | "
            f"Comments: {self.comments} | Shares: {self.shares} | "
            f"Scraped At: {self.timestamp}"
        )
