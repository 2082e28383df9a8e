"""Append-only workbook store for collected metric records.

The workbook is loaded (or created), the metrics sheet is reused (or created
with its header row), new rows are appended and the whole file is written
back. Writes go to a sibling temp file that replaces the target in one step.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .logging_setup import LOGGER_NAME
from .scraper_observability import StepTimer, log_event
from .types import COLUMN_KEYS, COLUMNS, HEADERS, MetricRecord

logger = logging.getLogger(LOGGER_NAME)

DEFAULT_PATH = "tiktok_video_metadata.xlsx"
DEFAULT_SHEET = "TikTok Metadata"


def _target_mode(target: Path) -> int:
    """Permission bits the saved workbook should carry."""
    if target.exists():
        return target.stat().st_mode & 0o777
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class WorkbookStore:
    def __init__(self, path: str | Path = DEFAULT_PATH, sheet_name: str = DEFAULT_SHEET):
        self.path = Path(path)
        self.sheet_name = sheet_name

    def load(self) -> Workbook:
        """Open the workbook on disk, or start an empty one if it is missing or unreadable."""
        if self.path.exists():
            try:
                return load_workbook(self.path)
            except Exception as exc:
                logger.warning(
                    "Could not read %s (%s); starting a new workbook", self.path, exc
                )
        else:
            logger.info("Creating a new Excel file at %s", self.path)
        wb = Workbook()
        # Drop openpyxl's default blank sheet; ensure_sheet adds ours.
        wb.remove(wb.active)
        return wb

    def ensure_sheet(self, wb: Workbook) -> Worksheet:
        if self.sheet_name in wb.sheetnames:
            return wb[self.sheet_name]
        ws = wb.create_sheet(self.sheet_name)
        ws.append(HEADERS)
        for idx, col in enumerate(COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = col["width"]
        return ws

    @staticmethod
    def append(ws: Worksheet, records: Sequence[MetricRecord]) -> int:
        for record in records:
            ws.append(record.as_row())
        return len(records)

    def save(self, wb: Workbook) -> None:
        target = self.path.resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        os.close(fd)
        try:
            wb.save(tmp_name)
            # mkstemp creates 0600; keep the workbook readable as before.
            os.chmod(tmp_name, _target_mode(target))
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def persist(self, records: Sequence[MetricRecord]) -> bool:
        """Append ``records`` to the workbook on disk. Returns False if the write failed."""
        if not records:
            logger.info("No records this tick; %s left untouched", self.path)
            return True

        write_timer = StepTimer()
        try:
            wb = self.load()
            ws = self.ensure_sheet(wb)
            appended = self.append(ws, records)
            self.save(wb)
        except Exception:
            logger.exception(
                "Failed to write %s record(s) to %s", len(records), self.path
            )
            return False

        log_event(
            "WRITE",
            path=str(self.path),
            sheet=self.sheet_name,
            rows_inserted=appended,
            duration_ms=write_timer.elapsed_ms(),
        )
        logger.info("Data exported to Excel successfully (%s)", self.path)
        return True

    def row_count(self) -> int:
        """Data rows currently stored, header excluded."""
        if not self.path.exists():
            return 0
        wb = load_workbook(self.path)
        try:
            if self.sheet_name not in wb.sheetnames:
                return 0
            return max(wb[self.sheet_name].max_row - 1, 0)
        finally:
            wb.close()

    def read_frame(self) -> pd.DataFrame:
        if not self.path.exists():
            return pd.DataFrame(columns=COLUMN_KEYS)
        wb = load_workbook(self.path, read_only=True)
        try:
            has_sheet = self.sheet_name in wb.sheetnames
        finally:
            wb.close()
        if not has_sheet:
            return pd.DataFrame(columns=COLUMN_KEYS)

        df = pd.read_excel(
            self.path,
            sheet_name=self.sheet_name,
            engine="openpyxl",
            dtype=str,
            keep_default_na=False,
        )
        df.columns = COLUMN_KEYS[: len(df.columns)]
        return df.reindex(columns=COLUMN_KEYS)

    def read_records(self) -> list[MetricRecord]:
        df = self.read_frame()
        return [MetricRecord.from_row(row) for row in df.itertuples(index=False)]
