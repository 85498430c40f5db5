"""Spreadsheet mirror of the feedback log.

The mirror is a single .xlsx workbook with one "Feedback" sheet. Every append
reads the whole sheet, adds one row and rewrites the file, so appends to the
same file are serialized through a process-wide lock keyed by path.
"""
from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any
from zoneinfo import ZoneInfo

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter


logger = logging.getLogger(__name__)

SHEET_NAME = "Feedback"
COLUMNS = ("Name", "Email", "Rating", "Message", "Date")
COLUMN_WIDTHS = (15, 25, 8, 40, 20)

_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


@dataclass
class MirrorRow:
    name: str
    email: str
    rating: int
    message: str
    submitted_at: datetime


class FeedbackMirror:
    def __init__(self, path: str | os.PathLike, tz_name: str = "Asia/Kolkata", sheet_name: str = SHEET_NAME):
        self.path = Path(path)
        self.tz = ZoneInfo(tz_name)
        self.sheet_name = sheet_name

    def format_date(self, dt: datetime) -> str:
        """Render a timestamp like `19/10/2026, 3:05:09 pm` in the mirror timezone."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        local = dt.astimezone(self.tz)
        hour = local.hour % 12 or 12
        suffix = "am" if local.hour < 12 else "pm"
        return f"{local.day}/{local.month}/{local.year}, {hour}:{local.minute:02d}:{local.second:02d} {suffix}"

    def _load(self) -> Workbook | None:
        if not self.path.exists():
            return None
        try:
            return load_workbook(self.path)
        except Exception as exc:
            logger.warning("Could not read %s, starting a new workbook: %s", self.path, exc)
            return None

    def _rows_from(self, workbook: Workbook | None) -> list[dict[str, Any]]:
        if workbook is None or self.sheet_name not in workbook.sheetnames:
            return []
        rows = workbook[self.sheet_name].iter_rows(values_only=True)
        header = next(rows, None)
        if not header:
            return []
        keys = [str(h) if h is not None else "" for h in header]
        data: list[dict[str, Any]] = []
        for values in rows:
            if values is None or all(v is None for v in values):
                continue
            record = dict(zip(keys, values))
            rating = record.get("Rating")
            if rating is not None and not isinstance(rating, int):
                try:
                    record["Rating"] = int(float(rating))
                except ValueError:
                    # hand-edited cell, keep it verbatim
                    pass
            data.append(record)
        return data

    def read_rows(self) -> list[dict[str, Any]]:
        return self._rows_from(self._load())

    def _to_record(self, row: MirrorRow) -> dict[str, Any]:
        return {
            "Name": row.name.strip(),
            "Email": row.email.strip(),
            "Rating": int(row.rating),
            "Message": row.message.strip(),
            "Date": self.format_date(row.submitted_at),
        }

    def _write(self, workbook: Workbook, records: list[dict[str, Any]]) -> None:
        if self.sheet_name in workbook.sheetnames:
            index = workbook.sheetnames.index(self.sheet_name)
            workbook.remove(workbook[self.sheet_name])
            sheet = workbook.create_sheet(self.sheet_name, index)
        else:
            sheet = workbook.create_sheet(self.sheet_name)

        sheet.append(list(COLUMNS))
        for record in records:
            sheet.append([record.get(column) for column in COLUMNS])
        for idx, width in enumerate(COLUMN_WIDTHS, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = width

        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write beside the target and swap, so readers never see a half-written file
        tmp = NamedTemporaryFile(delete=False, dir=self.path.parent, suffix=".xlsx")
        tmp.close()
        try:
            workbook.save(tmp.name)
            os.replace(tmp.name, self.path)
        except BaseException:
            Path(tmp.name).unlink(missing_ok=True)
            raise

    def append(self, row: MirrorRow) -> int:
        """Append one row and rewrite the file; returns the new row count."""
        return self.append_many([row])

    def append_many(self, rows: list[MirrorRow]) -> int:
        with _lock_for(self.path):
            workbook = self._load()
            records = self._rows_from(workbook)
            if workbook is None:
                workbook = Workbook()
                # Drop the default empty sheet of a fresh workbook
                workbook.remove(workbook.active)
            records.extend(self._to_record(row) for row in rows)
            self._write(workbook, records)
            return len(records)
