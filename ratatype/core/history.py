from __future__ import annotations

import csv
import logging
import time
from dataclasses import astuple, dataclass, fields
from pathlib import Path
from typing import List, Optional

from ratatype.core.session import SessionEngine

logger = logging.getLogger(__name__)

HISTORY_FILENAME = ".ratatype_history.csv"


@dataclass
class HistoryRecord:
    timestamp: int
    duration_seconds: int
    avg_wpm: float
    peak_wpm: float
    accuracy: float
    characters_typed: int
    errors: int
    correction_mode: bool
    text_source: str
    max_word_length: int

    @classmethod
    def from_engine(
        cls,
        engine: SessionEngine,
        text_source: str,
        max_word_length: int,
        timestamp: Optional[int] = None,
    ) -> "HistoryRecord":
        return cls(
            timestamp=int(time.time()) if timestamp is None else timestamp,
            duration_seconds=int(engine.duration),
            avg_wpm=engine.average_wpm(),
            peak_wpm=engine.peak_wpm(),
            accuracy=engine.accuracy(),
            characters_typed=engine.cursor,
            errors=engine.total_errors,
            correction_mode=engine.correction_mode,
            text_source=text_source,
            max_word_length=max_word_length,
        )

    def to_row(self) -> List[str]:
        row = []
        for value in astuple(self):
            if isinstance(value, bool):
                row.append("true" if value else "false")
            elif isinstance(value, float):
                row.append(f"{value:.2f}")
            else:
                row.append(str(value))
        return row

    @classmethod
    def from_row(cls, row: dict) -> "HistoryRecord":
        return cls(
            timestamp=int(row["timestamp"]),
            duration_seconds=int(row["duration_seconds"]),
            avg_wpm=float(row["avg_wpm"]),
            peak_wpm=float(row["peak_wpm"]),
            accuracy=float(row["accuracy"]),
            characters_typed=int(row["characters_typed"]),
            errors=int(row["errors"]),
            correction_mode=row["correction_mode"].strip().lower() == "true",
            text_source=row["text_source"],
            max_word_length=int(row["max_word_length"]),
        )


HEADER = [f.name for f in fields(HistoryRecord)]


def default_history_path() -> Path:
    return Path.home() / HISTORY_FILENAME


class HistoryRecorder:
    """Append-only CSV log of completed sessions.

    The header is written only when the file does not exist yet; existing
    lines are never rewritten. Write errors propagate as ``OSError``.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or default_history_path()

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: HistoryRecord) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        new_file = not self._path.exists()
        with self._path.open("a", encoding="utf-8", newline="") as fh:
            writer = csv.writer(fh, lineterminator="\n")
            if new_file:
                writer.writerow(HEADER)
            writer.writerow(record.to_row())
        logger.info("Saved session to %s", self._path)

    def read_all(self) -> List[HistoryRecord]:
        """Parse every record; malformed rows are skipped with a warning."""
        if not self._path.exists():
            return []
        records: List[HistoryRecord] = []
        with self._path.open("r", encoding="utf-8", newline="") as fh:
            for line_no, row in enumerate(csv.DictReader(fh), start=2):
                try:
                    records.append(HistoryRecord.from_row(row))
                except (KeyError, ValueError, TypeError, AttributeError) as e:
                    logger.warning("Skipping malformed history line %d in %s: %s", line_no, self._path, e)
        return records
