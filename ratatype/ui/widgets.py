"""Layout helpers for the typing and results screens.

Nothing here touches curses: each helper turns engine or tracker state into
plain rows of text (or text/state pairs) that the renderer only has to paint.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from ratatype.core.heatmap import HeatBand, HeatmapColorMapper
from ratatype.core.metrics import KeyMetricsTracker
from ratatype.core.session import SessionSnapshot

VISIBLE_CHAR_LIMIT = 300
RANKING_SIZE = 3
MIN_CHART_WPM = 60.0

# (keys, indent), top row first
KEYBOARD_ROWS: Tuple[Tuple[str, int], ...] = (
    ("qwertyuiop", 2),
    ("asdfghjkl", 3),
    ("zxcvbnm", 5),
)


class CharState(str, enum.Enum):
    CORRECT = "correct"
    CORRECTED = "corrected"
    WRONG = "wrong"
    CURSOR = "cursor"
    PENDING = "pending"


@dataclass(frozen=True)
class HeatKey:
    char: str
    band: HeatBand


@dataclass(frozen=True)
class HeatRow:
    indent: int
    keys: Tuple[HeatKey, ...]


def classify_text(
    snapshot: SessionSnapshot, limit: int = VISIBLE_CHAR_LIMIT
) -> List[Tuple[str, CharState]]:
    """Pair each visible target character with how it should be drawn."""
    cells: List[Tuple[str, CharState]] = []
    typed = snapshot.typed
    for index, expected in enumerate(snapshot.target[:limit]):
        if index < len(typed):
            if typed[index] != expected:
                state = CharState.WRONG
            elif snapshot.correction_marks[index]:
                state = CharState.CORRECTED
            else:
                state = CharState.CORRECT
        elif index == snapshot.cursor:
            state = CharState.CURSOR
        else:
            state = CharState.PENDING
        cells.append((expected, state))
    return cells


def wrap_cells(
    cells: Sequence[Tuple[str, CharState]], width: int
) -> List[List[Tuple[str, CharState]]]:
    """Break classified cells into lines of at most ``width``, preferring spaces."""
    if width <= 0:
        return []
    lines: List[List[Tuple[str, CharState]]] = []
    start = 0
    while start < len(cells):
        end = min(start + width, len(cells))
        if end < len(cells):
            # break after the last space that fits
            for split in range(end - 1, start, -1):
                if cells[split][0] == " ":
                    end = split + 1
                    break
        lines.append(list(cells[start:end]))
        start = end
    return lines


def format_remaining(seconds: float) -> str:
    return f"{max(0.0, seconds):.0f}s"


def stats_line(snapshot: SessionSnapshot) -> str:
    return f"WPM: {snapshot.current_wpm:.0f} | Accuracy: {snapshot.accuracy:.0f}%"


def summary_rows(
    average_wpm: float,
    peak_wpm: float,
    accuracy: float,
    characters: int,
    errors: int,
    duration: float,
) -> List[Tuple[str, str]]:
    return [
        ("Average WPM", f"{average_wpm:.1f}"),
        ("Peak WPM", f"{peak_wpm:.1f}"),
        ("Accuracy", f"{accuracy:.1f}%"),
        ("Characters Typed", str(characters)),
        ("Errors", str(errors)),
        ("Test Duration", f"{duration:.0f}s"),
    ]


def speed_rankings(tracker: KeyMetricsTracker, count: int = RANKING_SIZE) -> List[Tuple[str, str]]:
    """Fastest and slowest keys with their mean latency in milliseconds."""
    rows: List[Tuple[str, str]] = [("Fastest Keys", "Time (ms)")]
    rows.extend(_ranked(tracker.fastest(count), lambda latency: f"{latency * 1000:.0f}"))
    rows.append(("", ""))
    rows.append(("Slowest Keys", "Time (ms)"))
    rows.extend(_ranked(tracker.slowest(count), lambda latency: f"{latency * 1000:.0f}"))
    return rows


def accuracy_rankings(tracker: KeyMetricsTracker, count: int = RANKING_SIZE) -> List[Tuple[str, str]]:
    """Most error-prone keys by error count and most accurate keys as a percentage."""
    rows: List[Tuple[str, str]] = [("Problem Keys", "Errors")]
    rows.extend(_ranked(tracker.most_error_prone(count), str))
    rows.append(("", ""))
    rows.append(("Best Keys", "Accuracy"))
    rows.extend(_ranked(tracker.most_accurate(count), lambda accuracy: f"{accuracy * 100:.0f}%"))
    return rows


def _ranked(entries, fmt: Callable) -> List[Tuple[str, str]]:
    if not entries:
        return [("No data", "-")]
    return [(f"'{char}'", fmt(value)) for char, value in entries]


def speed_heatmap(mapper: HeatmapColorMapper) -> List[HeatRow]:
    return _heat_rows(mapper.speed_bands)


def accuracy_heatmap(mapper: HeatmapColorMapper) -> List[HeatRow]:
    return _heat_rows(mapper.accuracy_bands)


def _heat_rows(classify) -> List[HeatRow]:
    rows = []
    for keys, indent in KEYBOARD_ROWS:
        bands = classify(keys)
        rows.append(HeatRow(indent, tuple(HeatKey(char, bands[char]) for char in keys)))
    return rows


def wpm_chart(
    points: Sequence[Tuple[float, float]],
    duration: float,
    width: int,
    height: int,
) -> List[str]:
    """Plot (elapsed, wpm) points as rows of text, top row first.

    The x axis spans the configured duration and the y axis runs from zero to
    the larger of the peak reading and 60 WPM. Each column shows the last
    reading that falls into it; a row gains a dot where the reading reaches
    that height. Returns no rows when there is nothing to plot or no room.
    """
    if not points or width < 1 or height < 1 or duration <= 0:
        return []
    top = max(MIN_CHART_WPM, max(wpm for _, wpm in points))

    columns: List[float] = [-1.0] * width
    for elapsed, wpm in points:
        column = min(width - 1, int(elapsed / duration * width))
        columns[max(0, column)] = wpm

    rows = []
    for level in range(height, 0, -1):
        threshold = top * (level - 0.5) / height
        rows.append(
            "".join("•" if value >= 0 and value >= threshold else " " for value in columns)
        )
    return rows


def chart_axis_labels(points: Sequence[Tuple[float, float]], duration: float) -> Tuple[str, str]:
    """(y-axis, x-axis) captions for :func:`wpm_chart`."""
    top = max([MIN_CHART_WPM] + [wpm for _, wpm in points])
    return (
        f"WPM 0-{top:.0f}",
        f"Time (s) 0 / {duration / 2:.0f} / {duration:.0f}",
    )
