"""curses renderer for the typing and results screens."""

from __future__ import annotations

import curses
from typing import List, Optional, Sequence, Tuple, Union

from ratatype.core.heatmap import HeatmapColorMapper
from ratatype.core.session import SessionEngine, SessionSnapshot
from ratatype.ui import widgets
from ratatype.ui.colors import Palette, init_palette, pair_for_band, pair_for_state

RawKey = Union[str, int, None]


class TerminalUI:
    """Draws engine snapshots onto a curses window and reads keys from it.

    The renderer never mutates the engine: the typing screen is drawn from a
    :class:`SessionSnapshot`, the results screen from the engine's query
    methods and a heatmap mapper over its tracker.
    """

    def __init__(self, stdscr) -> None:
        self._stdscr = stdscr
        init_palette()
        try:
            curses.curs_set(0)
        except curses.error:
            # some terminals cannot hide the cursor
            pass
        stdscr.keypad(True)

    def read_key(self, timeout_ms: int) -> RawKey:
        """Wait up to ``timeout_ms`` for a key; None when nothing arrived."""
        self._stdscr.timeout(timeout_ms)
        try:
            return self._stdscr.get_wch()
        except curses.error:
            return None

    # -- typing screen -----------------------------------------------------

    def draw_typing(self, snapshot: SessionSnapshot) -> None:
        scr = self._stdscr
        scr.erase()
        maxy, maxx = scr.getmaxyx()
        width = max(1, min(maxx - 2, 100))
        left = max(0, (maxx - width) // 2)

        self._center(0, widgets.format_remaining(snapshot.remaining), Palette.TIMER)

        lines = widgets.wrap_cells(widgets.classify_text(snapshot), width)
        y = 2
        for line in lines:
            if y >= maxy - 2:
                break
            for x, (char, state) in enumerate(line):
                self._put(y, left + x, char, curses.color_pair(pair_for_state(state)))
            y += 1

        self._center(min(y + 1, maxy - 1), widgets.stats_line(snapshot), Palette.STATS)
        scr.refresh()

    # -- results screen ----------------------------------------------------

    def draw_results(self, engine: SessionEngine, notice: Optional[str] = None) -> None:
        scr = self._stdscr
        scr.erase()
        maxy, maxx = scr.getmaxyx()
        tracker = engine.tracker
        mapper = HeatmapColorMapper(tracker)

        self._center(0, "Test Complete!", Palette.TITLE, curses.A_BOLD)
        y = 2
        rows = widgets.summary_rows(
            engine.average_wpm(),
            engine.peak_wpm(),
            engine.accuracy(),
            engine.cursor,
            engine.total_errors,
            engine.duration,
        )
        y = self._table(y, 2, "Results", rows)

        half = max(1, maxx // 2)
        speed_end = self._table(y + 1, 2, "Key Speed", widgets.speed_rankings(tracker))
        accuracy_end = self._table(y + 1, half + 2, "Key Accuracy", widgets.accuracy_rankings(tracker))
        y = max(speed_end, accuracy_end) + 1

        self._put(y, 2, "Speed Heatmap:", curses.A_BOLD)
        self._put(y, half + 2, "Accuracy Heatmap:", curses.A_BOLD)
        speed_end = self._heatmap(y + 1, 2, widgets.speed_heatmap(mapper))
        accuracy_end = self._heatmap(y + 1, half + 2, widgets.accuracy_heatmap(mapper))
        y = max(speed_end, accuracy_end) + 1

        points = engine.sampler.points()
        chart_height = maxy - y - 5
        if points and chart_height >= 2:
            y_label, x_label = widgets.chart_axis_labels(points, engine.duration)
            self._put(y, 2, f"WPM Performance ({y_label})", curses.A_BOLD)
            chart = widgets.wpm_chart(points, engine.duration, max(1, maxx - 6), chart_height)
            for offset, line in enumerate(chart):
                self._put(y + 1 + offset, 4, line, curses.color_pair(Palette.STATS))
            y += len(chart) + 1
            self._put(y, 4, x_label)
            y += 1

        if notice:
            self._center(maxy - 2, notice, Palette.WRONG)
        self._center(maxy - 1, "Press ESC to exit or ENTER to restart", Palette.HINT)
        scr.refresh()

    # -- helpers -------------------------------------------------------------

    def _table(self, y: int, x: int, title: str, rows: Sequence[Tuple[str, str]]) -> int:
        self._put(y, x, title, curses.A_BOLD | curses.A_UNDERLINE)
        y += 1
        for label, value in rows:
            self._put(y, x, f"{label:<20}{value}")
            y += 1
        return y

    def _heatmap(self, y: int, x: int, rows: List[widgets.HeatRow]) -> int:
        for row in rows:
            col = x + row.indent
            for key in row.keys:
                self._put(y, col, f" {key.char} ", curses.color_pair(pair_for_band(key.band)))
                col += 4
            y += 1
        return y

    def _center(self, y: int, text: str, pair: int, attr: int = 0) -> None:
        _, maxx = self._stdscr.getmaxyx()
        x = max(0, (maxx - len(text)) // 2)
        self._put(y, x, text, curses.color_pair(pair) | attr)

    def _put(self, y: int, x: int, text: str, attr: int = 0) -> None:
        maxy, maxx = self._stdscr.getmaxyx()
        if y < 0 or y >= maxy or x >= maxx - 1:
            return
        try:
            self._stdscr.addstr(y, x, text[: maxx - 1 - x], attr)
        except curses.error:
            # writing into the bottom-right cell raises after the text is drawn
            pass
