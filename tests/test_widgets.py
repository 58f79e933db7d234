"""Tests for ratatype.ui.widgets – screen layout helpers."""

from __future__ import annotations

from ratatype.core.heatmap import HeatBand, HeatmapColorMapper
from ratatype.core.metrics import KeyMetricsTracker
from ratatype.core.session import SessionEngine
from ratatype.ui.widgets import (
    KEYBOARD_ROWS,
    VISIBLE_CHAR_LIMIT,
    CharState,
    accuracy_heatmap,
    accuracy_rankings,
    chart_axis_labels,
    classify_text,
    format_remaining,
    speed_heatmap,
    speed_rankings,
    stats_line,
    summary_rows,
    wpm_chart,
    wrap_cells,
)


def _snapshot(clock, target, keys, correction=False):
    engine = SessionEngine(target, duration=30, correction_mode=correction, clock=clock)
    for key in keys:
        engine.apply_keystroke(key)
    return engine.snapshot()


# ===========================================================================
# classify_text
# ===========================================================================

class TestClassifyText:
    def test_correct_wrong_cursor_pending(self, clock):
        cells = classify_text(_snapshot(clock, "abcd", "ax"))
        assert cells == [
            ("a", CharState.CORRECT),
            ("b", CharState.WRONG),
            ("c", CharState.CURSOR),
            ("d", CharState.PENDING),
        ]

    def test_corrected_position(self, clock):
        cells = classify_text(_snapshot(clock, "ab", "xa", correction=True))
        assert cells == [("a", CharState.CORRECTED), ("b", CharState.CURSOR)]

    def test_shows_target_char_not_typed_char(self, clock):
        cells = classify_text(_snapshot(clock, "abc", "z"))
        assert cells[0] == ("a", CharState.WRONG)

    def test_untouched(self, clock):
        cells = classify_text(_snapshot(clock, "ab", ""))
        assert cells == [("a", CharState.CURSOR), ("b", CharState.PENDING)]

    def test_finished_has_no_cursor(self, clock):
        cells = classify_text(_snapshot(clock, "ab", "ab"))
        assert [state for _, state in cells] == [CharState.CORRECT, CharState.CORRECT]

    def test_visible_limit(self, clock):
        cells = classify_text(_snapshot(clock, "a" * 400, ""))
        assert len(cells) == VISIBLE_CHAR_LIMIT


# ===========================================================================
# wrap_cells
# ===========================================================================

class TestWrapCells:
    @staticmethod
    def _text(lines):
        return ["".join(char for char, _ in line) for line in lines]

    def test_breaks_after_spaces(self):
        cells = [(c, CharState.PENDING) for c in "hello world foo"]
        assert self._text(wrap_cells(cells, 8)) == ["hello ", "world ", "foo"]

    def test_long_word_is_split(self):
        cells = [(c, CharState.PENDING) for c in "abcdefghij"]
        assert self._text(wrap_cells(cells, 4)) == ["abcd", "efgh", "ij"]

    def test_states_kept(self):
        cells = [("a", CharState.CORRECT), (" ", CharState.CURSOR), ("b", CharState.PENDING)]
        assert wrap_cells(cells, 2) == [cells[:2], cells[2:]]

    def test_zero_width(self):
        assert wrap_cells([("a", CharState.PENDING)], 0) == []

    def test_empty(self):
        assert wrap_cells([], 10) == []


# ===========================================================================
# Text lines
# ===========================================================================

class TestTextLines:
    def test_format_remaining(self):
        assert format_remaining(12.4) == "12s"
        assert format_remaining(-3) == "0s"

    def test_stats_line(self, clock):
        snap = _snapshot(clock, "abcd", "ax")
        assert stats_line(snap) == "WPM: 0 | Accuracy: 50%"

    def test_summary_rows(self):
        rows = summary_rows(41.26, 55.0, 96.54, 120, 4, 30)
        assert rows == [
            ("Average WPM", "41.3"),
            ("Peak WPM", "55.0"),
            ("Accuracy", "96.5%"),
            ("Characters Typed", "120"),
            ("Errors", "4"),
            ("Test Duration", "30s"),
        ]


# ===========================================================================
# Rankings
# ===========================================================================

class TestRankings:
    def test_speed_rankings(self):
        t = KeyMetricsTracker()
        t.record_attempt("a", 0.1)
        t.record_attempt("b", 0.25)
        assert speed_rankings(t) == [
            ("Fastest Keys", "Time (ms)"),
            ("'a'", "100"),
            ("'b'", "250"),
            ("", ""),
            ("Slowest Keys", "Time (ms)"),
            ("'b'", "250"),
            ("'a'", "100"),
        ]

    def test_speed_rankings_limited(self):
        t = KeyMetricsTracker()
        for char in "abcdef":
            t.record_attempt(char, 0.1)
        rows = speed_rankings(t, count=3)
        assert len(rows) == 1 + 3 + 1 + 1 + 3

    def test_accuracy_rankings(self):
        t = KeyMetricsTracker()
        for _ in range(4):
            t.record_attempt("a", 0.1)
        t.record_error("a")
        t.record_attempt("b", 0.1)
        assert accuracy_rankings(t) == [
            ("Problem Keys", "Errors"),
            ("'a'", "1"),
            ("", ""),
            ("Best Keys", "Accuracy"),
            ("'b'", "100%"),
            ("'a'", "75%"),
        ]

    def test_empty_tracker(self):
        t = KeyMetricsTracker()
        assert ("No data", "-") in speed_rankings(t)
        assert accuracy_rankings(t).count(("No data", "-")) == 2


# ===========================================================================
# Keyboard heatmaps
# ===========================================================================

class TestHeatmaps:
    def test_layout(self):
        rows = speed_heatmap(HeatmapColorMapper(KeyMetricsTracker()))
        assert [row.indent for row in rows] == [indent for _, indent in KEYBOARD_ROWS]
        assert ["".join(k.char for k in row.keys) for row in rows] == [
            "qwertyuiop", "asdfghjkl", "zxcvbnm",
        ]

    def test_unused_everywhere(self):
        rows = accuracy_heatmap(HeatmapColorMapper(KeyMetricsTracker()))
        assert {k.band for row in rows for k in row.keys} == {HeatBand.UNUSED}

    def test_bands_filled_in(self):
        t = KeyMetricsTracker()
        t.record_attempt("q", 0.1)
        t.record_attempt("m", 0.9)
        t.record_error("m")
        mapper = HeatmapColorMapper(t)
        speed = {k.char: k.band for row in speed_heatmap(mapper) for k in row.keys}
        accuracy = {k.char: k.band for row in accuracy_heatmap(mapper) for k in row.keys}
        assert speed["q"] is HeatBand.FASTEST
        assert speed["m"] is HeatBand.SLOWEST
        assert accuracy["q"] is HeatBand.HIGHEST
        assert accuracy["m"] is HeatBand.LOWEST
        assert accuracy["a"] is HeatBand.UNUSED


# ===========================================================================
# WPM chart
# ===========================================================================

class TestWpmChart:
    def test_no_points(self):
        assert wpm_chart([], 30, 10, 4) == []

    def test_no_room(self):
        assert wpm_chart([(2.0, 40.0)], 30, 0, 4) == []
        assert wpm_chart([(2.0, 40.0)], 30, 10, 0) == []

    def test_single_point(self):
        rows = wpm_chart([(15.0, 60.0)], 30, 10, 2)
        assert rows == ["     •    ", "     •    "]

    def test_height_tracks_reading(self):
        rows = wpm_chart([(3.0, 15.0), (27.0, 60.0)], 30, 10, 4)
        # column 1 only reaches the bottom row, column 9 the top
        assert [row[1] for row in rows] == [" ", " ", " ", "•"]
        assert [row[9] for row in rows] == ["•", "•", "•", "•"]

    def test_point_at_end_of_duration(self):
        rows = wpm_chart([(31.0, 60.0)], 30, 10, 1)
        assert rows == ["         •"]

    def test_rows_have_chart_width(self):
        rows = wpm_chart([(2.0, 80.0), (3.0, 90.0)], 30, 25, 5)
        assert len(rows) == 5
        assert all(len(row) == 25 for row in rows)

    def test_axis_labels(self):
        assert chart_axis_labels([(1.0, 80.0)], 30) == ("WPM 0-80", "Time (s) 0 / 15 / 30")

    def test_axis_minimum_is_sixty(self):
        assert chart_axis_labels([(1.0, 20.0)], 60)[0] == "WPM 0-60"
