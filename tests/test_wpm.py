"""Tests for ratatype.core.wpm – windowed WPM sampling."""

from __future__ import annotations

import pytest

from ratatype.core.wpm import (
    INITIAL_WPM_DELAY,
    MAX_WPM_CAP,
    WPM_UPDATE_INTERVAL,
    WpmSample,
    WpmSampler,
    compute_wpm,
)


# ---------------------------------------------------------------------------
# compute_wpm
# ---------------------------------------------------------------------------

class TestComputeWpm:
    def test_one_word_per_second(self):
        # 5 characters in 1 second = 60 WPM
        assert compute_wpm(5, 1.0) == pytest.approx(60.0)

    def test_sixty_seconds(self):
        assert compute_wpm(250, 60.0) == pytest.approx(50.0)

    def test_zero_characters(self):
        assert compute_wpm(0, 10.0) == 0.0

    def test_zero_elapsed(self):
        assert compute_wpm(10, 0.0) == 0.0

    def test_capped(self):
        assert compute_wpm(10000, 2.0) == MAX_WPM_CAP


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------

class TestGates:
    def test_constants(self):
        assert INITIAL_WPM_DELAY == 2.0
        assert WPM_UPDATE_INTERVAL == 1.0

    def test_nothing_before_warm_up(self):
        s = WpmSampler()
        assert s.maybe_sample(0.5, 3) is None
        assert s.maybe_sample(1.99, 10) is None
        assert s.samples == ()

    def test_first_sample_at_warm_up(self):
        s = WpmSampler()
        sample = s.maybe_sample(2.0, 10)
        assert isinstance(sample, WpmSample)
        assert sample.elapsed == 2.0
        assert sample.wpm == pytest.approx(60.0)
        assert len(s.samples) == 1

    def test_rate_limited(self):
        s = WpmSampler()
        s.maybe_sample(2.0, 10)
        assert s.maybe_sample(2.5, 12) is None
        assert s.maybe_sample(2.99, 13) is None
        assert s.maybe_sample(3.0, 14) is not None
        assert [x.elapsed for x in s.samples] == [2.0, 3.0]

    def test_interval_measured_from_last_sample(self):
        s = WpmSampler()
        s.maybe_sample(2.4, 10)
        assert s.maybe_sample(3.3, 11) is None
        assert s.maybe_sample(3.5, 11) is not None

    def test_custom_gates(self):
        s = WpmSampler(initial_delay=0.0, update_interval=0.5)
        assert s.maybe_sample(0.1, 1) is not None
        assert s.maybe_sample(0.4, 2) is None

    def test_timestamps_strictly_increasing(self):
        s = WpmSampler()
        elapsed = 0.0
        for cursor in range(1, 200):
            elapsed += 0.13
            s.maybe_sample(elapsed, cursor)
        times = [x.elapsed for x in s.samples]
        assert times[0] >= 2.0
        assert all(b - a >= 1.0 for a, b in zip(times, times[1:]))
        assert all(0.0 <= x.wpm <= 500.0 for x in s.samples)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestQueries:
    def test_empty(self):
        s = WpmSampler()
        assert s.current() == 0.0
        assert s.average() == 0.0
        assert s.peak() == 0.0
        assert s.points() == []

    def test_values(self):
        s = WpmSampler()
        s.maybe_sample(2.0, 10)   # 60
        s.maybe_sample(3.0, 10)   # 40
        s.maybe_sample(4.0, 20)   # 60
        s.maybe_sample(6.0, 10)   # 20
        assert s.current() == pytest.approx(20.0)
        assert s.peak() == pytest.approx(60.0)
        assert s.average() == pytest.approx(45.0)

    def test_points(self):
        s = WpmSampler()
        s.maybe_sample(2.0, 10)
        assert s.points() == [(2.0, pytest.approx(60.0))]

    def test_clear(self):
        s = WpmSampler()
        s.maybe_sample(2.0, 10)
        s.clear()
        assert s.samples == ()
        # warm-up applies again after clearing
        assert s.maybe_sample(2.1, 10) is not None
