"""Windowed words-per-minute sampling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

INITIAL_WPM_DELAY = 2.0
WPM_UPDATE_INTERVAL = 1.0
CHARS_PER_WORD = 5.0
MAX_WPM_CAP = 500.0


@dataclass(frozen=True)
class WpmSample:
    elapsed: float
    wpm: float


def compute_wpm(characters: int, elapsed_seconds: float) -> float:
    """(characters / 5) / minutes, clamped to [0, MAX_WPM_CAP]."""
    if elapsed_seconds <= 0:
        return 0.0
    words = characters / CHARS_PER_WORD
    wpm = words / (elapsed_seconds / 60.0)
    return max(0.0, min(MAX_WPM_CAP, wpm))


class WpmSampler:
    """Emits WPM readings after a warm-up delay, at most once per interval.

    ``maybe_sample`` is called after every cursor-advancing correct keystroke;
    most calls are rejected by the two gates and record nothing.
    """

    def __init__(
        self,
        initial_delay: float = INITIAL_WPM_DELAY,
        update_interval: float = WPM_UPDATE_INTERVAL,
    ) -> None:
        self._initial_delay = initial_delay
        self._update_interval = update_interval
        self._samples: List[WpmSample] = []
        self._last_sample_at: Optional[float] = None

    @property
    def samples(self) -> Tuple[WpmSample, ...]:
        return tuple(self._samples)

    def maybe_sample(self, elapsed_seconds: float, cursor: int) -> Optional[WpmSample]:
        """Record a sample if both gates allow it and return it, else None."""
        if elapsed_seconds < self._initial_delay:
            return None
        if (
            self._last_sample_at is not None
            and elapsed_seconds - self._last_sample_at < self._update_interval
        ):
            return None
        sample = WpmSample(elapsed=elapsed_seconds, wpm=compute_wpm(cursor, elapsed_seconds))
        self._samples.append(sample)
        self._last_sample_at = elapsed_seconds
        return sample

    def current(self) -> float:
        return self._samples[-1].wpm if self._samples else 0.0

    def average(self) -> float:
        if not self._samples:
            return 0.0
        return sum(s.wpm for s in self._samples) / len(self._samples)

    def peak(self) -> float:
        return max((s.wpm for s in self._samples), default=0.0)

    def points(self) -> List[Tuple[float, float]]:
        """(elapsed, wpm) pairs for charting."""
        return [(s.elapsed, s.wpm) for s in self._samples]

    def clear(self) -> None:
        self._samples.clear()
        self._last_sample_at = None
