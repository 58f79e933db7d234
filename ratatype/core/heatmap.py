"""Classify per-character analytics into discrete heatmap bands."""

from __future__ import annotations

import enum
from typing import Dict, Iterable, Optional, Tuple

from ratatype.core.metrics import KeyMetricsTracker


class HeatBand(str, enum.Enum):
    FASTEST = "fastest"
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"
    SLOWEST = "slowest"

    HIGHEST = "highest"
    HIGH = "high"
    LOW = "low"
    LOWEST = "lowest"

    NO_DATA = "no-data"
    UNUSED = "unused"


# (exclusive upper bound on relative position, band), checked top-down.
SPEED_BANDS: Tuple[Tuple[float, HeatBand], ...] = (
    (0.16, HeatBand.FASTEST),
    (0.33, HeatBand.FAST),
    (0.67, HeatBand.MEDIUM),
    (0.83, HeatBand.SLOW),
)
SPEED_FALLBACK = HeatBand.SLOWEST

# (inclusive lower bound on accuracy fraction, band), checked top-down.
ACCURACY_BANDS: Tuple[Tuple[float, HeatBand], ...] = (
    (0.95, HeatBand.HIGHEST),
    (0.85, HeatBand.HIGH),
    (0.70, HeatBand.MEDIUM),
    (0.50, HeatBand.LOW),
)
ACCURACY_FALLBACK = HeatBand.LOWEST


def band_for_position(relative_position: float) -> HeatBand:
    for upper, band in SPEED_BANDS:
        if relative_position < upper:
            return band
    return SPEED_FALLBACK


def band_for_accuracy(accuracy: float) -> HeatBand:
    for lower, band in ACCURACY_BANDS:
        if accuracy >= lower:
            return band
    return ACCURACY_FALLBACK


class HeatmapColorMapper:
    """Maps a character's metrics in a tracker to a speed or accuracy band.

    Bands are recomputed from the tracker on every call. ``speed_bands`` and
    ``accuracy_bands`` classify many characters against one population,
    which is what a render pass wants.
    """

    def __init__(self, tracker: KeyMetricsTracker) -> None:
        self._tracker = tracker

    def speed_band(self, char: str) -> HeatBand:
        return self._speed_band(char, self._tracker.mean_latencies())

    def accuracy_band(self, char: str) -> HeatBand:
        metric = self._tracker.get(char)
        if metric is None:
            return HeatBand.UNUSED
        accuracy = metric.accuracy
        if accuracy is None:
            return HeatBand.NO_DATA
        return band_for_accuracy(accuracy)

    def speed_bands(self, chars: Iterable[str]) -> Dict[str, HeatBand]:
        means = self._tracker.mean_latencies()
        return {char: self._speed_band(char, means) for char in chars}

    def accuracy_bands(self, chars: Iterable[str]) -> Dict[str, HeatBand]:
        return {char: self.accuracy_band(char) for char in chars}

    def _speed_band(self, char: str, means: Dict[str, float]) -> HeatBand:
        if char not in self._tracker:
            return HeatBand.UNUSED
        mean: Optional[float] = means.get(char)
        if mean is None or len(means) < 2:
            return HeatBand.NO_DATA
        fastest = min(means.values())
        slowest = max(means.values())
        spread = slowest - fastest
        if spread <= 0:
            return HeatBand.NO_DATA
        return band_for_position((mean - fastest) / spread)
