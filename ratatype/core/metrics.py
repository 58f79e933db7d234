"""Per-character latency and error analytics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass
class KeyMetric:
    """Latency samples (seconds) and error count for one expected character."""

    latencies: List[float] = field(default_factory=list)
    errors: int = 0

    @property
    def samples(self) -> int:
        return len(self.latencies)

    @property
    def mean_latency(self) -> Optional[float]:
        if not self.latencies:
            return None
        return sum(self.latencies) / len(self.latencies)

    @property
    def accuracy(self) -> Optional[float]:
        """Fraction of attempts that were correct, or None without samples."""
        if not self.latencies:
            return None
        return (len(self.latencies) - self.errors) / len(self.latencies)


class KeyMetricsTracker:
    """Accumulates KeyMetric entries keyed by the *expected* character.

    Ranking queries sort stably, so characters with equal metric values keep
    the order in which they were first attempted.
    """

    def __init__(self) -> None:
        self._metrics: Dict[str, KeyMetric] = {}

    def __contains__(self, char: object) -> bool:
        return char in self._metrics

    def __len__(self) -> int:
        return len(self._metrics)

    def __iter__(self) -> Iterator[str]:
        return iter(self._metrics)

    def get(self, char: str) -> Optional[KeyMetric]:
        return self._metrics.get(char)

    def items(self) -> List[Tuple[str, KeyMetric]]:
        return list(self._metrics.items())

    def record_attempt(self, expected: str, latency: float) -> None:
        """Append a latency sample for ``expected``, correct or not."""
        if latency < 0:
            raise ValueError(f"latency must be non-negative, got {latency!r}")
        self._entry(expected).latencies.append(latency)

    def record_error(self, expected: str) -> None:
        """Count a mismatched attempt against ``expected``."""
        self._entry(expected).errors += 1

    def mean_latencies(self) -> Dict[str, float]:
        """Mean latency for every character that has at least one sample."""
        means: Dict[str, float] = {}
        for char, metric in self._metrics.items():
            mean = metric.mean_latency
            if mean is not None:
                means[char] = mean
        return means

    def fastest(self, count: int) -> List[Tuple[str, float]]:
        ranked = sorted(self.mean_latencies().items(), key=lambda item: item[1])
        return ranked[:count]

    def slowest(self, count: int) -> List[Tuple[str, float]]:
        ranked = sorted(self.mean_latencies().items(), key=lambda item: item[1], reverse=True)
        return ranked[:count]

    def most_error_prone(self, count: int) -> List[Tuple[str, int]]:
        errors = [(char, m.errors) for char, m in self._metrics.items() if m.errors > 0]
        errors.sort(key=lambda item: item[1], reverse=True)
        return errors[:count]

    def most_accurate(self, count: int) -> List[Tuple[str, float]]:
        """Characters ranked by fraction of correct attempts, best first."""
        accuracy = [
            (char, m.accuracy) for char, m in self._metrics.items() if m.accuracy is not None
        ]
        accuracy.sort(key=lambda item: item[1], reverse=True)
        return accuracy[:count]

    def clear(self) -> None:
        self._metrics.clear()

    def _entry(self, char: str) -> KeyMetric:
        metric = self._metrics.get(char)
        if metric is None:
            metric = KeyMetric()
            self._metrics[char] = metric
        return metric
