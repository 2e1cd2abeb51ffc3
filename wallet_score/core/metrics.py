from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import wraps
from math import sqrt
from time import perf_counter
from typing import Any, Callable, Dict, Iterator, Sequence, TypeVar, cast

_F = TypeVar("_F", bound=Callable[..., Any])

DEFAULT_BUCKETS_MS: tuple[float, ...] = (1.0, 5.0, 10.0, 25.0, 50.0, 100.0, 250.0)


@dataclass(slots=True)
class TimingStats:
    """Running aggregates for one timing label (Welford variance)."""

    count: float = 0.0
    total_ms: float = 0.0
    max_ms: float = 0.0
    avg_ms: float = 0.0
    stddev_ms: float = 0.0
    _m2: float = 0.0

    def update(self, elapsed_ms: float) -> None:
        value = float(elapsed_ms)
        self.count += 1.0
        self.total_ms += value
        self.max_ms = max(self.max_ms, value)

        delta = value - self.avg_ms
        self.avg_ms += delta / self.count
        self._m2 += delta * (value - self.avg_ms)
        variance = self._m2 / (self.count - 1.0) if self.count > 1.0 else 0.0
        self.stddev_ms = sqrt(variance) if variance > 0.0 else 0.0

    def snapshot(self) -> Dict[str, float]:
        return {
            "count": self.count,
            "total_ms": self.total_ms,
            "max_ms": self.max_ms,
            "avg_ms": self.avg_ms,
            "stddev_ms": self.stddev_ms,
        }


@dataclass(slots=True)
class HistogramBuckets:
    """Cumulative-free bucket counts keyed by upper boundary."""

    boundaries: tuple[float, ...]
    counts: Dict[str, float] = field(init=False)

    def __post_init__(self) -> None:
        self.counts = {str(boundary): 0.0 for boundary in self.boundaries}
        self.counts["+Inf"] = 0.0

    def observe(self, value: float) -> None:
        for boundary in self.boundaries:
            if value <= boundary:
                self.counts[str(boundary)] += 1.0
                return
        self.counts["+Inf"] += 1.0

    def snapshot(self) -> Dict[str, float]:
        return dict(self.counts)


class _MetricsRegistry:
    """Thread-safe in-process registry of timings, counters and histograms."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timings: Dict[str, TimingStats] = {}
        self._counters: Dict[str, float] = {}
        self._histograms: Dict[str, HistogramBuckets] = {}

    def record(self, label: str, elapsed_ms: float) -> None:
        if not label:
            return
        with self._lock:
            self._timings.setdefault(label, TimingStats()).update(elapsed_ms)

    def inc(self, label: str, amount: float = 1.0) -> None:
        if not label:
            return
        with self._lock:
            self._counters[label] = self._counters.get(label, 0.0) + float(amount)

    def observe_histogram(self, label: str, value: float, *, buckets: Sequence[float] | None = None) -> None:
        if not label:
            return
        with self._lock:
            histogram = self._histograms.get(label)
            if histogram is None:
                histogram = HistogramBuckets(tuple(buckets or DEFAULT_BUCKETS_MS))
                self._histograms[label] = histogram
            histogram.observe(value)

    def timings_snapshot(self, reset: bool = False) -> Dict[str, Dict[str, float]]:
        with self._lock:
            data = {label: stats.snapshot() for label, stats in self._timings.items()}
            if reset:
                self._timings.clear()
            return data

    def counters_snapshot(self, reset: bool = False) -> Dict[str, float]:
        with self._lock:
            data = dict(self._counters)
            if reset:
                self._counters.clear()
            return data

    def histograms_snapshot(self, reset: bool = False) -> Dict[str, Dict[str, float]]:
        with self._lock:
            data = {label: buckets.snapshot() for label, buckets in self._histograms.items()}
            if reset:
                self._histograms.clear()
            return data

    def reset(self) -> None:
        with self._lock:
            self._timings.clear()
            self._counters.clear()
            self._histograms.clear()


metrics_registry = _MetricsRegistry()


@contextmanager
def timer(label: str, *, buckets: Sequence[float] | None = None) -> Iterator[None]:
    """Time a block and record it as both a timing and a histogram observation."""
    started = perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (perf_counter() - started) * 1000.0
        metrics_registry.record(label, elapsed_ms)
        metrics_registry.observe_histogram(label, elapsed_ms, buckets=buckets)


def measure_time(label: str) -> Callable[[_F], _F]:
    """Decorator variant of :func:`timer`."""

    def _wrap(func: _F) -> _F:
        @wraps(func)
        def _inner(*args: Any, **kwargs: Any):
            with timer(label):
                return func(*args, **kwargs)

        return cast(_F, _inner)

    return _wrap


def inc_counter(label: str, amount: float = 1.0) -> None:
    metrics_registry.inc(label, amount)


def observe_histogram(label: str, value: float, *, buckets: Sequence[float] | None = None) -> None:
    metrics_registry.observe_histogram(label, value, buckets=buckets)


def get_metrics(reset: bool = False) -> Dict[str, Dict[str, float]]:
    """Return recorded timing metrics, optionally resetting them."""

    return metrics_registry.timings_snapshot(reset=reset)


def get_counters(reset: bool = False) -> Dict[str, float]:
    return metrics_registry.counters_snapshot(reset=reset)


def get_histograms(reset: bool = False) -> Dict[str, Dict[str, float]]:
    return metrics_registry.histograms_snapshot(reset=reset)


__all__ = [
    "timer",
    "measure_time",
    "inc_counter",
    "observe_histogram",
    "get_metrics",
    "get_counters",
    "get_histograms",
    "metrics_registry",
]
