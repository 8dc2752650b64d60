"""
Metrics sinks - where request outcomes are recorded.

The validator never talks to a metrics backend directly; it is handed a
sink implementing MetricsSink. InMemoryMetrics aggregates in process and is
safe to share between virtual users.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol
import threading


ERROR_RATE = "api_errors"
CONFLICT_COUNTER = "optimistic_lock_conflicts"
CHECKS = "checks"

TagKey = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class RequestSample:
    """Outcome of a single HTTP call."""
    method: str
    endpoint: str
    operation_type: str
    status: int
    elapsed_ms: float
    response_length: int
    expected: bool


class MetricsSink(Protocol):
    def increment(self, name: str, value: int = 1, tags: Optional[Mapping[str, str]] = None) -> None:
        ...

    def observe(self, name: str, value: float, tags: Optional[Mapping[str, str]] = None) -> None:
        ...

    def record_request(self, sample: RequestSample) -> None:
        ...


@dataclass
class RateStats:
    """Running aggregation of 0/1 observations."""
    hits: int = 0
    total: int = 0

    @property
    def rate(self) -> float:
        return self.hits / self.total if self.total else 0.0


@dataclass
class Observation:
    name: str
    value: float
    tags: dict[str, str] = field(default_factory=dict)


class InMemoryMetrics:
    """
    Thread-safe in-process metrics sink.

    Counters and rates are running aggregates, kept per metric name and per
    (name, tags) pair. Only the most recent `history` observations and
    request samples are retained; pass history=0 to keep none.
    """

    def __init__(self, history: int = 1000):
        self._lock = threading.Lock()
        self.counters: dict[str, int] = {}
        self.rates: dict[str, RateStats] = {}
        self.tagged_rates: dict[tuple[str, TagKey], RateStats] = {}
        self.request_count = 0
        self.observations: deque[Observation] = deque(maxlen=history)
        self.requests: deque[RequestSample] = deque(maxlen=history)

    def increment(self, name: str, value: int = 1, tags: Optional[Mapping[str, str]] = None) -> None:
        with self._lock:
            self.counters[name] = self.counters.get(name, 0) + value

    def observe(self, name: str, value: float, tags: Optional[Mapping[str, str]] = None) -> None:
        with self._lock:
            for stats in (
                self.rates.setdefault(name, RateStats()),
                self.tagged_rates.setdefault((name, _tag_key(tags)), RateStats()),
            ):
                stats.total += 1
                if value:
                    stats.hits += 1
            self.observations.append(Observation(name, value, dict(tags or {})))

    def record_request(self, sample: RequestSample) -> None:
        with self._lock:
            self.request_count += 1
            self.requests.append(sample)

    def count(self, name: str) -> int:
        return self.counters.get(name, 0)

    def rate(self, name: str, tags: Optional[Mapping[str, str]] = None) -> float:
        """Rate over all observations of a metric, or only those with exactly these tags."""
        if tags is None:
            stats = self.rates.get(name)
        else:
            stats = self.tagged_rates.get((name, _tag_key(tags)))
        return stats.rate if stats else 0.0

    def values(self, name: str) -> list[float]:
        """Retained observed values for a metric, in recording order."""
        with self._lock:
            return [o.value for o in self.observations if o.name == name]

    def summary(self) -> dict:
        """Snapshot suitable for logging at the end of a run."""
        with self._lock:
            return {
                "counters": dict(self.counters),
                "rates": {name: round(stats.rate, 4) for name, stats in self.rates.items()},
                "requests": self.request_count,
            }

    def reset(self):
        with self._lock:
            self.counters.clear()
            self.rates.clear()
            self.tagged_rates.clear()
            self.request_count = 0
            self.observations.clear()
            self.requests.clear()


def _tag_key(tags: Optional[Mapping[str, str]]) -> TagKey:
    return tuple(sorted((tags or {}).items()))


# Process-wide sink used when none is injected
default_metrics = InMemoryMetrics()
