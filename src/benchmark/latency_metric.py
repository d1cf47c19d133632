import math
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence


class OperationKind(Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class LatencySnapshot:

    count: int
    cumulative_latency: float
    max_latency: float

    @property
    def average(self) -> float:
        if self.count == 0:
            return math.nan
        return self.cumulative_latency / self.count


class LatencyAccumulator:
    """
    Running count/sum/max of operation latencies in milliseconds.

    Every read and write goes through one lock, so a snapshot never shows a
    count that is out of step with its sum.
    """

    def __init__(self, kind: OperationKind = OperationKind.WRITE):
        self.kind = kind
        self._lock = threading.Lock()
        self._count = 0
        self._cumulative_latency = 0.0
        self._max_latency = 0.0

    def record(self, duration_ms: float):
        with self._lock:
            self._count += 1
            self._cumulative_latency += duration_ms
            if self._max_latency < duration_ms:
                self._max_latency = duration_ms

    def snapshot(self) -> LatencySnapshot:
        with self._lock:
            return LatencySnapshot(self._count, self._cumulative_latency, self._max_latency)

    def snapshot_and_reset(self) -> LatencySnapshot:
        with self._lock:
            snap = LatencySnapshot(self._count, self._cumulative_latency, self._max_latency)
            self._count = 0
            self._cumulative_latency = 0.0
            self._max_latency = 0.0
        return snap

    def reset(self):
        with self._lock:
            self._count = 0
            self._cumulative_latency = 0.0
            self._max_latency = 0.0


class SampleCollector:
    """Merge target for raw per-worker samples of one operation kind"""

    def __init__(self, kind: OperationKind = OperationKind.READ):
        self.kind = kind
        self._lock = threading.Lock()
        self._durations: List[float] = []
        self._analysis: List[float] = []

    def extend(self, durations: Sequence[float], analysis: Sequence[float] = ()):
        with self._lock:
            self._durations.extend(durations)
            self._analysis.extend(analysis)

    def sorted_durations(self) -> List[float]:
        with self._lock:
            return sorted(self._durations)

    def sorted_analysis(self) -> List[float]:
        with self._lock:
            return sorted(self._analysis)

    def __len__(self):
        with self._lock:
            return len(self._durations)
