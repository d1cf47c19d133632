"""
Nearest-rank latency statistics.

Values are expected to be sorted ascending. Empty input yields NaN so callers
can tell "no data" apart from a real zero latency.
"""
import math
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class LatencySummary:

    avg: float
    p50: float
    p90: float
    p99: float


def calculate_average(values: Sequence[float]) -> float:
    if len(values) == 0:
        return math.nan
    return sum(values) / len(values)


def calculate_percentile(values: Sequence[float], percentile: float) -> float:
    if len(values) == 0:
        return math.nan

    index = int(math.ceil(len(values) * percentile / 100.0))
    if index <= 0:
        return values[0]
    elif index >= len(values):
        return values[-1]

    return values[index - 1]


def summarize(values: Sequence[float]) -> LatencySummary:
    return LatencySummary(
        avg=calculate_average(values),
        p50=calculate_percentile(values, 50),
        p90=calculate_percentile(values, 90),
        p99=calculate_percentile(values, 99),
    )
