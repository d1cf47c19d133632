import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from src.benchmark.parameter_set import ParameterSet
from src.benchmark.percentile import LatencySummary

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format_time(value: Optional[datetime]) -> str:
    return value.strftime(TIME_FORMAT) if value else ""


@dataclass
class SeedResult:

    params: ParameterSet

    operations: int
    rows_written: int
    avg_latency: float
    max_latency: float

    total_time: float
    throughput: float

    system_cores_avg: float
    memory_peak: float

    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    @staticmethod
    def csv_header() -> List[str]:
        return [
            "start", "end", "time_spent", "avg_latency", "max_latency", "operations",
            "concurrency", "sampling_count", "max_open_conn", "max_idle_conn",
            "batch_row", "table_name", "system_cores_avg", "memory_peak_mb",
        ]

    def csv_row(self) -> List[str]:
        p = self.params
        return [
            _format_time(self.started_at),
            _format_time(self.ended_at),
            f"{self.total_time:.3f}s",
            f"{self.avg_latency:.2f}",
            f"{self.max_latency:.2f}",
            str(self.operations),
            str(p.concurrency),
            str(p.sampling_count),
            str(p.max_open_conn),
            str(p.max_idle_conn),
            str(p.batch_row),
            p.table_name,
            f"{self.system_cores_avg:.2f}",
            f"{self.memory_peak:.2f}",
        ]


@dataclass
class ReadResult:

    params: ParameterSet

    samples: int
    e2e: LatencySummary
    explain_analyze: LatencySummary

    total_time: float

    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    @property
    def has_explain_analyze(self) -> bool:
        return not math.isnan(self.explain_analyze.avg)

    @staticmethod
    def csv_header() -> List[str]:
        return [
            "start", "end", "concurrency", "sampling_count", "max_open_conn",
            "max_idle_conn", "table_name", "with_exec",
            "avg", "p50", "p90", "p99",
            "avg_explain_analyze", "p50_explain_analyze", "p90_explain_analyze", "p99_explain_analyze",
        ]

    def csv_row(self) -> List[str]:
        p = self.params
        return [
            _format_time(self.started_at),
            _format_time(self.ended_at),
            str(p.concurrency),
            str(p.sampling_count),
            str(p.max_open_conn),
            str(p.max_idle_conn),
            p.table_name,
            str(p.with_exec).lower(),
            f"{self.e2e.avg:f}",
            f"{self.e2e.p50:f}",
            f"{self.e2e.p90:f}",
            f"{self.e2e.p99:f}",
            f"{self.explain_analyze.avg:f}",
            f"{self.explain_analyze.p50:f}",
            f"{self.explain_analyze.p90:f}",
            f"{self.explain_analyze.p99:f}",
        ]
