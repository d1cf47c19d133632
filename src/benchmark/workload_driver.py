"""
Drivers for a single benchmark run.

A driver moves through IDLE -> RUNNING -> DRAINING -> COMPLETED and can run
once. Any storage failure is fatal: it is raised as ``StoreError`` naming the
phase and the driver ends in FAILED.
"""
import time
from abc import ABC, abstractmethod
from enum import Enum
from functools import partial
from typing import Callable, List, Optional, Sequence

from src.benchmark.batch_partitioner import Batch, BatchPartitioner, PortfolioSegment, DEFAULT_USER_ID_OFFSET
from src.benchmark.errors import BenchmarkError, StoreError
from src.benchmark.latency_metric import LatencyAccumulator, OperationKind, SampleCollector
from src.benchmark.parameter_set import ParameterSet
from src.benchmark.percentile import summarize
from src.benchmark.performance_metrics import ReadResult, SeedResult
from src.benchmark.random_fields import RandomFieldGenerator
from src.benchmark.resource_monitor import ResourceMonitor
from src.benchmark.start_gate import StartGate
from src.benchmark.worker_pool import WorkerPool
from src.storage.data_sink import DataSink

DEFAULT_READ_STOCK_CODES = ["GOTO", "BBCA", "BBRI", "ADRO", "ANTM", "SIDO", "BUMI", "BMRI", "TLKM", "BRIS"]

WARMUP_SECONDS = 1.0


class DriverState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    COMPLETED = "completed"
    FAILED = "failed"


def elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def call_store(phase: str, fn: Callable, *args):
    try:
        return fn(*args)
    except BenchmarkError:
        raise
    except Exception as e:
        raise StoreError(phase, str(e)) from e


class WorkloadDriver(ABC):

    def __init__(self, sink: DataSink, params: ParameterSet, verbose: bool = False):
        self.sink = sink
        self.params = params
        self.verbose = verbose
        self.state = DriverState.IDLE

    def run(self):
        if self.state is not DriverState.IDLE:
            raise BenchmarkError(f"driver already used (state: {self.state.value})")

        try:
            return self._run()
        except BaseException:
            self.state = DriverState.FAILED
            raise

    @abstractmethod
    def _run(self):
        pass


class SeedWorkloadDriver(WorkloadDriver):
    """Bulk-inserts the synthetic portfolio table and times every batch write"""

    def __init__(self, sink: DataSink, params: ParameterSet, accumulator: LatencyAccumulator,
                 identifiers: Sequence[str], segments: Sequence[PortfolioSegment],
                 fill_identifiers: Sequence[str] = (), generator: Optional[RandomFieldGenerator] = None,
                 user_id_offset: int = DEFAULT_USER_ID_OFFSET, monitor_resources: bool = True,
                 verbose: bool = False):
        super().__init__(sink, params, verbose)
        self.accumulator = accumulator
        self.identifiers = identifiers
        self.segments = segments
        self.fill_identifiers = fill_identifiers
        self.generator = generator or RandomFieldGenerator()
        self.user_id_offset = user_id_offset
        self.monitor_resources = monitor_resources

        self.rows_submitted = 0

    def _run(self) -> SeedResult:
        params = self.params

        self.accumulator.reset()
        self.state = DriverState.RUNNING
        start_time = time.perf_counter()

        monitor = ResourceMonitor()
        if self.monitor_resources:
            monitor.start_monitoring()

        try:
            call_store("truncate", self.sink.truncate, params.table_name)

            partitioner = BatchPartitioner(self.identifiers, params.batch_row, self.generator, self.user_id_offset)
            planned = partitioner.planned_batch_count(self.segments, params.fill_amount)
            print(f"Seeding {params.table_name}: {len(self.segments)} segments, "
                  f"{params.fill_amount} fill rows, {planned} batches of {params.batch_row}")

            pool = WorkerPool(params.concurrency, params.sampling_count)
            query = self.sink.insert_statement(params.table_name)

            try:
                for batch in partitioner.batches(self.segments, self.fill_identifiers, params.fill_amount):
                    pool.submit(self._batch_task(query, batch))
                    self.rows_submitted += len(batch)
                print(f"  Submitted {pool.submitted_count} batches ({self.rows_submitted} rows)")
            finally:
                self.state = DriverState.DRAINING
                pool.stop_and_wait()
        finally:
            resource_metrics = monitor.stop_monitoring() if self.monitor_resources else {}

        total_time = time.perf_counter() - start_time
        snapshot = self.accumulator.snapshot_and_reset()
        self.state = DriverState.COMPLETED

        print(f"  Seed done in {total_time:.2f}s, {snapshot.count} batches, "
              f"avg {snapshot.average:.2f}ms, max {snapshot.max_latency:.2f}ms")

        return SeedResult(
            params=params,
            operations=snapshot.count,
            rows_written=self.rows_submitted,
            avg_latency=snapshot.average,
            max_latency=snapshot.max_latency,
            total_time=total_time,
            throughput=self.rows_submitted / total_time if total_time > 0 else 0.0,
            system_cores_avg=resource_metrics.get('system_cores_avg', 0.0),
            memory_peak=resource_metrics.get('memory_peak', 0.0),
        )

    def _batch_task(self, query: str, batch: Batch) -> Callable[[], None]:
        rows = [row.as_params() for row in batch.rows]

        def task():
            start = time.perf_counter()
            call_store("seed", self.sink.execute, query, rows)
            latency_ms = elapsed_ms(start)

            self.accumulator.record(latency_ms)
            if self.verbose:
                print(f"{self.accumulator.kind.value} {batch.source}#{batch.index} latency: {latency_ms:.2f}")

        return task


class ReadWorkloadDriver(WorkloadDriver):
    """
    Repeats one parameterized read per worker and keeps every raw duration.

    All workers are parked behind a start gate that opens after a short
    warm-up, so connection setup does not skew the first samples.
    """

    def __init__(self, sink: DataSink, params: ParameterSet,
                 stock_codes: Sequence[str] = tuple(DEFAULT_READ_STOCK_CODES),
                 warmup_seconds: float = WARMUP_SECONDS, explain_analyze: bool = False,
                 verbose: bool = False):
        super().__init__(sink, params, verbose)
        if len(stock_codes) == 0:
            raise BenchmarkError("read workload needs at least one stock code")
        self.stock_codes = list(stock_codes)
        self.warmup_seconds = warmup_seconds
        self.explain_analyze = explain_analyze

        self.collector = SampleCollector(OperationKind.READ)
        self.gate = StartGate()

    def _run(self) -> ReadResult:
        params = self.params

        self.state = DriverState.RUNNING
        start_time = time.perf_counter()

        query = self.sink.select_statement(params.table_name)
        pool = WorkerPool(params.concurrency, params.concurrency)

        print(f"Reading {params.table_name}: {params.concurrency} workers x "
              f"{params.sampling_count} queries (with_exec={params.with_exec})")

        try:
            for worker_id in range(params.concurrency):
                pool.submit(partial(self._worker, worker_id, query))

            time.sleep(self.warmup_seconds)
            self.gate.open()
        finally:
            self.state = DriverState.DRAINING
            # never leave workers parked if submission failed
            self.gate.open()
            pool.stop_and_wait()

        durations = self.collector.sorted_durations()
        analysis = self.collector.sorted_analysis()
        self.state = DriverState.COMPLETED

        return ReadResult(
            params=params,
            samples=len(durations),
            e2e=summarize(durations),
            explain_analyze=summarize(analysis),
            total_time=time.perf_counter() - start_time,
        )

    def _worker(self, worker_id: int, query: str):
        self.gate.wait()

        read = self.sink.run if self.params.with_exec else self.sink.select

        durations: List[float] = []
        analysis: List[float] = []
        for i in range(self.params.sampling_count):
            query_params = {'stock_code': self.stock_codes[i % len(self.stock_codes)]}

            start = time.perf_counter()
            call_store("read", read, query, query_params)
            durations.append(elapsed_ms(start))

            if self.explain_analyze:
                analysis.append(call_store("read", self.sink.explain_analyze, query, query_params))

        if self.verbose:
            worker_summary = summarize(sorted(durations))
            print(f"{self.collector.kind.value} worker {worker_id}: "
                  f"avg {worker_summary.avg:.5f} p50 {worker_summary.p50:.5f} "
                  f"p90 {worker_summary.p90:.5f} p99 {worker_summary.p99:.5f}")

        self.collector.extend(durations, analysis)
