import time
from datetime import datetime
from typing import Callable, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.benchmark import (
    BenchmarkError,
    ConfigError,
    LatencyAccumulator,
    OperationKind,
    ParameterSet,
    RandomFieldGenerator,
    ReadResult,
    ReadWorkloadDriver,
    SeedResult,
    SeedWorkloadDriver,
)
from src.benchmark.workload_driver import DEFAULT_READ_STOCK_CODES, WARMUP_SECONDS
from src.corpus import CorpusLoader
from src.pipeline.config import build_sink
from src.pipeline.parameter_sweep import resolve_parameter_sets
from src.pipeline.result_sink import CsvResultSink
from src.storage import DataSink

DEFAULT_FILL_IDENTIFIER_OFFSET = 400000


class BenchmarkController:
    """
    Runs every parameter set of the sweep in order and logs one result row
    for each. The first failure stops the sweep; rows already written stay.
    """

    def __init__(self, config: Dict, sink_factory: Optional[Callable[[Dict, ParameterSet], DataSink]] = None):
        self.config = config
        self.benchmark_config = config.get('benchmark', {}) or {}
        self.corpus_config = config.get('corpus', {}) or {}
        self.results_config = config.get('results', {}) or {}

        self.mode = self.benchmark_config.get('mode', 'seed')
        self.sink_factory = sink_factory or build_sink
        self.verbose = bool(self.benchmark_config.get('verbose', False))
        self.sleep_seconds = float(self.benchmark_config.get('sleep_seconds', 0))
        self.timezone = self._load_timezone(self.benchmark_config.get('timezone'))

        # seeded once for the whole process
        self.generator = RandomFieldGenerator(self.benchmark_config.get('seed'))
        self.accumulator = LatencyAccumulator(OperationKind.WRITE)

        self.results = []

    def run_benchmark(self) -> List:
        param_sets = resolve_parameter_sets(self.benchmark_config, self.mode)
        result_sink = self._result_sink()

        print(f"Starting {self.mode} benchmark with {len(param_sets)} parameter set(s)")

        for i, params in enumerate(param_sets):
            print(f"\n{'=' * 60}")
            print(f"TEST {i + 1}/{len(param_sets)}: concurrency={params.concurrency}, "
                  f"sampling={params.sampling_count}, max_open={params.max_open_conn}, "
                  f"max_idle={params.max_idle_conn}, table={params.table_name}")
            print(f"{'=' * 60}")

            started_at = self._now()
            try:
                if self.mode == 'seed':
                    result = self.run_seed(params)
                else:
                    result = self.run_read(params)
            except BenchmarkError as e:
                print(f"Benchmark failed at test {i + 1}: {e}")
                raise
            result.started_at = started_at
            result.ended_at = self._now()

            result_sink.append(result.csv_row())
            self.results.append(result)
            self._print_summary(result)

            if self.sleep_seconds > 0 and i < len(param_sets) - 1:
                time.sleep(self.sleep_seconds)

        return self.results

    def run_seed(self, params: ParameterSet) -> SeedResult:
        loader = CorpusLoader(self.generator)
        identifiers = loader.load_identifiers(self.corpus_config.get('identifiers_path', './accnos_500k.txt'))
        segments = loader.load_portfolio_segments(self.corpus_config.get('stock_data_path', './stock_data.csv'))

        fill_offset = int(self.corpus_config.get('fill_identifier_offset', DEFAULT_FILL_IDENTIFIER_OFFSET))
        fill_identifiers = identifiers[fill_offset:]

        with self.sink_factory(self.config, params) as sink:
            driver = SeedWorkloadDriver(
                sink,
                params,
                self.accumulator,
                identifiers,
                segments,
                fill_identifiers=fill_identifiers,
                generator=self.generator,
                user_id_offset=int(self.corpus_config.get('user_id_offset', 10)),
                monitor_resources=bool(self.benchmark_config.get('monitor_resources', True)),
                verbose=self.verbose,
            )
            return driver.run()

    def run_read(self, params: ParameterSet) -> ReadResult:
        with self.sink_factory(self.config, params) as sink:
            driver = ReadWorkloadDriver(
                sink,
                params,
                stock_codes=self.benchmark_config.get('read_stock_codes') or DEFAULT_READ_STOCK_CODES,
                warmup_seconds=float(self.benchmark_config.get('warmup_seconds', WARMUP_SECONDS)),
                explain_analyze=bool(self.benchmark_config.get('explain_analyze', False)),
                verbose=self.verbose,
            )
            return driver.run()

    def _result_sink(self) -> CsvResultSink:
        if self.mode == 'seed':
            return CsvResultSink(self.results_config.get('seed_path', 'insert_result.csv'), SeedResult.csv_header())
        return CsvResultSink(self.results_config.get('read_path', 'analyze_result.csv'), ReadResult.csv_header())

    def _now(self) -> datetime:
        return datetime.now(self.timezone)

    @staticmethod
    def _load_timezone(name: Optional[str]):
        if not name:
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"unknown timezone {name!r}") from e

    @staticmethod
    def _print_summary(result):
        if isinstance(result, SeedResult):
            print(f"    Time: {result.total_time:.2f}s, "
                  f"Throughput: {result.throughput:.1f} rows/s, "
                  f"Avg latency: {result.avg_latency:.2f}ms, Max latency: {result.max_latency:.2f}ms")
            print(f"    CPU: {result.system_cores_avg:.2f} cores, Memory peak: {result.memory_peak:.1f}MB")
        else:
            print(f"    avg: {result.e2e.avg:f}")
            print(f"    p50: {result.e2e.p50:f}")
            print(f"    p90: {result.e2e.p90:f}")
            print(f"    p99: {result.e2e.p99:f}")
