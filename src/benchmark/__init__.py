from .errors import BenchmarkError, ConfigError, CorpusError, StoreError, PoolError
from .percentile import LatencySummary, calculate_average, calculate_percentile, summarize
from .latency_metric import LatencyAccumulator, LatencySnapshot, OperationKind, SampleCollector
from .start_gate import StartGate
from .worker_pool import WorkerPool
from .random_fields import RandomFieldGenerator
from .parameter_set import ParameterSet
from .batch_partitioner import Batch, BatchPartitioner, PortfolioSegment, SyntheticRow
from .performance_metrics import ReadResult, SeedResult
from .resource_monitor import ResourceMonitor
from .workload_driver import DriverState, ReadWorkloadDriver, SeedWorkloadDriver


__all__ = [
    'BenchmarkError',
    'ConfigError',
    'CorpusError',
    'StoreError',
    'PoolError',
    'LatencySummary',
    'calculate_average',
    'calculate_percentile',
    'summarize',
    'LatencyAccumulator',
    'LatencySnapshot',
    'OperationKind',
    'SampleCollector',
    'StartGate',
    'WorkerPool',
    'RandomFieldGenerator',
    'ParameterSet',
    'Batch',
    'BatchPartitioner',
    'PortfolioSegment',
    'SyntheticRow',
    'ReadResult',
    'SeedResult',
    'ResourceMonitor',
    'DriverState',
    'ReadWorkloadDriver',
    'SeedWorkloadDriver',
]
