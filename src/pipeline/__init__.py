from .controller import BenchmarkController
from .config import load_config, build_sink
from .parameter_sweep import load_parameter_sets, resolve_parameter_sets
from .result_sink import CsvResultSink

__all__ = [
    'BenchmarkController',
    'CsvResultSink',
    'build_sink',
    'load_config',
    'load_parameter_sets',
    'resolve_parameter_sets',
]
