class BenchmarkError(Exception):
    """Base class for every fatal benchmark failure"""


class ConfigError(BenchmarkError):
    pass


class CorpusError(BenchmarkError):
    pass


class StoreError(BenchmarkError):

    def __init__(self, phase: str, message: str):
        super().__init__(f"{phase} failed: {message}")
        self.phase = phase


class PoolError(BenchmarkError):
    pass
