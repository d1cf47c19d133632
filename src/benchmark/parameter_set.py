from dataclasses import dataclass, fields, replace
from typing import Dict

from src.benchmark.errors import ConfigError

DEFAULT_TABLE_NAME = "high_load_prototyping"


@dataclass(frozen=True)
class ParameterSet:
    """One point of a parameter sweep"""

    concurrency: int = 10
    sampling_count: int = 1000
    max_open_conn: int = 100
    max_idle_conn: int = 10
    table_name: str = DEFAULT_TABLE_NAME
    batch_row: int = 1
    with_exec: bool = False
    fill_amount: int = 0

    def __post_init__(self):
        for name in ("concurrency", "sampling_count", "max_open_conn", "batch_row"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.max_idle_conn, int) or self.max_idle_conn < 0:
            raise ConfigError(f"max_idle_conn must be a non-negative integer, got {self.max_idle_conn!r}")
        if not isinstance(self.fill_amount, int) or self.fill_amount < 0:
            raise ConfigError(f"fill_amount must be a non-negative integer, got {self.fill_amount!r}")
        if not isinstance(self.table_name, str) or not self.table_name.replace("_", "").isalnum():
            raise ConfigError(f"table_name must be a plain identifier, got {self.table_name!r}")

    @classmethod
    def from_config(cls, benchmark_config: Dict) -> "ParameterSet":
        values = {f.name: benchmark_config.get(f.name, f.default) for f in fields(cls)}
        return cls(**values)

    def with_overrides(self, **changes) -> "ParameterSet":
        return replace(self, **changes)
