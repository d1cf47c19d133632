import csv
import os
from typing import Dict, List

from src.benchmark.errors import ConfigError
from src.benchmark.parameter_set import ParameterSet

TRUE_VALUES = {"1", "t", "true"}
FALSE_VALUES = {"0", "f", "false"}


def parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean {value!r}")


def load_parameter_sets(path: str, base: ParameterSet, mode: str) -> List[ParameterSet]:
    """
    Parse a sweep file: a header row, then one run per row.

    Columns: concurrency, sampling_count, max_open_conn, max_idle_conn,
    table_name and an optional sixth column holding the batch size (seed)
    or the exec flag (read). Anything not in the file comes from ``base``.
    """
    if not os.path.exists(path):
        raise ConfigError(f"parameter file not found: {path}")

    with open(path, 'r', newline='') as f:
        records = list(csv.reader(f))

    param_sets = []
    for line_no, rec in enumerate(records[1:], start=2):
        if not rec or all(not cell.strip() for cell in rec):
            continue
        if len(rec) < 5:
            raise ConfigError(f"{path}:{line_no}: expected at least 5 columns, got {len(rec)}")

        try:
            overrides = {
                'concurrency': int(rec[0]),
                'sampling_count': int(rec[1]),
                'max_open_conn': int(rec[2]),
                'max_idle_conn': int(rec[3]),
                'table_name': rec[4].strip(),
            }
            if len(rec) > 5 and rec[5].strip():
                if mode == "seed":
                    overrides['batch_row'] = int(rec[5])
                else:
                    overrides['with_exec'] = parse_bool(rec[5])
        except ValueError as e:
            raise ConfigError(f"{path}:{line_no}: {e}") from e

        param_sets.append(base.with_overrides(**overrides))

    if not param_sets:
        raise ConfigError(f"{path} holds no parameter rows")

    return param_sets


def resolve_parameter_sets(benchmark_config: Dict, mode: str) -> List[ParameterSet]:
    base = ParameterSet.from_config(benchmark_config)

    path = benchmark_config.get('parameter_file')
    if not path:
        return [base]

    return load_parameter_sets(path, base, mode)
