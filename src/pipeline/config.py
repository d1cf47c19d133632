import os
from typing import Any, Dict

import yaml

from src.benchmark.errors import ConfigError
from src.benchmark.parameter_set import ParameterSet
from src.storage import DataSink, MySQLSink, Neo4jSink, parse_dsn

MODES = ("seed", "read")


def load_config(config_path: str = "config.yaml") -> Dict:
    if not os.path.exists(config_path):
        raise ConfigError(f"config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"could not parse {config_path}: {e}") from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigError(f"{config_path} must hold a mapping, got {type(config).__name__}")

    mode = (config.get('benchmark') or {}).get('mode', 'seed')
    if mode not in MODES:
        raise ConfigError(f"benchmark.mode must be one of {MODES}, got {mode!r}")

    return config


def mysql_connection_settings(database_config: Dict) -> Dict[str, Any]:
    mysql_config = database_config.get('mysql', {}) or {}

    settings = {
        'host': mysql_config.get('host', '127.0.0.1'),
        'port': int(mysql_config.get('port', 3306)),
        'user': mysql_config.get('user', 'root'),
        'password': mysql_config.get('password', ''),
        'database': mysql_config.get('database'),
    }

    dsn = mysql_config.get('connection_string', '')

    # a non-empty connection string file wins over everything else
    dsn_file = database_config.get('connection_string_file')
    if dsn_file:
        try:
            with open(dsn_file, 'r') as f:
                text = f.read().strip()
        except OSError as e:
            raise ConfigError(f"could not read connection string file {dsn_file}: {e}") from e
        if text:
            dsn = text

    if dsn:
        settings = parse_dsn(dsn)

    return settings


def build_sink(config: Dict, params: ParameterSet) -> DataSink:
    database_config = config.get('database', {}) or {}
    backend = database_config.get('backend', 'mysql')

    if backend == 'mysql':
        return MySQLSink(
            mysql_connection_settings(database_config),
            max_open_conn=params.max_open_conn,
            max_idle_conn=params.max_idle_conn,
        )
    elif backend == 'neo4j':
        neo4j_config = database_config.get('neo4j', {}) or {}
        return Neo4jSink(
            neo4j_config.get('uri', 'bolt://localhost:7687'),
            neo4j_config.get('user', 'neo4j'),
            neo4j_config.get('password', ''),
            max_open_conn=params.max_open_conn,
            database=neo4j_config.get('database'),
        )

    raise ConfigError(f"unknown database backend: {backend!r}")
