import re
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Sequence

import pymysql
from sqlalchemy import exc as sa_exc
from sqlalchemy.pool import QueuePool

from src.benchmark.errors import ConfigError, StoreError
from src.storage.data_sink import DataSink

PORTFOLIO_COLUMNS = [
    "user_id",
    "accno",
    "user_sid_complete",
    "porto_date",
    "porto_stock_code",
    "porto_stock_quantity",
    "porto_last_price",
    "porto_avg_price",
    "porto_amount",
    "has_credit",
]

DSN_PATTERN = re.compile(
    r"^(?P<user>[^:@/]*)(?::(?P<password>[^@]*))?@"
    r"(?:(?P<net>[a-z]+)\((?P<addr>[^)]*)\))?"
    r"/(?P<database>[^?]*)"
    r"(?:\?(?P<query>.*))?$"
)

# top level "actual time=<first row>..<all rows>" of EXPLAIN ANALYZE
ACTUAL_TIME_PATTERN = re.compile(r"actual time=([0-9]+(?:\.[0-9]+)?)\.\.([0-9]+(?:\.[0-9]+)?)")

# Go time.Duration text, e.g. "500ms", "5s", "1m30s"
DURATION_PART_PATTERN = re.compile(r"([0-9]+(?:\.[0-9]+)?)(ns|us|µs|ms|s|m|h)")
DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_dsn(dsn: str) -> Dict[str, Any]:
    """Translate a ``user:password@tcp(host:port)/dbname?charset=...`` DSN into PyMySQL kwargs"""
    match = DSN_PATTERN.match(dsn.strip())
    if not match:
        raise ConfigError(f"malformed MySQL connection string: {dsn.strip()!r}")

    settings = {
        'user': match.group('user'),
        'password': match.group('password') or "",
        'database': match.group('database') or None,
    }

    net = match.group('net') or "tcp"
    addr = match.group('addr') or ""
    if net == "unix":
        settings['unix_socket'] = addr
    elif net == "tcp":
        host, _, port = addr.partition(":")
        settings['host'] = host or "127.0.0.1"
        try:
            settings['port'] = int(port) if port else 3306
        except ValueError:
            raise ConfigError(f"invalid port in MySQL connection string: {port!r}")
    else:
        raise ConfigError(f"unsupported network {net!r} in MySQL connection string")

    query = match.group('query')
    if query:
        for pair in query.split("&"):
            key, _, value = pair.partition("=")
            if key == "charset":
                settings['charset'] = value
            elif key == "timeout":
                timeout = parse_duration(value)
                # zero means no timeout, PyMySQL only accepts a positive one
                if timeout > 0:
                    settings['connect_timeout'] = timeout

    return settings


def parse_duration(value: str) -> float:
    """Seconds in a Go duration string such as ``500ms`` or ``1m30s``"""
    if value == "0":
        return 0.0

    parts = DURATION_PART_PATTERN.findall(value)
    if not parts or "".join(number + unit for number, unit in parts) != value:
        raise ConfigError(f"invalid duration in MySQL connection string: {value!r}")

    return sum(float(number) * DURATION_UNITS[unit] for number, unit in parts)


def parse_explain_analyze(output: str) -> float:
    match = ACTUAL_TIME_PATTERN.search(output or "")
    if not match:
        raise StoreError("read", "EXPLAIN ANALYZE output carries no actual time")
    return float(match.group(2))


class MySQLSink(DataSink):
    """
    PyMySQL backend behind a SQLAlchemy ``QueuePool``.

    At most ``max_open_conn`` connections are checked out at a time and a
    caller blocks until one is returned; ``max_idle_conn`` of them (at least
    one) stay open between calls, the rest are closed on return. A connection
    whose statement raised a driver error is invalidated and reopened on its
    next checkout.
    """

    name = "mysql"

    def __init__(self, connection_settings: Dict[str, Any], max_open_conn: int, max_idle_conn: int,
                 connect: Callable[..., Any] = pymysql.connect):
        if max_open_conn < 1:
            raise ConfigError(f"max_open_conn must be at least 1, got {max_open_conn}")

        self.max_open_conn = max_open_conn
        self.max_idle_conn = max_idle_conn

        settings = dict(connection_settings)
        settings.setdefault('autocommit', True)

        pool_size = min(max(max_idle_conn, 1), max_open_conn)
        self.pool = QueuePool(
            lambda: connect(**settings),
            pool_size=pool_size,
            max_overflow=max_open_conn - pool_size,
            timeout=None,
        )

    def insert_statement(self, table: str) -> str:
        columns = ", ".join(PORTFOLIO_COLUMNS)
        placeholders = ", ".join(f"%({c})s" for c in PORTFOLIO_COLUMNS)
        return f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"

    def select_statement(self, table: str) -> str:
        return f"SELECT * FROM {table} WHERE porto_stock_code = %(stock_code)s AND has_credit = true"

    def truncate(self, table: str):
        def work(conn, cursor):
            cursor.execute(f"TRUNCATE TABLE {table}")
            conn.commit()

        self._with_cursor("truncate", work)

    def execute(self, query: str, rows: Sequence[Dict[str, Any]]):
        if len(rows) == 0:
            return

        def work(conn, cursor):
            # PyMySQL folds executemany of an INSERT ... VALUES into one multi-row statement
            conn.begin()
            cursor.executemany(query, rows)
            conn.commit()

        self._with_cursor("seed", work)

    def select(self, query: str, params: Dict[str, Any]) -> List:
        def work(conn, cursor):
            cursor.execute(query, params)
            return list(cursor.fetchall())

        return self._with_cursor("read", work)

    def run(self, query: str, params: Dict[str, Any]):
        self._with_cursor("read", lambda conn, cursor: cursor.execute(query, params))

    def explain_analyze(self, query: str, params: Dict[str, Any]) -> float:
        def work(conn, cursor):
            cursor.execute("EXPLAIN ANALYZE " + query, params)
            row = cursor.fetchone()
            return row[0] if row else ""

        return parse_explain_analyze(self._with_cursor("read", work))

    @contextmanager
    def connection(self):
        conn = self.pool.connect()
        try:
            yield conn
        except pymysql.MySQLError as e:
            # invalidating also hands the connection back to the pool
            conn.invalidate(e)
            raise
        finally:
            if conn.is_valid:
                conn.close()

    def close(self):
        self.pool.dispose()

    def _with_cursor(self, phase: str, work: Callable[[Any, Any], Any]):
        try:
            with self.connection() as conn:
                with conn.cursor() as cursor:
                    return work(conn, cursor)
        except (pymysql.MySQLError, sa_exc.SQLAlchemyError) as e:
            raise StoreError(phase, str(e)) from e
