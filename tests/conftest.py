import threading
import time

import pytest

from src.storage import DataSink


class RecordingSink(DataSink):
    """In-memory DataSink that remembers every call"""

    name = "recording"

    def __init__(self, delay: float = 0.0, fail_on: str = None):
        self.delay = delay
        self.fail_on = fail_on
        self.lock = threading.Lock()

        self.truncated = []
        self.batches = []
        self.reads = []
        self.read_times = []
        self.closed = False

    def insert_statement(self, table):
        return f"INSERT INTO {table}"

    def select_statement(self, table):
        return f"SELECT FROM {table}"

    def truncate(self, table):
        if self.fail_on == "truncate":
            raise RuntimeError("table is locked")
        self.truncated.append(table)

    def execute(self, query, rows):
        time.sleep(self.delay)
        if self.fail_on == "execute":
            raise RuntimeError("duplicate entry")
        with self.lock:
            self.batches.append(list(rows))

    def select(self, query, params):
        self._read("select", params)
        return []

    def run(self, query, params):
        self._read("run", params)

    def explain_analyze(self, query, params):
        return 0.25

    def close(self):
        self.closed = True

    def _read(self, kind, params):
        started = time.perf_counter()
        time.sleep(self.delay)
        if self.fail_on == "read":
            raise RuntimeError("connection reset")
        with self.lock:
            self.reads.append((kind, params['stock_code']))
            self.read_times.append(started)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def identifiers():
    return [f"ACC{i:010d}" for i in range(1, 11)]
