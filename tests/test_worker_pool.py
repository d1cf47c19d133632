import threading
import time
from collections import Counter

import pytest

from src.benchmark.errors import ConfigError, PoolError, StoreError
from src.benchmark.start_gate import StartGate
from src.benchmark.worker_pool import WorkerPool


def test_every_task_runs_exactly_once():
    pool = WorkerPool(max_workers=4, max_capacity=3)
    seen = Counter()
    lock = threading.Lock()

    def make_task(task_id):
        def task():
            time.sleep(0.001)
            with lock:
                seen[task_id] += 1
        return task

    for i in range(200):
        pool.submit(make_task(i))
    pool.stop_and_wait()

    assert len(seen) == 200
    assert set(seen.values()) == {1}
    assert pool.submitted_count == 200
    assert pool.completed_count == 200


def test_running_tasks_never_exceed_max_workers():
    pool = WorkerPool(max_workers=3, max_capacity=10)
    lock = threading.Lock()
    active = [0]
    peak = [0]

    def task():
        with lock:
            active[0] += 1
            peak[0] = max(peak[0], active[0])
        time.sleep(0.01)
        with lock:
            active[0] -= 1

    for _ in range(30):
        pool.submit(task)
    pool.stop_and_wait()

    assert peak[0] <= 3


def test_single_worker_keeps_submission_order():
    pool = WorkerPool(max_workers=1, max_capacity=5)
    order = []

    for i in range(20):
        pool.submit(lambda i=i: order.append(i))
    pool.stop_and_wait()

    assert order == list(range(20))


def test_submit_blocks_when_buffer_is_full():
    pool = WorkerPool(max_workers=1, max_capacity=2)
    started = threading.Event()
    release = threading.Event()

    def blocker():
        started.set()
        release.wait(5)

    pool.submit(blocker)
    assert started.wait(5)

    # two more fit in the buffer behind the running task
    pool.submit(lambda: None)
    pool.submit(lambda: None)

    submitted = threading.Event()

    def producer():
        pool.submit(lambda: None)
        submitted.set()

    thread = threading.Thread(target=producer)
    thread.start()

    assert not submitted.wait(0.2)

    release.set()
    assert submitted.wait(5)
    thread.join(5)

    pool.stop_and_wait()
    assert pool.completed_count == 4


def test_failure_is_raised_by_stop_and_wait():
    pool = WorkerPool(max_workers=2, max_capacity=2)

    def failing():
        raise StoreError("seed", "duplicate key")

    pool.submit(failing)

    with pytest.raises(StoreError) as exc_info:
        pool.stop_and_wait()
    assert exc_info.value.phase == "seed"


def test_queued_tasks_are_skipped_after_a_failure():
    pool = WorkerPool(max_workers=1, max_capacity=5)
    release = threading.Event()
    executed = []

    def failing():
        release.wait(5)
        raise StoreError("seed", "connection refused")

    pool.submit(failing)
    pool.submit(lambda: executed.append("second"))
    pool.submit(lambda: executed.append("third"))
    release.set()

    with pytest.raises(StoreError):
        pool.stop_and_wait()

    assert executed == []
    assert pool.skipped_count == 2


def test_submit_after_failure_raises_the_failure():
    pool = WorkerPool(max_workers=1, max_capacity=1)
    done = threading.Event()

    def failing():
        try:
            raise StoreError("seed", "boom")
        finally:
            done.set()

    pool.submit(failing)
    done.wait(5)

    # the error is recorded right after the task body returns
    deadline = time.time() + 5
    while not pool.has_failed and time.time() < deadline:
        time.sleep(0.01)

    with pytest.raises(StoreError):
        pool.submit(lambda: None)
    with pytest.raises(StoreError):
        pool.stop_and_wait()


def test_submit_after_stop_raises_pool_error():
    pool = WorkerPool(max_workers=1, max_capacity=1)
    pool.stop_and_wait()

    with pytest.raises(PoolError):
        pool.submit(lambda: None)


@pytest.mark.parametrize("workers, capacity", [(0, 1), (-1, 1), (1, -1)])
def test_invalid_sizes(workers, capacity):
    with pytest.raises(ConfigError):
        WorkerPool(workers, capacity)


def test_start_gate_releases_every_waiter_once_opened():
    gate = StartGate()
    released = []
    lock = threading.Lock()

    def waiter(i):
        gate.wait()
        with lock:
            released.append(i)

    threads = [threading.Thread(target=waiter, args=(i,)) for i in range(5)]
    for t in threads:
        t.start()

    time.sleep(0.1)
    assert released == []
    assert not gate.is_open

    gate.open()
    gate.open()
    for t in threads:
        t.join(5)

    assert sorted(released) == [0, 1, 2, 3, 4]
    assert gate.wait(0)
