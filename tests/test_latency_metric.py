import math
import threading

import pytest

from src.benchmark.latency_metric import LatencyAccumulator, OperationKind, SampleCollector


def test_record_updates_count_sum_and_max():
    acc = LatencyAccumulator()
    for d in (3.0, 1.5, 7.25, 2.0):
        acc.record(d)

    snap = acc.snapshot()
    assert snap.count == 4
    assert snap.cumulative_latency == pytest.approx(13.75)
    assert snap.max_latency == 7.25
    assert snap.average == pytest.approx(13.75 / 4)


def test_empty_average_is_nan():
    assert math.isnan(LatencyAccumulator().snapshot().average)


def test_snapshot_and_reset_returns_previous_state():
    acc = LatencyAccumulator()
    acc.record(4.0)
    acc.record(6.0)

    snap = acc.snapshot_and_reset()

    assert (snap.count, snap.cumulative_latency, snap.max_latency) == (2, 10.0, 6.0)
    after = acc.snapshot()
    assert (after.count, after.cumulative_latency, after.max_latency) == (0, 0.0, 0.0)


def test_concurrent_records_are_not_lost():
    acc = LatencyAccumulator(OperationKind.WRITE)
    per_thread = 2000
    thread_count = 8

    def worker(offset):
        for i in range(per_thread):
            acc.record(float((i + offset) % 97) / 10)

    threads = [threading.Thread(target=worker, args=(t,)) for t in range(thread_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    expected = [float((i + t) % 97) / 10 for t in range(thread_count) for i in range(per_thread)]
    snap = acc.snapshot()
    assert snap.count == per_thread * thread_count
    assert snap.cumulative_latency == pytest.approx(sum(expected))
    assert snap.max_latency == max(expected)


def test_sample_collector_merges_worker_lists():
    collector = SampleCollector(OperationKind.READ)

    def worker(base):
        collector.extend([base + 0.3, base + 0.1, base + 0.2], [base])

    threads = [threading.Thread(target=worker, args=(float(b),)) for b in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    durations = collector.sorted_durations()
    assert len(collector) == 15
    assert durations == sorted(durations)
    assert collector.sorted_analysis() == [0.0, 1.0, 2.0, 3.0, 4.0]
