import math

import pytest

from src.benchmark.percentile import calculate_average, calculate_percentile, summarize


def nearest_rank(values, p):
    index = math.ceil(len(values) * p / 100)
    index = min(max(index, 1), len(values))
    return values[index - 1]


@pytest.mark.parametrize("p", [0, 50, 90, 99, 100])
def test_empty_sequence_is_nan(p):
    assert math.isnan(calculate_percentile([], p))


def test_average_of_empty_sequence_is_nan():
    assert math.isnan(calculate_average([]))


def test_known_ranks_on_ten_values():
    values = [float(v) for v in range(1, 11)]

    assert calculate_percentile(values, 0) == 1.0
    assert calculate_percentile(values, 50) == 5.0
    assert calculate_percentile(values, 90) == 9.0
    assert calculate_percentile(values, 99) == 10.0
    assert calculate_percentile(values, 100) == 10.0


def test_rank_rounds_up_without_interpolation():
    values = [1.0, 2.0, 3.0]

    # ceil(1.5) == 2
    assert calculate_percentile(values, 50) == 2.0
    # ceil(0.03) == 1
    assert calculate_percentile(values, 1) == 1.0


@pytest.mark.parametrize("values", [
    [4.2],
    [0.5, 0.5, 0.7],
    [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0],
    sorted(float((i * 37) % 101) for i in range(250)),
])
@pytest.mark.parametrize("p", [0, 50, 90, 100])
def test_matches_nearest_rank_definition(values, p):
    assert calculate_percentile(values, p) == nearest_rank(values, p)


def test_extremes_are_min_and_max():
    values = sorted([9.1, 0.3, 5.5, 2.2, 7.7])

    assert calculate_percentile(values, 0) == values[0]
    assert calculate_percentile(values, 100) == max(values)


def test_average():
    assert calculate_average([1.0, 2.0, 3.0, 6.0]) == pytest.approx(3.0)


def test_summarize():
    summary = summarize([float(v) for v in range(1, 101)])

    assert summary.avg == pytest.approx(50.5)
    assert summary.p50 == 50.0
    assert summary.p90 == 90.0
    assert summary.p99 == 99.0


def test_summarize_empty():
    summary = summarize([])

    assert all(math.isnan(v) for v in (summary.avg, summary.p50, summary.p90, summary.p99))
