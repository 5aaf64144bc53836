import copy

import pytest

from gcovfmt.constants import HISTOGRAM_SIZE, NUM_WORKING_SETS
from gcovfmt.histogram import compute_working_sets, histo_index, merge_histograms
from gcovfmt.records import Bucket, CounterSummary


def _histogram(*entries):
    """Build a histogram from (value, count) pairs of equal-valued counters."""
    buckets = [Bucket() for _ in range(HISTOGRAM_SIZE)]
    for value, count in entries:
        bucket = buckets[histo_index(value)]
        bucket.num_counters += count
        bucket.cum_value += value * count
        if not bucket.min_value or value < bucket.min_value:
            bucket.min_value = value
    return buckets


def _total(histogram, attr):
    return sum(getattr(bucket, attr) for bucket in histogram)


@pytest.mark.parametrize("value", [0, 1, 2, 3])
def test_small_values_index_themselves(value):
    assert histo_index(value) == value


def test_largest_value_lands_in_last_bucket():
    assert histo_index((1 << 64) - 1) == HISTOGRAM_SIZE - 1
    assert histo_index(-1) == HISTOGRAM_SIZE - 1


def test_index_is_monotonic_and_in_range():
    indices = [histo_index(v) for v in range(5000)]
    assert indices == sorted(indices)
    assert all(0 <= ix < HISTOGRAM_SIZE for ix in indices)


def test_each_power_of_two_range_spans_four_buckets():
    for shift in range(2, 63):
        low = histo_index(1 << shift)
        high = histo_index((1 << (shift + 1)) - 1)
        assert high - low == 3
        assert histo_index(1 << (shift + 1)) == high + 1


def test_merge_single_counter_each():
    target = _histogram((10, 1))
    source = _histogram((10, 1))
    merged = merge_histograms(target, source)
    assert merged[histo_index(20)] == Bucket(num_counters=1, min_value=20, cum_value=20)
    assert _total(merged, "num_counters") == 1


def test_merge_does_not_modify_inputs():
    target = _histogram((100, 3), (5, 2))
    source = _histogram((50, 4))
    target_copy = copy.deepcopy(target)
    source_copy = copy.deepcopy(source)
    merge_histograms(target, source)
    assert target == target_copy
    assert source == source_copy


@pytest.mark.parametrize(
    "target_entries, source_entries",
    [
        (((100, 3), (5, 2)), ((50, 4),)),
        (((100, 3),), ((50, 4), (7, 6), (1, 2))),
        (((1000, 1), (300, 7), (20, 9)), ((900, 2), (2, 30))),
        (((8, 8),), ((8, 8),)),
    ],
)
def test_merge_preserves_totals(target_entries, source_entries):
    target = _histogram(*target_entries)
    source = _histogram(*source_entries)
    merged = merge_histograms(target, source)
    assert len(merged) == HISTOGRAM_SIZE
    assert _total(merged, "cum_value") == _total(target, "cum_value") + _total(
        source, "cum_value"
    )
    assert _total(merged, "num_counters") == _total(target, "num_counters")


def test_merge_into_empty_target_raises():
    with pytest.raises(ValueError):
        merge_histograms(_histogram(), _histogram((10, 1)))


def test_merge_rejects_wrong_size():
    with pytest.raises(ValueError):
        merge_histograms([Bucket()], _histogram((10, 1)))


def test_working_sets_single_counter():
    summary = CounterSummary(num=1, runs=1, sum_all=1000, run_max=1000, sum_max=1000,
                             histogram=_histogram((1000, 1)))
    sets = compute_working_sets(summary)
    assert len(sets) == NUM_WORKING_SETS
    assert all(ws.num_counters == 1 and ws.min_counter == 1000 for ws in sets)


def test_working_sets_are_monotonic():
    histogram = _histogram((100, 10), (4, 5))
    summary = CounterSummary(num=15, runs=1, sum_all=_total(histogram, "cum_value"),
                             histogram=histogram)
    sets = compute_working_sets(summary)
    assert len(sets) == NUM_WORKING_SETS
    counts = [ws.num_counters for ws in sets]
    assert counts == sorted(counts)
    assert counts[-1] <= 15
    assert {ws.min_counter for ws in sets} <= {100, 4}
    assert sets[0].min_counter == 100


def test_working_sets_of_empty_histogram_raise():
    with pytest.raises(ValueError):
        compute_working_sets(CounterSummary())