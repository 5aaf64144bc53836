"""Log2 histograms of counter values: bucketing, merging and working sets."""

from __future__ import annotations

from gcovfmt.constants import HISTOGRAM_SIZE, NUM_WORKING_SETS
from gcovfmt.records import Bucket, CounterSummary, WorkingSet

_COUNTER_MASK = (1 << 64) - 1


def histo_index(value: int) -> int:
    """Return the histogram bucket for a counter VALUE.

    Buckets follow a log2 scale in which every power-of-two range is
    split into four linear sub-buckets; values 0 to 3 map to themselves.
    """
    unsigned = value & _COUNTER_MASK
    top_bit = unsigned.bit_length() - 1 if unsigned > 0 else 0
    if top_bit < 2:
        return unsigned
    next_two_bits = (unsigned >> (top_bit - 2)) & 0x3
    return (top_bit - 1) * 4 + next_two_bits


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def _accumulate(bucket: Bucket, num_counters: int, cum_value: int, min_value: int) -> None:
    bucket.num_counters += num_counters
    bucket.cum_value += cum_value
    if not bucket.min_value or min_value < bucket.min_value:
        bucket.min_value = min_value


def _check_size(histogram: list[Bucket], name: str) -> None:
    if len(histogram) != HISTOGRAM_SIZE:
        raise ValueError(
            f"{name} histogram must have {HISTOGRAM_SIZE} buckets, got {len(histogram)}"
        )


def merge_histograms(target: list[Bucket], source: list[Bucket]) -> list[Bucket]:
    """Merge SOURCE into TARGET and return the merged histogram.

    Counters are assumed to be in the same relative order in both
    histograms and are paired from the hottest down. Each counter gets
    an equal share of its bucket's cumulative value. The inputs are not
    modified.
    """
    _check_size(target, "target")
    _check_size(source, "source")

    merged = [Bucket() for _ in range(HISTOGRAM_SIZE)]
    src_num = 0
    src_cum = 0
    src_i = HISTOGRAM_SIZE - 1
    tmp_i = 0
    src_done = False

    tgt_i = HISTOGRAM_SIZE - 1
    while tgt_i >= 0 and not src_done:
        tgt_num = target[tgt_i].num_counters
        tgt_cum = target[tgt_i].cum_value
        while tgt_num > 0 and not src_done:
            if not src_num:
                while src_i >= 0 and not source[src_i].num_counters:
                    src_i -= 1
                if src_i < 0:
                    # The source ran out: carry the rest of the target over.
                    _accumulate(merged[tgt_i], tgt_num, tgt_cum, target[tgt_i].min_value)
                    for rest in reversed(range(tgt_i)):
                        bucket = target[rest]
                        _accumulate(
                            merged[rest], bucket.num_counters, bucket.cum_value, bucket.min_value
                        )
                    src_done = True
                    break
                src_num = source[src_i].num_counters
                src_cum = source[src_i].cum_value

            merge_num = min(tgt_num, src_num)
            merge_min = target[tgt_i].min_value + source[src_i].min_value

            merge_src_cum = src_cum
            if merge_num < src_num:
                merge_src_cum = _trunc_div(merge_num * src_cum, src_num)
            merge_tgt_cum = tgt_cum
            if merge_num < tgt_num:
                merge_tgt_cum = _trunc_div(merge_num * tgt_cum, tgt_num)

            src_cum -= merge_src_cum
            tgt_cum -= merge_tgt_cum
            src_num -= merge_num
            tgt_num -= merge_num

            tmp_i = histo_index(merge_min)
            if tmp_i >= HISTOGRAM_SIZE:
                raise ValueError(f"merged minimum {merge_min} falls outside the histogram")
            _accumulate(merged[tmp_i], merge_num, merge_src_cum + merge_tgt_cum, merge_min)

            if not src_num:
                src_i -= 1
        tgt_i -= 1

    # Unmerged source counts go to the last bucket filled so that the
    # histogram total still matches the summed counters.
    if src_num:
        src_i -= 1
    while src_i >= 0:
        src_cum += source[src_i].cum_value
        src_i -= 1

    if merged[tmp_i].num_counters <= 0:
        raise ValueError("cannot merge histograms: target holds no counters to merge into")
    merged[tmp_i].cum_value += src_cum
    return merged


def compute_working_sets(summary: CounterSummary) -> list[WorkingSet]:
    """Compute working-set statistics from a counter summary's histogram.

    Entry i covers (i + 1) / NUM_WORKING_SETS of the total count, except
    the last, which covers about 99.9% of it.
    """
    _check_size(summary.histogram, "summary")
    increment = _trunc_div(summary.sum_all, NUM_WORKING_SETS)
    targets = [increment * (ix + 1) for ix in range(NUM_WORKING_SETS)]
    targets[-1] = summary.sum_all - _trunc_div(summary.sum_all, 1024)

    working_sets: list[WorkingSet] = []
    cum = 0
    count = 0
    for bucket in reversed(summary.histogram):
        if len(working_sets) >= NUM_WORKING_SETS:
            break
        if cum + bucket.cum_value < targets[len(working_sets)]:
            cum += bucket.cum_value
            count += bucket.num_counters
            continue

        tmp_cum = cum
        for c_num in range(bucket.num_counters):
            if len(working_sets) >= NUM_WORKING_SETS:
                break
            count += 1
            if c_num + 1 < bucket.num_counters:
                tmp_cum += bucket.min_value
            else:
                tmp_cum = cum + bucket.cum_value
            while (
                len(working_sets) < NUM_WORKING_SETS
                and tmp_cum >= targets[len(working_sets)]
            ):
                working_sets.append(WorkingSet(count, bucket.min_value))
        cum += bucket.cum_value

    if len(working_sets) != NUM_WORKING_SETS:
        raise ValueError(
            f"histogram covers only {len(working_sets)} of {NUM_WORKING_SETS} working sets"
        )
    return working_sets