import pytest

from gcovfmt.constants import HISTOGRAM_SIZE, MODULE_ASM_STMTS, Language
from gcovfmt.records import Bucket, CounterSummary, ModuleInfo, Summary, WorkingSet


def test_bucket_defaults_are_zero():
    bucket = Bucket()
    assert (bucket.num_counters, bucket.min_value, bucket.cum_value) == (0, 0, 0)


def test_counter_summary_histogram_size():
    summary = CounterSummary()
    assert len(summary.histogram) == HISTOGRAM_SIZE
    assert summary.nonzero_buckets() == []


def test_histograms_are_independent():
    first = CounterSummary()
    second = CounterSummary()
    first.histogram[0].num_counters = 4
    assert second.histogram[0].num_counters == 0


def test_wrong_histogram_length_raises():
    with pytest.raises(ValueError):
        CounterSummary(histogram=[Bucket()])


def test_nonzero_buckets_in_order():
    summary = CounterSummary()
    summary.histogram[7] = Bucket(num_counters=2, min_value=10, cum_value=25)
    summary.histogram[3] = Bucket(num_counters=1, min_value=3, cum_value=3)
    found = summary.nonzero_buckets()
    assert [index for index, _ in found] == [3, 7]
    assert found[1][1] == Bucket(num_counters=2, min_value=10, cum_value=25)


def test_summary_defaults():
    summary = Summary()
    assert summary.checksum == 0
    assert summary.ctrs == []
    assert Summary().ctrs is not summary.ctrs or summary.ctrs == []


def test_working_set_fields():
    ws = WorkingSet(num_counters=3, min_counter=9)
    assert ws == WorkingSet(3, 9)


def test_module_info_num_strings():
    info = ModuleInfo(
        num_quote_paths=1,
        num_bracket_paths=2,
        num_system_paths=3,
        num_cpp_defines=4,
        num_cpp_includes=5,
        num_cl_args=6,
    )
    assert info.num_strings() == 1 + 2 + 3 + 4 + 5 + 6


def test_module_info_flags():
    assert ModuleInfo(flags=0x1).is_exported()
    assert not ModuleInfo(flags=0x1).includes_all_aux()
    assert ModuleInfo(flags=0x2).includes_all_aux()
    assert not ModuleInfo(flags=0x2).is_exported()


def test_module_info_language_and_asm():
    info = ModuleInfo(lang=MODULE_ASM_STMTS | Language.CPP)
    assert info.language() == Language.CPP
    assert info.has_asm_stmts()
    plain = ModuleInfo(lang=Language.C)
    assert plain.language() == Language.C
    assert not plain.has_asm_stmts()


def test_module_info_unknown_language_code():
    info = ModuleInfo(lang=0x77)
    assert info.language() == 0x77
    assert not isinstance(info.language(), Language)