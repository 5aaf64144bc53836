"""Structured records carried in gcov data files."""

from __future__ import annotations

from dataclasses import dataclass, field

from gcovfmt.constants import (
    HISTOGRAM_SIZE,
    MODULE_ASM_STMTS,
    MODULE_EXPORTED,
    MODULE_INCLUDE_ALL_AUX,
    MODULE_LANG_MASK,
    Language,
)


@dataclass
class Bucket:
    """One bucket of the log2 histogram of counter values."""

    num_counters: int = 0
    min_value: int = 0
    cum_value: int = 0


def _empty_histogram() -> list[Bucket]:
    return [Bucket() for _ in range(HISTOGRAM_SIZE)]


@dataclass
class CounterSummary:
    """Accumulated statistics for one kind of counter."""

    num: int = 0
    runs: int = 0
    sum_all: int = 0
    run_max: int = 0
    sum_max: int = 0
    histogram: list[Bucket] = field(default_factory=_empty_histogram)

    def __post_init__(self) -> None:
        if len(self.histogram) != HISTOGRAM_SIZE:
            raise ValueError(
                f"histogram must have {HISTOGRAM_SIZE} buckets, got {len(self.histogram)}"
            )

    def nonzero_buckets(self) -> list[tuple[int, Bucket]]:
        """Return (index, bucket) for every bucket that holds counters, in index order."""
        return [
            (index, bucket)
            for index, bucket in enumerate(self.histogram)
            if bucket.num_counters > 0
        ]


@dataclass
class Summary:
    """Object or program summary: a checksum and one summary per summable counter kind."""

    checksum: int = 0
    ctrs: list[CounterSummary] = field(default_factory=list)


@dataclass
class WorkingSet:
    """Size of the working set covering a share of the total execution count."""

    num_counters: int = 0
    min_counter: int = 0


@dataclass
class ModuleInfo:
    """Source module description stored in a module-info record."""

    ident: int = 0
    is_primary: int = 0
    flags: int = 0
    lang: int = 0
    ggc_memory: int = 0
    da_filename: str = ""
    source_filename: str = ""
    num_quote_paths: int = 0
    num_bracket_paths: int = 0
    num_system_paths: int = 0
    num_cpp_defines: int = 0
    num_cpp_includes: int = 0
    num_cl_args: int = 0
    strings: list[str] = field(default_factory=list)

    def num_strings(self) -> int:
        """Total number of path, define, include and argument strings."""
        return (
            self.num_quote_paths
            + self.num_bracket_paths
            + self.num_system_paths
            + self.num_cpp_defines
            + self.num_cpp_includes
            + self.num_cl_args
        )

    def is_exported(self) -> bool:
        """Whether the module is marked as exported."""
        return bool(self.flags & MODULE_EXPORTED)

    def includes_all_aux(self) -> bool:
        """Whether all auxiliary modules must be included when compiling."""
        return bool(self.flags & MODULE_INCLUDE_ALL_AUX)

    def language(self) -> Language | int:
        """The source language, as a Language member when the code is known."""
        code = self.lang & MODULE_LANG_MASK
        try:
            return Language(code)
        except ValueError:
            return code

    def has_asm_stmts(self) -> bool:
        """Whether the source contains assembler statements."""
        return bool(self.lang & MODULE_ASM_STMTS)