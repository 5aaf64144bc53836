"""Constants and tag arithmetic of the gcov notes and data file format."""

from __future__ import annotations

from enum import IntEnum

WORD_MASK = 0xFFFFFFFF

DATA_SUFFIX = ".gcda"
NOTE_SUFFIX = ".gcno"

DATA_MAGIC = 0x67636461  # "gcda"
NOTE_MAGIC = 0x67636E6F  # "gcno"

VERSION = 0x3430392A  # "409*"

FUNCTION_LENGTH = 3

HISTOGRAM_SIZE = 252
HISTOGRAM_BITVECTOR_SIZE = (HISTOGRAM_SIZE + 31) // 32
NUM_WORKING_SETS = 128

ICALL_TOPN_VAL = 2
ICALL_TOPN_NCOUNTS = 9

BLOCK_UNEXPECTED = 1 << 1

ARC_ON_TREE = 1 << 0
ARC_FAKE = 1 << 1
ARC_FALLTHROUGH = 1 << 2

MODULE_ASM_STMTS = 1 << 16
MODULE_LANG_MASK = 0xFFFF

MODULE_EXPORTED = 0x1
MODULE_INCLUDE_ALL_AUX = 0x2


class Tag(IntEnum):
    """Record tags found in notes and data files."""

    FUNCTION = 0x01000000
    BLOCKS = 0x01410000
    ARCS = 0x01430000
    LINES = 0x01450000
    COUNTER_BASE = 0x01A10000
    OBJECT_SUMMARY = 0xA1000000
    PROGRAM_SUMMARY = 0xA3000000
    BUILD_INFO = 0xA7000000
    COMDAT_ZERO_FIXUP = 0xA9000000
    AFDO_FILE_NAMES = 0xAA000000
    MODULE_INFO = 0xAB000000
    AFDO_FUNCTION = 0xAC000000
    AFDO_MODULE_GROUPING = 0xAE000000
    AFDO_WORKING_SET = 0xAF000000


class Language(IntEnum):
    """Source language codes stored in the low half of a module's lang word."""

    UNKNOWN = 0
    C = 1
    CPP = 2
    FORTRAN = 3


def unsigned_to_string(value: int) -> str:
    """Render a magic or version word as its four characters, high byte first."""
    return (value & WORD_MASK).to_bytes(4, "big").decode("latin-1")


def swap_endian(value: int) -> int:
    """Reverse the byte order of a 32-bit word."""
    return int.from_bytes((value & WORD_MASK).to_bytes(4, "little"), "big")


def tag_for_counter(counter: int) -> int:
    """Return the record tag holding counters of kind COUNTER."""
    return (Tag.COUNTER_BASE + (counter << 17)) & WORD_MASK


def counter_for_tag(tag: int) -> int:
    """Return the counter kind stored under a counter record TAG."""
    return ((tag - Tag.COUNTER_BASE) & WORD_MASK) >> 17


def tag_is_counter(tag: int, n_counters: int) -> bool:
    """Whether TAG names one of N_COUNTERS counter records."""
    return not (tag & 0xFFFF) and counter_for_tag(tag) < n_counters


def tag_mask(tag: int) -> int:
    """Mask with ones on the inner levels and the low bit of TAG's level."""
    return ((tag - 1) ^ tag) & WORD_MASK


def tag_is_subtag(tag: int, sub: int) -> bool:
    """Whether SUB is an immediate subtag of TAG."""
    mask = tag_mask(tag)
    return (mask >> 8) == tag_mask(sub) and not ((sub ^ tag) & ~mask & WORD_MASK)


def tag_is_sublevel(tag: int, sub: int) -> bool:
    """Whether SUB lies at some level below TAG."""
    return tag_mask(tag) > tag_mask(sub)


def arcs_length(num: int) -> int:
    """Record length in words of an arcs record with NUM arcs."""
    return 1 + num * 2


def arcs_num(length: int) -> int:
    """Number of arcs in an arcs record of LENGTH words."""
    return (length - 1) // 2


def counter_length(num: int) -> int:
    """Record length in words of NUM 64-bit counters."""
    return num * 2


def counter_num(length: int) -> int:
    """Number of 64-bit counters in a record of LENGTH words."""
    return length // 2


def comdat_zero_fixup_length(num: int) -> int:
    """Record length of a zero-fixup record flagging NUM functions."""
    return 1 + (num + 31) // 32


def summary_length(num_buckets: int, summable: int) -> int:
    """Record length of a summary with SUMMABLE counter kinds and NUM_BUCKETS filled buckets."""
    return 1 + summable * (10 + 3 * 2) + num_buckets * 5