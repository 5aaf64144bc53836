"""Reading words, counters, strings and structured records from gcov files."""

from __future__ import annotations

import io
import sys
from typing import BinaryIO

from gcovfmt.constants import HISTOGRAM_BITVECTOR_SIZE, HISTOGRAM_SIZE, swap_endian
from gcovfmt.records import Bucket, CounterSummary, ModuleInfo, Summary

_WORD = 4
_SIGN_BIT = 1 << 63
_COUNTER_RANGE = 1 << 64


class GcovFormatError(ValueError):
    """Raised when a gcov file is truncated or a record is malformed."""


def _decode(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", "surrogateescape")


class GcovReader:
    """Sequential reader of the 32-bit word stream of a notes or data file.

    SOURCE is a binary stream or a bytes-like object. Words are read in
    BYTEORDER (the machine's own by default) until ``check_magic`` finds
    that the file was written with the other byte order.
    """

    def __init__(self, source: BinaryIO | bytes | bytearray | memoryview,
                 byteorder: str | None = None) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        order = byteorder or sys.byteorder
        if order not in ("little", "big"):
            raise ValueError(f"byteorder must be 'little' or 'big', got {order!r}")
        self._stream = source
        self._order = order
        self.swapped = False
        self.overread = 0
        try:
            start = source.tell()
        except (OSError, AttributeError):
            start = 0
        self._pos = start // _WORD

    @property
    def _word_order(self) -> str:
        if not self.swapped:
            return self._order
        return "big" if self._order == "little" else "little"

    def _read_words(self, count: int) -> bytes:
        if count <= 0:
            return b""
        data = self._stream.read(count * _WORD)
        whole = len(data) // _WORD
        self._pos += whole
        if whole < count:
            self.overread += count - whole
            raise GcovFormatError(
                f"unexpected end of file: wanted {count} words, got {whole}"
            )
        return data

    def check_magic(self, expected: int) -> int:
        """Read the magic word and compare it with EXPECTED.

        Returns 1 when it matches in the reader's byte order, -1 when it
        matches byte-swapped (later words are then swapped too) and 0
        when it does not match at all.
        """
        value = int.from_bytes(self._read_words(1), self._order)
        if value == expected:
            self.swapped = False
            return 1
        if swap_endian(value) == expected:
            self.swapped = True
            return -1
        return 0

    def position(self) -> int:
        """Return the current position in words from the start of the file."""
        return self._pos

    def read_unsigned(self) -> int:
        """Read one unsigned 32-bit word."""
        return int.from_bytes(self._read_words(1), self._word_order)

    def read_counter(self) -> int:
        """Read a signed 64-bit counter stored low word first."""
        data = self._read_words(2)
        low = int.from_bytes(data[:_WORD], self._word_order)
        high = int.from_bytes(data[_WORD:], self._word_order)
        value = low | (high << 32)
        if value & _SIGN_BIT:
            value -= _COUNTER_RANGE
        return value

    def read_string(self) -> str | None:
        """Read a length-prefixed string; a zero length yields None."""
        length = self.read_unsigned()
        if not length:
            return None
        return _decode(self._read_words(length))

    def read_summary(self, summable: int = 1) -> Summary:
        """Read a summary record body holding SUMMABLE counter summaries."""
        summary = Summary(checksum=self.read_unsigned())
        for _ in range(summable):
            ctr = CounterSummary(
                num=self.read_unsigned(),
                runs=self.read_unsigned(),
                sum_all=self.read_counter(),
                run_max=self.read_counter(),
                sum_max=self.read_counter(),
            )
            bitvectors = [self.read_unsigned() for _ in range(HISTOGRAM_BITVECTOR_SIZE)]
            indices = [
                word_ix * 32 + bit
                for word_ix, word in enumerate(bitvectors)
                for bit in range(32)
                if word >> bit & 1
            ]
            for index in indices:
                if index >= HISTOGRAM_SIZE:
                    raise GcovFormatError(
                        f"histogram bucket {index} lies outside the {HISTOGRAM_SIZE} buckets"
                    )
                ctr.histogram[index] = Bucket(
                    num_counters=self.read_unsigned(),
                    min_value=self.read_counter(),
                    cum_value=self.read_counter(),
                )
            summary.ctrs.append(ctr)
        return summary

    def read_comdat_zero_fixup(self, length: int) -> list[bool]:
        """Read a zero-fixup record of LENGTH words; return one flag per function."""
        num = self.read_unsigned()
        if (num + 31) // 32 + 1 != length:
            raise GcovFormatError(
                f"zero-fixup record of {length} words cannot flag {num} functions"
            )
        flags = [False] * num
        for word_ix in range(length - 1):
            bitvector = self.read_unsigned()
            for bit in range(32):
                if bitvector >> bit & 1:
                    index = word_ix * 32 + bit
                    if index >= num:
                        raise GcovFormatError(
                            f"zero-fixup flag {index} set for only {num} functions"
                        )
                    flags[index] = True
        return flags

    def read_string_array(self, count: int) -> tuple[list[str], int]:
        """Read COUNT length-prefixed strings; return them and the words consumed."""
        strings: list[str] = []
        words = 0
        for _ in range(count):
            string_len = self.read_unsigned()
            strings.append(_decode(self._read_words(string_len)))
            words += string_len + 1
        return strings, words

    def read_build_info(self, length: int) -> list[str]:
        """Read a build-info record body of LENGTH words."""
        num = self.read_unsigned()
        strings, words = self.read_string_array(num)
        if words != length - 1:
            raise GcovFormatError(
                f"build-info strings take {words} words, record declares {length - 1}"
            )
        return strings

    def read_module_info(self, length: int) -> ModuleInfo:
        """Read a module-info record body of LENGTH words."""
        info = ModuleInfo(
            ident=self.read_unsigned(),
            is_primary=self.read_unsigned(),
            flags=self.read_unsigned(),
            lang=self.read_unsigned(),
            ggc_memory=self.read_unsigned(),
            num_quote_paths=self.read_unsigned(),
            num_bracket_paths=self.read_unsigned(),
            num_system_paths=self.read_unsigned(),
            num_cpp_defines=self.read_unsigned(),
            num_cpp_includes=self.read_unsigned(),
            num_cl_args=self.read_unsigned(),
        )
        remaining = length - 11

        filename_len = self.read_unsigned()
        info.da_filename = _decode(self._read_words(filename_len))
        remaining -= filename_len + 1

        src_len = self.read_unsigned()
        info.source_filename = _decode(self._read_words(src_len))
        remaining -= src_len + 1

        info.strings, words = self.read_string_array(info.num_strings())
        remaining -= words
        if remaining:
            raise GcovFormatError(
                f"module-info record declares {length} words but holds {length - remaining}"
            )
        return info

    def sync(self, base: int, length: int) -> None:
        """Move to the end of a record of LENGTH words that starts at word BASE."""
        target = base + length
        if target < 0:
            raise GcovFormatError(f"cannot move to negative word position {target}")
        self._stream.seek(target * _WORD)
        self._pos = self._stream.tell() // _WORD