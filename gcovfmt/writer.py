"""Writing words, counters, strings and structured records to gcov files."""

from __future__ import annotations

import io
import struct
import sys
from typing import BinaryIO

from gcovfmt.constants import (
    HISTOGRAM_BITVECTOR_SIZE,
    WORD_MASK,
    summary_length,
)
from gcovfmt.records import Summary

_WORD = 4
_BLOCK_SIZE = 1 << 10
_COUNTER_MASK = (1 << 64) - 1
_ARCS = 0


def _encode(string: str) -> bytes:
    return string.encode("utf-8", "surrogateescape")


def _string_words(data: bytes) -> int:
    """Words needed for DATA plus its terminating NUL, padded to a word."""
    return (len(data) + _WORD) // _WORD


def compute_string_array_len(strings: list[str]) -> int:
    """Words taken by STRINGS written as a string array, length words included."""
    return sum(_string_words(_encode(string)) + 1 for string in strings)


class GcovWriter:
    """Buffered writer of the 32-bit word stream of a notes or data file.

    Words are kept in memory until a block is full and no record length
    is still outstanding, or until ``flush`` is called. Words are written
    in BYTEORDER, the machine's own by default.
    """

    def __init__(self, stream: BinaryIO | None = None,
                 byteorder: str | None = None) -> None:
        order = byteorder or sys.byteorder
        if order not in ("little", "big"):
            raise ValueError(f"byteorder must be 'little' or 'big', got {order!r}")
        self.stream: BinaryIO = stream if stream is not None else io.BytesIO()
        self._prefix = "<" if order == "little" else ">"
        self._buffer: list[int] = []
        self._pending: set[int] = set()
        try:
            start = self.stream.tell()
        except (OSError, AttributeError, io.UnsupportedOperation):
            start = 0
        self._start = start // _WORD

    def _pack(self, words: list[int]) -> bytes:
        return struct.pack(f"{self._prefix}{len(words)}I", *words)

    def _unpack(self, data: bytes) -> list[int]:
        return list(struct.unpack(f"{self._prefix}{len(data) // _WORD}I", data))

    def _write_block(self) -> None:
        if not self._buffer:
            return
        data = self._pack(self._buffer)
        written = self.stream.write(data)
        if written is not None and written != len(data):
            raise OSError(f"short write: {written} of {len(data)} bytes")
        self._start += len(self._buffer)
        self._buffer.clear()

    def _append(self, words: list[int]) -> None:
        if len(self._buffer) >= _BLOCK_SIZE and not self._pending:
            self._write_block()
        self._buffer.extend(word & WORD_MASK for word in words)

    def position(self) -> int:
        """Return the current position in words from the start of the file."""
        return self._start + len(self._buffer)

    def write_unsigned(self, value: int) -> None:
        """Write one unsigned 32-bit word."""
        self._append([value])

    def write_counter(self, value: int) -> None:
        """Write a 64-bit counter, low word first."""
        unsigned = value & _COUNTER_MASK
        self._append([unsigned & WORD_MASK, unsigned >> 32])

    def write_string(self, string: str | None) -> None:
        """Write a length-prefixed, NUL-padded string; None is written as length zero."""
        if string is None:
            self._append([0])
            return
        data = _encode(string)
        alloc = _string_words(data)
        self._append([alloc, *self._unpack(data.ljust(alloc * _WORD, b"\0"))])

    def write_string_array(self, strings: list[str]) -> None:
        """Write each of STRINGS as a word count followed by its padded bytes."""
        for string in strings:
            data = _encode(string)
            words = _string_words(data)
            self._append([words, *self._unpack(data.ljust(words * _WORD, b"\0"))])

    def write_tag(self, tag: int) -> int:
        """Write TAG with a placeholder length; return the position for ``write_length``."""
        position = self.position()
        self._append([tag, 0])
        self._pending.add(position)
        return position

    def write_length(self, position: int) -> None:
        """Fill in the length of the record whose tag was written at POSITION."""
        if position < self._start:
            raise ValueError(
                f"record at word {position} has already been written out"
            )
        if position + 2 > self.position():
            raise ValueError(f"no record header at word {position}")
        offset = position - self._start
        self._buffer[offset + 1] = len(self._buffer) - offset - 2
        self._pending.discard(position)
        if len(self._buffer) >= _BLOCK_SIZE and not self._pending:
            self._write_block()

    def write_tag_length(self, tag: int, length: int) -> None:
        """Write a record header with a known LENGTH."""
        self._append([tag, length])

    def write_summary(self, tag: int, summary: Summary) -> None:
        """Write SUMMARY as a record under TAG.

        The histogram is written for the arc counters only; other counter
        kinds get empty bit vectors.
        """
        if not summary.ctrs:
            raise ValueError("summary holds no counter summaries")
        filled = summary.ctrs[_ARCS].nonzero_buckets()
        bitvector = [0] * HISTOGRAM_BITVECTOR_SIZE
        for index, _ in filled:
            bitvector[index // 32] |= 1 << (index % 32)

        self.write_tag_length(tag, summary_length(len(filled), len(summary.ctrs)))
        self.write_unsigned(summary.checksum)
        for kind, ctr in enumerate(summary.ctrs):
            self.write_unsigned(ctr.num)
            self.write_unsigned(ctr.runs)
            self.write_counter(ctr.sum_all)
            self.write_counter(ctr.run_max)
            self.write_counter(ctr.sum_max)
            if kind != _ARCS:
                for _ in range(HISTOGRAM_BITVECTOR_SIZE):
                    self.write_unsigned(0)
                continue
            for word in bitvector:
                self.write_unsigned(word)
            for _, bucket in filled:
                self.write_unsigned(bucket.num_counters)
                self.write_counter(bucket.min_value)
                self.write_counter(bucket.cum_value)

    def flush(self) -> None:
        """Write out every buffered word and flush the stream."""
        self._write_block()
        self._pending.clear()
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()

    def seek(self, position: int) -> None:
        """Write out buffered words and move to word POSITION."""
        if position < 0:
            raise ValueError(f"cannot move to negative word position {position}")
        self._write_block()
        self._pending.clear()
        self.stream.seek(position * _WORD)
        self._start = self.stream.tell() // _WORD

    def truncate(self) -> None:
        """Write out buffered words and cut the file off at the current position."""
        self._write_block()
        self._pending.clear()
        self.stream.truncate(self.stream.tell())