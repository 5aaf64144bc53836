"""Opening gcov notes and data files for reading, writing or update."""

from __future__ import annotations

import os
from enum import IntEnum
from typing import BinaryIO

from gcovfmt.reader import GcovReader
from gcovfmt.writer import GcovWriter

try:
    import fcntl
except ImportError:  # pragma: no cover - platforms without POSIX locks
    fcntl = None  # type: ignore[assignment]


class OpenMode(IntEnum):
    """How a gcov file is opened.

    READ opens an existing file read-only. WRITE creates the file anew,
    discarding any old contents. UPDATE opens an existing file for
    modification, creating an empty one when it is missing; it starts in
    the reading state and switches to writing through ``rewrite``.
    """

    WRITE = -1
    UPDATE = 0
    READ = 1


class GcovFile:
    """An open gcov file with one reader or writer bound to it at a time."""

    def __init__(self, path: str | os.PathLike[str], mode: OpenMode | int = OpenMode.UPDATE,
                 byteorder: str | None = None) -> None:
        self.path = os.fspath(path)
        self.mode = OpenMode(mode)
        self.byteorder = byteorder
        self.created = False
        self._stream: BinaryIO | None = self._open()
        self._writing = self.mode is OpenMode.WRITE
        self._reader: GcovReader | None = None
        self._writer: GcovWriter | None = None
        self._lock()

    def _open(self) -> BinaryIO:
        if self.mode is OpenMode.READ:
            return open(self.path, "rb")
        if self.mode is OpenMode.UPDATE:
            try:
                return open(self.path, "r+b")
            except FileNotFoundError:
                pass
        self.created = True
        return open(self.path, "w+b")

    def _lock(self) -> None:
        if fcntl is None or self._stream is None:
            return
        kind = fcntl.LOCK_SH if self.mode is OpenMode.READ else fcntl.LOCK_EX
        try:
            fcntl.lockf(self._stream.fileno(), kind)
        except OSError:
            self._stream.close()
            self._stream = None
            raise

    def _require_open(self) -> BinaryIO:
        if self._stream is None:
            raise ValueError(f"gcov file {self.path} is closed")
        return self._stream

    @property
    def closed(self) -> bool:
        """Whether the file has been closed."""
        return self._stream is None

    @property
    def writing(self) -> bool:
        """Whether the file is in the writing state."""
        return self._writing

    def reader(self) -> GcovReader:
        """Return the reader of this file; the file must be in the reading state."""
        stream = self._require_open()
        if self._writing:
            raise ValueError(f"gcov file {self.path} is open for writing")
        if self._reader is None:
            self._reader = GcovReader(stream, self.byteorder)
        return self._reader

    def writer(self) -> GcovWriter:
        """Return the writer of this file; the file must be in the writing state."""
        stream = self._require_open()
        if not self._writing:
            raise ValueError(
                f"gcov file {self.path} is open for reading; call rewrite() first"
            )
        if self._writer is None:
            self._writer = GcovWriter(stream, self.byteorder)
        return self._writer

    def rewrite(self) -> GcovWriter:
        """Switch from reading to writing at the start of the file; return the writer."""
        stream = self._require_open()
        if self._writing:
            raise ValueError(f"gcov file {self.path} is already open for writing")
        if self.mode is OpenMode.READ:
            raise ValueError(f"gcov file {self.path} was opened read-only")
        self._writing = True
        self._reader = None
        stream.seek(0, os.SEEK_SET)
        self._writer = GcovWriter(stream, self.byteorder)
        return self._writer

    def mtime(self) -> float:
        """Return the modification time of the open file."""
        stream = self._require_open()
        return os.fstat(stream.fileno()).st_mtime

    def close(self) -> None:
        """Write out buffered words and close the file; closing twice is harmless."""
        stream = self._stream
        if stream is None:
            return
        try:
            if self._writing and self._writer is not None:
                self._writer.flush()
        finally:
            self._stream = None
            self._reader = None
            self._writer = None
            stream.close()

    def __enter__(self) -> GcovFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_gcov(path: str | os.PathLike[str], mode: OpenMode | int = OpenMode.UPDATE) -> GcovFile:
    """Open the gcov file at PATH in MODE, in the host's byte order."""
    return GcovFile(path, mode)