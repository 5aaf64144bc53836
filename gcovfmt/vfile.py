"""In-memory output file that grows its buffer by doubling."""

from __future__ import annotations

import io
import os


class VirtualFile:
    """A buffer standing in for a data file.

    Writes append at the current count; the capacity doubles until the
    data fits. Only a rewind of a fresh file is allowed as a seek. Reads
    consume the written bytes from the start, and truncation can only
    shorten what has been written.
    """

    def __init__(self, size: int = 1024, filename: str | None = None) -> None:
        if size <= 0:
            raise ValueError(f"initial size must be positive, got {size}")
        self.filename = filename
        self.size = size
        self.count = 0
        self.closed = False
        self._buf = bytearray(size)
        self._read_pos = 0

    def _describe(self) -> str:
        return self.filename if self.filename is not None else "<virtual>"

    def _require_open(self) -> None:
        if self.closed:
            raise ValueError(f"operation on closed virtual file {self._describe()}")

    def write(self, data: bytes) -> int:
        """Append DATA, growing the buffer as needed; return the bytes written."""
        self._require_open()
        if self.size < self.count:
            raise OSError(
                f"corrupt virtual file {self._describe()}: "
                f"size={self.size} count={self.count}"
            )
        data = bytes(data)
        capacity = self.size
        while capacity - self.count < len(data):
            capacity *= 2
        if capacity != self.size:
            self._buf.extend(bytes(capacity - self.size))
            self.size = capacity
        self._buf[self.count : self.count + len(data)] = data
        self.count += len(data)
        return len(data)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Rewind a freshly opened file; any other move is refused."""
        if offset != 0 or whence != os.SEEK_SET or self.count != 0:
            raise io.UnsupportedOperation(
                "virtual file only supports rewinding before anything is written"
            )
        self._read_pos = 0
        return 0

    def tell(self) -> int:
        """Return the number of bytes written so far."""
        return self.count

    def read(self, size: int = -1) -> bytes:
        """Return up to SIZE of the written bytes not yet read (all if negative)."""
        self._require_open()
        end = self.count if size is None or size < 0 else min(self.count, self._read_pos + size)
        data = bytes(self._buf[self._read_pos : end])
        self._read_pos = max(self._read_pos, end)
        return data

    def truncate(self, size: int | None = None) -> int:
        """Cut the written data down to SIZE bytes; return the new length."""
        self._require_open()
        if size is None:
            size = self.count
        if size < 0 or size > self.count:
            raise ValueError(
                f"cannot truncate virtual file {self._describe()} "
                f"of {self.count} bytes to {size}"
            )
        self._buf[size : self.count] = bytes(self.count - size)
        self.count = size
        self._read_pos = min(self._read_pos, size)
        return size

    def getvalue(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._buf[: self.count])

    def close(self) -> None:
        """Mark the file closed; its contents stay available."""
        self.closed = True

    def __enter__(self) -> VirtualFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()