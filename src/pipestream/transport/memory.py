"""In-memory transport.

Useful for computing frames without any I/O, and for exercising readers and
writers in a single process. Reads never block: once every written byte has
been consumed, :meth:`BufferTransport.read` reports end-of-stream.
"""

from __future__ import annotations

import errno
import threading
from typing import Optional

from ..errors import TransportClosed
from .base import Transport


class BufferTransport(Transport):
    """Transport backed by a single growing byte buffer.

    Writes go straight into the buffer (there is nothing to flush), and
    reads consume it from the front. :meth:`wait_for_drain` blocks until a
    reader, possibly on another thread, has consumed everything written.
    """

    def __init__(self, initial: bytes = b"", name: str = "buffer"):
        self.name = name
        self._data = bytearray(initial)
        self._position = 0
        self._closed = False
        self._condition = threading.Condition()

    def __repr__(self) -> str:
        return f"BufferTransport(name={self.name!r}, written={len(self._data)}, read={self._position})"

    @property
    def is_open(self) -> bool:
        return not self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise TransportClosed(errno.EBADF, f"{self.name} is closed")

    def write(self, data: bytes) -> None:
        with self._condition:
            self._check_open()
            self._data.extend(data)

    def flush(self) -> None:
        self._check_open()

    def read(self, count: int) -> bytes:
        with self._condition:
            self._check_open()

            start = self._position
            chunk = bytes(self._data[start:start + count])
            self._position = start + len(chunk)

            if self._position == len(self._data):
                self._condition.notify_all()

            return chunk

    def wait_for_drain(self, timeout: Optional[float] = None) -> None:
        """Block until every written byte has been read.

        The optional *timeout* exists for tests; the transport contract has
        no timeout, and a :class:`TimeoutError` is raised if it expires.
        """

        with self._condition:
            self._check_open()

            drained = self._condition.wait_for(
                lambda: self._closed or self._position == len(self._data), timeout)

            if not drained:
                raise TimeoutError(f"{self.name}: peer did not drain within {timeout} seconds")

            self._check_open()

    def getvalue(self) -> bytes:
        """Return every byte written so far, read or not."""

        with self._condition:
            return bytes(self._data)

    def unread(self) -> int:
        """Return the number of bytes written but not yet read."""

        with self._condition:
            return len(self._data) - self._position

    def close(self) -> None:
        with self._condition:
            self._closed = True
            self._condition.notify_all()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
