"""OS pipe transport.

Wraps a pair of raw file descriptors: one to read from and one to write to.
Either may be absent, which is how a one-direction named pipe (FIFO) is
represented. A duplex channel built from pipes needs two of them, one per
direction; see :meth:`PipeTransport.pair`.
"""

from __future__ import annotations

import errno
import fcntl
import os
import select
import stat
import struct
import termios
import time
from typing import Optional, Tuple

from .. import config
from ..errors import TransportBroken, TransportClosed, TransportUnsupported
from ..log import get_logger
from .base import BufferedTransport, translate_oserror


log = get_logger(__name__)

_INT = struct.Struct("i")


class PipeTransport(BufferedTransport):
    """Blocking transport over OS pipe file descriptors.

    The transport owns the descriptors it is handed and closes them in
    :meth:`close`.
    """

    def __init__(self, read_fd: Optional[int] = None, write_fd: Optional[int] = None,
                 drain_interval: Optional[float] = None, name: str = "pipe"):

        if read_fd is None and write_fd is None:
            raise ValueError("at least one of read_fd or write_fd is required")

        BufferedTransport.__init__(self)

        self.read_fd = read_fd
        self.write_fd = write_fd
        self.name = name

        if drain_interval is None:
            drain_interval = config.drain_interval()

        self.drain_interval = drain_interval

    def __repr__(self) -> str:
        return f"PipeTransport(name={self.name!r}, read_fd={self.read_fd}, write_fd={self.write_fd})"

    @property
    def readable(self) -> bool:
        return self.read_fd is not None

    @property
    def writable(self) -> bool:
        return self.write_fd is not None

    @classmethod
    def pair(cls, drain_interval: Optional[float] = None) -> Tuple["PipeTransport", "PipeTransport"]:
        """Return two connected duplex transports built from two anonymous pipes.

        Whatever one side writes, the other side reads.
        """

        a_read, b_write = os.pipe()
        b_read, a_write = os.pipe()

        side_a = cls(a_read, a_write, drain_interval, name="pipe-a")
        side_b = cls(b_read, b_write, drain_interval, name="pipe-b")
        return side_a, side_b

    @classmethod
    def fifo(cls, path: str, mode: str, create: bool = False,
             drain_interval: Optional[float] = None) -> "PipeTransport":
        """Open the named pipe at *path* for reading (``'r'``) or writing (``'w'``).

        Opening a FIFO blocks until the other end is opened as well. With
        *create* set, the FIFO is created first if it does not exist.
        """

        if mode not in ("r", "w"):
            raise ValueError(f"invalid FIFO mode: {mode!r}")

        if create:
            try:
                os.mkfifo(path, 0o600)
            except FileExistsError:
                pass

        if not stat.S_ISFIFO(os.stat(path).st_mode):
            raise ValueError(f"not a named pipe: {path}")

        if mode == "r":
            fd = os.open(path, os.O_RDONLY)
            return cls(read_fd=fd, drain_interval=drain_interval, name=path)

        fd = os.open(path, os.O_WRONLY)
        return cls(write_fd=fd, drain_interval=drain_interval, name=path)

    def _send(self, data: bytes) -> None:
        view = memoryview(data)

        try:
            while view:
                written = os.write(self.write_fd, view)
                view = view[written:]
        except OSError as e:
            raise translate_oserror(e, self.name) from e

    def read(self, count: int) -> bytes:
        self._check_readable()

        try:
            return os.read(self.read_fd, count)
        except OSError as e:
            raise translate_oserror(e, self.name) from e

    def pending(self) -> int:
        """Return the number of bytes written but not yet read by the peer."""

        self._check_writable()

        try:
            raw = fcntl.ioctl(self.write_fd, termios.FIONREAD, _INT.pack(0))
        except OSError as e:
            if e.errno in (errno.EINVAL, errno.ENOTTY):
                raise TransportUnsupported(e.errno, f"{self.name}: cannot query unread bytes") from e
            raise translate_oserror(e, self.name) from e

        (count,) = _INT.unpack(raw)
        return count

    def wait_for_drain(self) -> None:
        """Block until the kernel pipe buffer is empty.

        Raises :class:`TransportBroken` if every reader has gone away while
        bytes remain unread, since they never will be.
        """

        self._check_writable()

        poller = select.poll()
        poller.register(self.write_fd, select.POLLERR)

        while self.pending() > 0:
            for fd, event in poller.poll(0):
                if event & select.POLLERR:
                    raise TransportBroken(errno.EPIPE, f"{self.name}: reader closed before draining")

            time.sleep(self.drain_interval)

            if self._closed:
                raise TransportClosed(errno.EBADF, f"{self.name}: closed while waiting for drain")

    def close(self) -> None:
        if self._closed:
            return

        self._closed = True

        for fd in (self.read_fd, self.write_fd):
            if fd is None:
                continue
            try:
                os.close(fd)
            except OSError as e:
                log.debug("pipe_close_failed", name=self.name, fd=fd, error=str(e))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
