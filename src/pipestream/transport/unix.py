"""Unix domain socket transport.

A connected ``AF_UNIX`` stream socket is a single duplex channel, which
makes it the closest local equivalent of a duplex named pipe.
"""

from __future__ import annotations

import errno
import fcntl
import select
import socket as pysocket
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

# SIOCOUTQ shares its value with TIOCOUTQ on Linux. For a Unix stream
# socket it reports bytes sent but not yet consumed by the receiver.
_SIOCOUTQ = getattr(termios, "TIOCOUTQ", None)


class SocketTransport(BufferedTransport):
    """Blocking transport over a connected stream socket.

    The transport owns the socket and closes it in :meth:`close`.
    """

    def __init__(self, sock: pysocket.socket, drain_interval: Optional[float] = None, name: Optional[str] = None):
        BufferedTransport.__init__(self)

        sock.setblocking(True)
        self.socket = sock

        if name is None:
            try:
                name = sock.getsockname() or "socket"
            except OSError:
                name = "socket"

        self.name = str(name)

        if drain_interval is None:
            drain_interval = config.drain_interval()

        self.drain_interval = drain_interval

    def __repr__(self) -> str:
        return f"SocketTransport(name={self.name!r})"

    @classmethod
    def pair(cls, drain_interval: Optional[float] = None) -> Tuple["SocketTransport", "SocketTransport"]:
        """Return two connected transports built from :func:`socket.socketpair`."""

        a, b = pysocket.socketpair(pysocket.AF_UNIX, pysocket.SOCK_STREAM)
        return cls(a, drain_interval, name="socket-a"), cls(b, drain_interval, name="socket-b")

    @classmethod
    def connect(cls, path: str, drain_interval: Optional[float] = None) -> "SocketTransport":
        """Connect to a listening Unix socket at *path*."""

        sock = pysocket.socket(pysocket.AF_UNIX, pysocket.SOCK_STREAM)

        try:
            sock.connect(path)
        except OSError as e:
            sock.close()
            raise translate_oserror(e, path) from e

        return cls(sock, drain_interval, name=path)

    def _send(self, data: bytes) -> None:
        try:
            self.socket.sendall(data)
        except OSError as e:
            raise translate_oserror(e, self.name) from e

    def read(self, count: int) -> bytes:
        self._check_readable()

        try:
            return self.socket.recv(count)
        except OSError as e:
            raise translate_oserror(e, self.name) from e

    def pending(self) -> int:
        """Return the number of bytes sent but not yet read by the peer."""

        self._check_writable()

        if _SIOCOUTQ is None:
            raise TransportUnsupported(errno.ENOTSUP, f"{self.name}: platform cannot report unsent bytes")

        try:
            raw = fcntl.ioctl(self.socket.fileno(), _SIOCOUTQ, _INT.pack(0))
        except OSError as e:
            if e.errno in (errno.EINVAL, errno.ENOTTY, errno.EOPNOTSUPP):
                raise TransportUnsupported(e.errno, f"{self.name}: cannot query unsent bytes") from e
            raise translate_oserror(e, self.name) from e

        (count,) = _INT.unpack(raw)
        return count

    def wait_for_drain(self) -> None:
        """Block until the peer has read every byte sent so far.

        A peer that closes its end with bytes still unread makes the kernel
        discard them, after which :meth:`pending` reports zero. The kernel
        flags that case as a pending socket error, so the socket is polled
        after every check and :class:`TransportBroken` is raised instead.
        """

        self._check_writable()

        poller = select.poll()
        poller.register(self.socket.fileno(), select.POLLERR | select.POLLHUP)

        while True:
            remaining = self.pending()

            for fd, event in poller.poll(0):
                if event & select.POLLERR or (event & select.POLLHUP and remaining > 0):
                    raise TransportBroken(errno.ECONNRESET, f"{self.name}: peer closed before draining")

            if remaining == 0:
                return

            time.sleep(self.drain_interval)

            if self._closed:
                raise TransportClosed(errno.EBADF, f"{self.name}: closed while waiting for drain")

    def close(self) -> None:
        if self._closed:
            return

        self._closed = True

        try:
            self.socket.shutdown(pysocket.SHUT_RDWR)
        except OSError as e:
            log.debug("socket_shutdown_failed", name=self.name, error=str(e))

        self.socket.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
