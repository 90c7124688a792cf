"""Transport interface.

This is the (small) contract that transport implementations follow. The
framing layer only ever calls :meth:`Transport.write`, :meth:`Transport.flush`
and :meth:`Transport.read`; :meth:`Transport.wait_for_drain` is a passthrough
for callers that need a synchronization point.

Transports are owned by the caller. Writers and readers never open or
close them.
"""

from __future__ import annotations

import errno
from abc import ABC, abstractmethod

from ..errors import TransportBroken, TransportClosed, TransportError, TransportUnsupported


class Transport(ABC):
    """Minimal contract for a reliable, ordered, byte-oriented duplex channel."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Queue *data* for sending; blocks until the transport accepts it."""

    @abstractmethod
    def flush(self) -> None:
        """Push any buffered bytes to the operating system."""

    @abstractmethod
    def wait_for_drain(self) -> None:
        """Block until the peer has read every byte written so far."""

    @abstractmethod
    def read(self, count: int) -> bytes:
        """Return up to *count* bytes; an empty result means end-of-stream."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying channel."""

    @property
    def is_open(self) -> bool:
        """Whether the transport can still be used."""
        return False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class BufferedTransport(Transport):
    """Transport that collects writes locally until :meth:`flush`.

    Subclasses implement :meth:`_send`, which must push every byte it is
    handed before returning. Because one frame's prefix and body are flushed
    together, the frame reaches the operating system in a single send.
    """

    readable = True
    writable = True

    def __init__(self) -> None:
        self._outgoing = bytearray()
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise TransportClosed(errno.EBADF, f"{type(self).__name__} is closed")

    def _check_writable(self) -> None:
        self._check_open()
        if not self.writable:
            raise TransportUnsupported(errno.EBADF, f"{type(self).__name__} does not support writing")

    def _check_readable(self) -> None:
        self._check_open()
        if not self.readable:
            raise TransportUnsupported(errno.EBADF, f"{type(self).__name__} does not support reading")

    def write(self, data: bytes) -> None:
        self._check_writable()
        self._outgoing.extend(data)

    def flush(self) -> None:
        self._check_writable()

        if not self._outgoing:
            return

        pending = bytes(self._outgoing)
        self._outgoing.clear()
        self._send(pending)

    @abstractmethod
    def _send(self, data: bytes) -> None:
        """Push all of *data* to the operating system."""


_BROKEN = (errno.EPIPE, errno.ECONNRESET, errno.ENOTCONN, errno.ECONNABORTED)
_CLOSED = (errno.EBADF,)


def translate_oserror(error: OSError, name: str) -> TransportError:
    """Map an operating system error onto the transport error taxonomy."""

    if isinstance(error, TransportError):
        return error

    if isinstance(error, BrokenPipeError) or error.errno in _BROKEN:
        return TransportBroken(error.errno, f"{name}: peer disconnected ({error.strerror})")

    if error.errno in _CLOSED:
        return TransportClosed(error.errno, f"{name}: handle is closed ({error.strerror})")

    return TransportError(error.errno, f"{name}: {error.strerror or error}")


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
