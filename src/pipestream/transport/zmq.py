"""ZeroMQ PAIR transport.

A PAIR socket on an ``ipc://`` endpoint is a point-to-point channel between
two local processes, carried over a Unix domain socket that ZeroMQ manages.
ZeroMQ is message oriented rather than byte oriented, so this transport
sends each flush as one ZeroMQ message and reassembles a byte stream on the
receiving side. An empty message marks end-of-stream; :meth:`close` sends
one before tearing down the socket.
"""

from __future__ import annotations

import errno
import itertools
from typing import Optional, Tuple

import zmq

from ..errors import TransportClosed, TransportError, TransportUnsupported
from ..log import get_logger
from .base import BufferedTransport


log = get_logger(__name__)

zmq_context = zmq.Context()
_pair_ids = itertools.count()


def _translate(error: zmq.ZMQError, name: str) -> TransportError:

    if error.errno in (zmq.ETERM, zmq.ENOTSOCK):
        return TransportClosed(error.errno, f"{name}: socket is closed")

    return TransportError(error.errno, f"{name}: {error.strerror}")


class ZmqTransport(BufferedTransport):
    """Blocking transport over a ZeroMQ PAIR socket."""

    linger = 100

    def __init__(self, endpoint: str, bind: bool = False, context: Optional[zmq.Context] = None):
        BufferedTransport.__init__(self)

        if context is None:
            context = zmq_context

        self.endpoint = endpoint
        self.name = endpoint
        self._incoming = bytearray()
        self._eof = False

        self.socket = context.socket(zmq.PAIR)
        self.socket.setsockopt(zmq.LINGER, 0)

        try:
            if bind:
                self.socket.bind(endpoint)
            else:
                self.socket.connect(endpoint)
        except zmq.ZMQError as e:
            self.socket.close()
            raise _translate(e, endpoint) from e

    def __repr__(self) -> str:
        return f"ZmqTransport(endpoint={self.endpoint!r})"

    @classmethod
    def pair(cls, endpoint: Optional[str] = None,
             context: Optional[zmq.Context] = None) -> Tuple["ZmqTransport", "ZmqTransport"]:
        """Return two connected transports, the first bound and the second connected.

        Without an *endpoint* an in-process endpoint is used, which only
        works within one ZeroMQ context.
        """

        if endpoint is None:
            endpoint = f"inproc://pipestream.ZmqTransport.{next(_pair_ids)}"

        bound = cls(endpoint, bind=True, context=context)
        connected = cls(endpoint, bind=False, context=context)
        return bound, connected

    def _send(self, data: bytes) -> None:
        try:
            self.socket.send(data)
        except zmq.ZMQError as e:
            raise _translate(e, self.name) from e

    def read(self, count: int) -> bytes:
        self._check_readable()

        if not self._incoming:
            if self._eof:
                return b""

            try:
                message = self.socket.recv()
            except zmq.ZMQError as e:
                raise _translate(e, self.name) from e

            if not message:
                self._eof = True
                return b""

            self._incoming.extend(message)

        chunk = bytes(self._incoming[:count])
        del self._incoming[:count]
        return chunk

    def wait_for_drain(self) -> None:
        self._check_writable()
        raise TransportUnsupported(errno.ENOTSUP, f"{self.name}: ZeroMQ cannot report whether the peer has read")

    def close(self) -> None:
        if self._closed:
            return

        self._closed = True

        try:
            self.socket.send(b"", flags=zmq.NOBLOCK)
        except zmq.ZMQError as e:
            log.debug("zmq_eof_not_sent", name=self.name, error=str(e))

        self.socket.close(linger=self.linger)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
