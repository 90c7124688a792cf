"""Length-prefixed framing.

Frame layout::

    [4 bytes - body length, unsigned, big-endian (network order)]
    [N bytes - body]

There are no delimiters; a reader consumes exactly four bytes, decodes the
length, then consumes exactly that many more bytes. A zero-length body is a
legal frame.
"""

from __future__ import annotations

import struct
from typing import Optional

from .errors import ProtocolError


HEADER_SIZE = 4
MAX_LENGTH = 2 ** 31 - 1

_HEADER = struct.Struct("!I")


def pack_length(length: int) -> bytes:
    """Return the four byte prefix announcing a body of *length* bytes."""

    if length < 0:
        raise ProtocolError(f"negative frame length: {length}")

    if length > MAX_LENGTH:
        raise ProtocolError(f"frame length {length} exceeds protocol maximum {MAX_LENGTH}")

    return _HEADER.pack(length)


def unpack_length(header: bytes) -> int:
    """Decode a four byte prefix into a body length."""

    if len(header) != HEADER_SIZE:
        raise ProtocolError(f"frame header must be {HEADER_SIZE} bytes, got {len(header)}")

    (length,) = _HEADER.unpack(header)

    if length > MAX_LENGTH:
        raise ProtocolError(f"frame length {length} exceeds protocol maximum {MAX_LENGTH}")

    return length


def pack_frame(body: bytes) -> bytes:
    """Return a complete frame (prefix plus body) as a single bytes object."""

    return pack_length(len(body)) + bytes(body)


def write_frame(transport, body: bytes) -> int:
    """Write one frame to *transport* and flush it.

    The prefix and the body go out as two sequential writes. The length is
    checked before anything is written, so a body the protocol cannot carry
    never leaves a partial frame behind. Transport failures propagate to
    the caller unchanged; there is no retry here.

    Returns the total number of bytes written, prefix included.
    """

    header = pack_length(len(body))

    transport.write(header)
    if body:
        transport.write(body)
    transport.flush()

    return HEADER_SIZE + len(body)


def read_exact(transport, count: int) -> bytes:
    """Read exactly *count* bytes from *transport*.

    Returns fewer bytes only when the transport reaches end-of-stream; the
    caller decides whether a short read is an error.
    """

    buffer = bytearray()

    while len(buffer) < count:
        chunk = transport.read(count - len(buffer))
        if not chunk:
            break
        buffer.extend(chunk)

    return bytes(buffer)


def read_frame(transport) -> Optional[bytes]:
    """Read one frame from *transport* and return its body.

    Returns None when the stream ends cleanly before a new frame begins. A
    stream that ends inside a frame raises :class:`ProtocolError`.
    """

    header = read_exact(transport, HEADER_SIZE)

    if not header:
        return None

    if len(header) < HEADER_SIZE:
        raise ProtocolError(f"truncated frame header: {len(header)} of {HEADER_SIZE} bytes")

    length = unpack_length(header)

    if length == 0:
        return b""

    body = read_exact(transport, length)

    if len(body) < length:
        raise ProtocolError(f"truncated frame body: {len(body)} of {length} bytes")

    return body


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
