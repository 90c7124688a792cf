"""Exception taxonomy.

Every failure raised by this package derives from :class:`PipeStreamError`,
so callers can catch the whole family at once. Transport failures are also
:class:`OSError` subclasses, since they wrap what the operating system
reported about the underlying pipe or socket.
"""

from __future__ import annotations


class PipeStreamError(Exception):
    """Base class for all pipestream errors."""


class EncodeError(PipeStreamError):
    """A payload could not be converted to bytes by the codec."""


class DecodeError(PipeStreamError):
    """A frame body could not be converted back to a payload."""


class EncryptError(PipeStreamError):
    """Invalid key, or the cipher failed while encrypting."""


class DecryptError(PipeStreamError):
    """The body is not a valid IV plus ciphertext for the configured key."""


class ProtocolError(PipeStreamError):
    """A frame violates the length-prefix format."""


# Transport errors

class TransportError(PipeStreamError, OSError):
    """Base class for all transport-layer errors."""


class TransportClosed(TransportError):
    """The transport was closed or its handle disposed."""


class TransportBroken(TransportError):
    """The peer went away; the pipe or socket is broken."""


class TransportUnsupported(TransportError):
    """The transport does not support the requested direction or operation."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
