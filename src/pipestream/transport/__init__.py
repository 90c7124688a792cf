"""Transport layer implementations."""

from ..errors import (
    TransportError,
    TransportClosed,
    TransportBroken,
    TransportUnsupported,
)

from .base import Transport, BufferedTransport
from .memory import BufferTransport
from .pipe import PipeTransport
from .unix import SocketTransport
from .zmq import ZmqTransport
