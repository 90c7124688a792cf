""" Python implementation of pipestream: length-prefixed, optionally
    encrypted framing of Python payloads over a reliable duplex byte channel
    such as a named pipe. This includes the write side, which encodes,
    encrypts, and frames payloads, and the matching read side.
"""

# Utility components.

from . import errors
from . import json
from . import log

# Submodules used by multiple other components.

from . import codec
from . import cipher
from . import framing
from . import config
from . import transport

# Primary public-facing interfaces.

from .errors import (
    PipeStreamError,
    EncodeError,
    DecodeError,
    EncryptError,
    DecryptError,
    ProtocolError,
    TransportError,
    TransportClosed,
    TransportBroken,
    TransportUnsupported,
)

from .writer import PipeStreamWriter
from .reader import PipeStreamReader
from .wrapper import PipeStreamWrapper
from .queued import QueuedWriter, PendingWrite

__version__ = '0.1.0'

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
