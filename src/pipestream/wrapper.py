""" Combined reader and writer for one duplex transport.
"""

from .reader import PipeStreamReader
from .writer import PipeStreamWriter


class PipeStreamWrapper:
    """ Pair a :class:`PipeStreamReader` and a :class:`PipeStreamWriter`
        over the same duplex *transport*, sharing one *key* and one *codec*.
        Unlike the reader and writer, the wrapper takes ownership of the
        transport: :func:`close` closes it, and so does leaving a ``with``
        block.

        :ivar reader: The :class:`PipeStreamReader` for incoming payloads.
        :ivar writer: The :class:`PipeStreamWriter` for outgoing payloads.
    """

    def __init__(self, transport, key=None, codec=None, on_encode_error='raise'):

        self.transport = transport
        self.reader = PipeStreamReader(transport, key, codec)
        self.writer = PipeStreamWriter(transport, key, codec, on_encode_error)


    def __repr__(self):
        return 'PipeStreamWrapper(transport=%r)' % (self.transport,)


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    @property
    def is_connected(self):
        return self.transport.is_open


    def read_object(self):
        """ Return the next payload, or None if the stream ended cleanly.
        """

        return self.reader.read_object()


    def write_object(self, obj):
        """ Write *obj* as one frame; see :func:`PipeStreamWriter.write_object`.
        """

        return self.writer.write_object(obj)


    def wait_for_drain(self):
        self.writer.wait_for_drain()


    def close(self):
        self.transport.close()


# end of class PipeStreamWrapper


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
