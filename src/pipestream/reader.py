""" The read side of a pipestream channel: the mirror image of
    :mod:`pipestream.writer`. A reader consumes exactly four bytes, decodes
    the big-endian body length, consumes exactly that many bytes, decrypts
    them if it has a key, and hands the result to its codec.
"""

from . import cipher
from . import codec as codecs
from . import framing
from .log import get_logger


log = get_logger(__name__)


class PipeStreamReader:
    """ Read payloads from a transport, one frame at a time. The *key* and
        *codec* must match the ones the writer on the other end uses.
    """

    def __init__(self, transport, key=None, codec=None):

        if key is not None:
            cipher.validate_key(key)
            key = bytes(key)

        if codec is None:
            codec = codecs.default

        self._transport = transport
        self._key = key
        self.codec = codec


    def __repr__(self):
        return 'PipeStreamReader(transport=%r, codec=%r)' % (self._transport, self.codec)


    @property
    def transport(self):
        return self._transport

    base_stream = transport


    @property
    def key(self):
        return self._key


    def read_frame(self):
        """ Return the next frame body, decrypted if this reader has a key,
            or None if the stream ended cleanly. Decryption failures raise
            :class:`pipestream.errors.DecryptError`.
        """

        body = framing.read_frame(self._transport)

        if body is None:
            log.debug('read_end_of_stream')
            return None

        if self._key is not None:
            body = cipher.decrypt(body, self._key)

        return body


    def read_object(self):
        """ Return the next payload from the stream, or None if the stream
            ended cleanly. This blocks until a complete frame is available.
        """

        body = self.read_frame()

        if body is None:
            return None

        return self.codec.decode(body)


    def __iter__(self):
        """ Iterate over payloads until the stream ends.
        """

        while True:
            body = self.read_frame()
            if body is None:
                break
            yield self.codec.decode(body)


# end of class PipeStreamReader


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
