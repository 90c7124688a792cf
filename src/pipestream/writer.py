""" The write side of a pipestream channel. A :class:`PipeStreamWriter`
    turns Python payloads into frames and pushes them onto a transport::

        payload --encode--> bytes --[encrypt]--> body --frame--> transport

    Each call to :func:`PipeStreamWriter.write_object` is independent of the
    calls before it; the only state a writer holds is its transport, its
    codec, and its optional key.
"""

from . import cipher
from . import codec as codecs
from . import framing
from .errors import EncodeError
from .log import get_logger


log = get_logger(__name__)


class PipeStreamWriter:
    """ Write payloads to a transport, one length-prefixed frame per payload.

        The *transport* is owned by the caller: the writer never opens or
        closes it, and it must outlive the writer. If a *key* is provided,
        every frame body is encrypted with it; the reader on the other end
        must be configured with the same key, as nothing on the wire says
        whether encryption is in use. The *codec* defaults to
        :class:`pipestream.codec.PickleCodec`.

        The *on_encode_error* policy decides what happens when a payload
        cannot be encoded. The default, ``'raise'``, propagates the
        :class:`pipestream.errors.EncodeError`. With ``'skip'`` the failure
        is logged as a warning and no frame is written at all, which keeps
        the channel usable when one payload out of many is bad.

        A writer is not thread-safe. Two threads calling
        :func:`write_object` on the same writer without external locking can
        interleave one frame's prefix with another frame's body, corrupting
        the stream for the reader. Serialize access, or use
        :class:`pipestream.queued.QueuedWriter`.

        :ivar codec: The codec used to turn payloads into bytes.
    """

    policies = set(('raise', 'skip'))

    def __init__(self, transport, key=None, codec=None, on_encode_error='raise'):

        if on_encode_error in self.policies:
            pass
        else:
            raise ValueError('invalid encode error policy: ' + repr(on_encode_error))

        if key is not None:
            cipher.validate_key(key)
            key = bytes(key)

        if codec is None:
            codec = codecs.default

        self._transport = transport
        self._key = key
        self.codec = codec
        self.on_encode_error = on_encode_error


    def __repr__(self):
        return 'PipeStreamWriter(transport=%r, key=%s, codec=%r)' % (self._transport, self._describe_key(), self.codec)


    @property
    def transport(self):
        """ The underlying transport this writer was constructed with.
        """

        return self._transport

    base_stream = transport


    @property
    def key(self):
        """ The encryption key, or None in plaintext mode. The key is fixed
            for the lifetime of the writer; mixing modes on one stream is
            not supported.
        """

        return self._key


    @property
    def encrypted(self):
        return self._key is not None


    def _describe_key(self):

        if self._key is None:
            return 'null'

        return '%d bytes' % (len(self._key))


    def encode(self, obj):
        """ Return the frame body for *obj*: the encoded payload, encrypted
            if this writer has a key. Nothing is written to the transport.
        """

        data = self.codec.encode(obj)

        if self._key is not None:
            data = cipher.encrypt(data, self._key)

        return data


    def write_object(self, obj):
        """ Write *obj* to the transport as a single frame, blocking until
            the transport has accepted and flushed it. Returns the number of
            bytes written, including the four byte length prefix; the return
            value is zero if encoding failed and the ``'skip'`` policy is in
            effect.

            Encoding and encryption both happen before anything touches the
            transport, so a failure in either leaves no partial frame
            behind. Transport failures propagate to the caller as
            :class:`pipestream.errors.TransportError` subclasses; there is
            no retry.
        """

        log.debug('write_object', payload_type=type(obj).__name__, key=self._describe_key())

        try:
            body = self.encode(obj)
        except EncodeError as e:
            if self.on_encode_error == 'skip':
                log.warning('write_object_skipped', payload_type=type(obj).__name__, error=str(e))
                return 0
            raise

        written = framing.write_frame(self._transport, body)

        log.debug('frame_written', length=len(body))
        return written


    def wait_for_drain(self):
        """ Block until the other end of the pipe has read every byte sent
            so far. This is a passthrough to the transport: it raises
            :class:`pipestream.errors.TransportClosed` if the transport is
            closed, :class:`pipestream.errors.TransportUnsupported` if the
            transport cannot tell, and other
            :class:`pipestream.errors.TransportError` subclasses for I/O
            failures.
        """

        self._transport.wait_for_drain()


# end of class PipeStreamWriter


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
