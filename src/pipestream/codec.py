""" Codecs convert a Python payload to the opaque byte sequence carried in
    a frame body, and back again. A codec holds no per-message state, so a
    single instance can be shared freely between writers, readers, and
    threads.

    Any failure to encode raises :class:`pipestream.errors.EncodeError`, and
    any failure to decode raises :class:`pipestream.errors.DecodeError`; the
    underlying exception is preserved as the ``__cause__``.
"""

import pickle

from . import json
from .errors import EncodeError, DecodeError


class Codec:
    """ Base class for all codecs. Subclasses implement :func:`_encode` and
        :func:`_decode`; the public methods wrap those with consistent
        error handling.
    """

    name = None

    def encode(self, payload):
        """ Return the byte representation of *payload*.
        """

        try:
            encoded = self._encode(payload)
        except EncodeError:
            raise
        except Exception as e:
            raise EncodeError('cannot encode %s payload: %s' % (type(payload).__name__, e)) from e

        return bytes(encoded)


    def decode(self, data):
        """ Return the payload represented by the bytes in *data*.
        """

        try:
            decoded = self._decode(data)
        except DecodeError:
            raise
        except Exception as e:
            raise DecodeError('cannot decode %d byte body: %s' % (len(data), e)) from e

        return decoded


    def _encode(self, payload):
        raise NotImplementedError('_encode() must be implemented by a subclass')


    def _decode(self, data):
        raise NotImplementedError('_decode() must be implemented by a subclass')


    def __repr__(self):
        return '%s()' % (self.__class__.__name__)


# end of class Codec



class PickleCodec(Codec):
    """ Serialize the full object graph reachable from the payload using
        :mod:`pickle`. Anything pickle refuses, such as open files, locks,
        or lambdas, raises :class:`EncodeError`.

        Only use this codec between processes that trust each other:
        unpickling executes code chosen by the sender. Pairing it with a
        shared encryption key keeps other local users from injecting frames.
    """

    name = 'pickle'

    def __init__(self, protocol=pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol


    def __repr__(self):
        return 'PickleCodec(protocol=%d)' % (self.protocol)


    def _encode(self, payload):
        return pickle.dumps(payload, protocol=self.protocol)


    def _decode(self, data):
        return pickle.loads(data)


# end of class PickleCodec



class JsonCodec(Codec):
    """ Encode the payload as JSON with :mod:`pipestream.json`. JSON has no
        notion of tuples, sets, or non-string dictionary keys, so a decoded
        payload will not always compare equal to the original. numpy
        arrays survive the trip when numpy is installed at both ends.
    """

    name = 'json'

    def _encode(self, payload):
        return json.dumps(payload)


    def _decode(self, data):
        return json.loads(data)


# end of class JsonCodec



class BytesCodec(Codec):
    """ Passthrough codec for payloads that already are bytes. Decoding
        always returns :class:`bytes`.
    """

    name = 'bytes'

    def _encode(self, payload):

        if isinstance(payload, (bytes, bytearray, memoryview)):
            return payload

        raise TypeError('expected a bytes-like payload, got ' + type(payload).__name__)


    def _decode(self, data):
        return bytes(data)


# end of class BytesCodec



registry = dict()

for _codec in (PickleCodec, JsonCodec, BytesCodec):
    registry[_codec.name] = _codec

del _codec


def get(name):
    """ Return a new codec instance for the codec registered as *name*.
    """

    try:
        codec_class = registry[name]
    except KeyError:
        raise ValueError('unknown codec: ' + repr(name))

    return codec_class()


default = PickleCodec()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
