import pytest

import pipestream
from pipestream import codec
from pipestream.transport import BufferTransport


def test_end_of_stream(buffer):

    reader = pipestream.PipeStreamReader(buffer)
    assert reader.read_object() is None
    assert reader.read_frame() is None


def test_iterate(buffer):

    writer = pipestream.PipeStreamWriter(buffer)
    for number in range(5):
        writer.write_object(number)

    # None is a legal payload; iteration only stops at end-of-stream.

    writer.write_object(None)
    writer.write_object('last')

    reader = pipestream.PipeStreamReader(buffer)
    assert list(reader) == [0, 1, 2, 3, 4, None, 'last']


def test_raw_frames(buffer, key):

    writer = pipestream.PipeStreamWriter(buffer, key=key, codec=codec.BytesCodec())
    writer.write_object(b'raw body')
    writer.write_object(b'')

    reader = pipestream.PipeStreamReader(buffer, key=key)
    assert reader.read_frame() == b'raw body'
    assert reader.read_frame() == b''


def test_wrong_key(key):
    """ A reader with the wrong key must not quietly hand the original
        payload back. Usually the padding check fails; occasionally it
        passes and the codec is left to reject the garbage, or returns
        something that is not the original payload.
    """

    wrong = bytes(reversed(key))
    payload = {'secret': 'value'}

    for attempt in range(20):
        transport = BufferTransport()
        pipestream.PipeStreamWriter(transport, key=key).write_object(payload)
        reader = pipestream.PipeStreamReader(transport, key=wrong)

        try:
            decoded = reader.read_object()
        except (pipestream.DecryptError, pipestream.DecodeError):
            pass
        else:
            assert decoded != payload


def test_missing_key(key, buffer):

    # A plaintext reader sees IV plus ciphertext, which is not JSON.

    jsoner = codec.JsonCodec()
    pipestream.PipeStreamWriter(buffer, key=key, codec=jsoner).write_object({'a': 1})
    reader = pipestream.PipeStreamReader(buffer, codec=jsoner)

    with pytest.raises(pipestream.DecodeError):
        reader.read_object()


def test_unexpected_key(key, buffer):

    # A five byte plaintext body is far too short to be IV plus ciphertext.

    pipestream.PipeStreamWriter(buffer, codec=codec.BytesCodec()).write_object(b'plain')
    reader = pipestream.PipeStreamReader(buffer, key=key, codec=codec.BytesCodec())

    with pytest.raises(pipestream.DecryptError):
        reader.read_object()


def test_truncated_stream():

    transport = BufferTransport(b'\x00\x00\x00\x10short')
    reader = pipestream.PipeStreamReader(transport)

    with pytest.raises(pipestream.ProtocolError):
        reader.read_object()


def test_wrapper(pipe_pair, key):

    left, right = pipe_pair

    with pipestream.PipeStreamWrapper(left, key=key) as near:
        far = pipestream.PipeStreamWrapper(right, key=key)

        assert near.is_connected

        near.write_object({'question': 6 * 7})
        assert far.read_object() == {'question': 42}

        far.write_object('answer')
        assert near.read_object() == 'answer'

        far.close()
        assert far.is_connected == False

        # The far side closed both of its descriptors; the near side sees
        # end-of-stream.

        assert near.read_object() is None

    assert near.is_connected == False


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
