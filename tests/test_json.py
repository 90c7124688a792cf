import base64
import json
import pytest

import pipestream

try:
    import numpy
except ImportError:
    numpy = None


def test_dumps_returns_bytes():

    for value in ({'one': 1}, [1, 'a', None], 'text', 35.5, True, None):
        encoded = pipestream.json.dumps(value)
        assert isinstance(encoded, bytes)
        assert pipestream.json.loads(encoded) == value


def test_loads_accepts_bytes_like():

    encoded = pipestream.json.dumps({'list': [1, 2]})

    assert pipestream.json.loads(bytearray(encoded)) == {'list': [1, 2]}
    assert pipestream.json.loads(memoryview(encoded)) == {'list': [1, 2]}


def test_tuples_become_lists():

    assert pipestream.json.loads(pipestream.json.dumps((1, (2, 3)))) == [1, [2, 3]]


def test_backend():

    assert pipestream.json.backend == pipestream.json.select_backend()[0]
    assert pipestream.json.backend in pipestream.json.preference


def test_select_backend():

    name, encode, decode = pipestream.json.select_backend(('no_such_json_library', 'json'))

    assert name == 'json'
    assert encode({'a': [1]}) == b'{"a":[1]}'
    assert decode(b'{"a":[1]}') == {'a': [1]}

    with pytest.raises(ImportError):
        pipestream.json.select_backend(('no_such_json_library',))


def test_tag_needs_a_lone_key():

    value = {'__ndarray__': 1, 'other': 2}
    assert pipestream.json.loads(pipestream.json.dumps(value)) == value


@pytest.mark.skipif(numpy is None, reason='numpy not available')
def test_tagged_array():

    array = numpy.arange(12, dtype='<i2').reshape(3, 4)
    encoded = pipestream.json.dumps({'image': array})

    # The wire form is plain JSON that any library can read.

    raw = json.loads(encoded)
    described = raw['image']['__ndarray__']

    assert list(raw['image'].keys()) == ['__ndarray__']
    assert described['dtype'] == '<i2'
    assert described['shape'] == [3, 4]
    assert base64.b64decode(described['data']) == array.tobytes()

    decoded = pipestream.json.loads(encoded)['image']
    assert decoded.dtype == numpy.int16
    assert numpy.array_equal(decoded, array)


@pytest.mark.skipif(numpy is None, reason='numpy not available')
def test_tagged_array_not_contiguous():

    array = numpy.arange(6, dtype=numpy.float64).reshape(2, 3).T
    decoded = pipestream.json.loads(pipestream.json.dumps(array))

    assert decoded.shape == (3, 2)
    assert numpy.array_equal(decoded, array)


def test_tagged_array_without_numpy(monkeypatch):

    described = {'dtype': '<i2', 'shape': [1], 'data': base64.b64encode(b'\x01\x00').decode()}
    encoded = json.dumps({'__ndarray__': described}).encode()

    monkeypatch.setattr(pipestream.json, 'numpy', None)

    with pytest.raises(ImportError):
        pipestream.json.loads(encoded)

    with pytest.raises(pipestream.DecodeError):
        pipestream.codec.JsonCodec().decode(encoded)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
