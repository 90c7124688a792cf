""" JSON serialization of frame bodies. The first importable library in
    :data:`preference` does the work: msgspec, then orjson, then the
    standard :mod:`json` module. Whichever is chosen, :func:`dumps` returns
    :class:`bytes` ready to be framed, and :func:`loads` accepts any
    bytes-like body.

    When numpy is installed, arrays anywhere in a value are written as a
    tagged object and turned back into arrays by :func:`loads`::

        {"__ndarray__": {"dtype": "<f8", "shape": [2, 3], "data": "<base64>"}}
"""

import base64
import importlib

try:
    import numpy
except ImportError:
    numpy = None


array_tag = '__ndarray__'
preference = ('msgspec', 'orjson', 'json')


def select_backend(preference=preference):
    """ Return a (name, encode, decode) tuple for the first library in
        *preference* that can be imported. The *encode* callable always
        returns bytes, even for the standard library, whose own
        :func:`json.dumps` returns a string.
    """

    for name in preference:
        try:
            module = importlib.import_module(name)
        except ImportError:
            continue

        if name == 'msgspec':
            return name, module.json.Encoder().encode, module.json.Decoder().decode

        if name == 'orjson':
            return name, module.dumps, module.loads

        if name == 'json':
            stdlib_dumps = module.dumps

            def encode(value):
                return stdlib_dumps(value, separators=(',', ':')).encode()

            return name, encode, module.loads

    raise ImportError('no usable JSON library among: ' + ', '.join(preference))


backend, _encode, _decode = select_backend()



def dumps(value):
    """ Return the JSON encoding of *value* as bytes. Tuples become lists;
        numpy arrays become tagged objects.
    """

    return _encode(flatten(value))



def loads(data):
    return restore(_decode(bytes(data)))



def flatten(value):
    """ Return *value* with every numpy array replaced by its tagged
        description, recursing through dictionaries, lists, and tuples.
    """

    if numpy is not None and isinstance(value, numpy.ndarray):
        described = dict()
        described['dtype'] = value.dtype.str
        described['shape'] = list(value.shape)
        described['data'] = base64.b64encode(numpy.ascontiguousarray(value).tobytes()).decode()
        return {array_tag: described}

    if isinstance(value, dict):
        return {key: flatten(item) for key,item in value.items()}

    if isinstance(value, (list, tuple)):
        return [flatten(item) for item in value]

    return value



def restore(value):
    """ Inverse of :func:`flatten` for decoded JSON. A tagged array with no
        numpy available raises :class:`ImportError`.
    """

    if isinstance(value, dict):
        if len(value) == 1 and array_tag in value:
            return _restore_array(value[array_tag])

        return {key: restore(item) for key,item in value.items()}

    if isinstance(value, list):
        return [restore(item) for item in value]

    return value



def _restore_array(described):

    if numpy is None:
        raise ImportError('numpy is required to decode a tagged array')

    raw = base64.b64decode(described['data'])
    flat = numpy.frombuffer(raw, dtype=numpy.dtype(described['dtype']))
    return flat.reshape(described['shape'])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
