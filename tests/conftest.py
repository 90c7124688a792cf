import pytest

import pipestream


@pytest.fixture
def key():
    return bytes(range(32))


@pytest.fixture
def buffer():
    transport = pipestream.transport.BufferTransport()
    yield transport
    transport.close()


@pytest.fixture
def pipe_pair():

    # Writes on one side are read on the other. A short drain interval
    # keeps the drain tests snappy.

    side_a, side_b = pipestream.transport.PipeTransport.pair(drain_interval=0.001)

    yield side_a, side_b

    side_a.close()
    side_b.close()


@pytest.fixture
def socket_pair():

    side_a, side_b = pipestream.transport.SocketTransport.pair(drain_interval=0.001)

    yield side_a, side_b

    side_a.close()
    side_b.close()


@pytest.fixture
def home(tmp_path, monkeypatch):
    """ Point the pipestream configuration at an empty temporary directory,
        with none of the configuration environment variables set.
    """

    for variable in ('PIPESTREAM_KEY', 'PIPESTREAM_KEYFILE', 'PIPESTREAM_CODEC', 'PIPESTREAM_DRAIN_INTERVAL'):
        monkeypatch.delenv(variable, raising=False)

    monkeypatch.setenv('PIPESTREAM_HOME', str(tmp_path))
    pipestream.config.directory.found = None

    yield tmp_path

    pipestream.config.directory.found = None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
