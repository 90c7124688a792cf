""" Shared helpers for the pipestream tests.
"""

import threading

import pipestream


def read_in_background(transport, count, delay=0):
    """ Start a thread that sleeps for *delay* seconds, then reads *count*
        bytes from *transport*. Returns the thread and the list the bytes
        are appended to.
    """

    received = list()

    def reader():
        if delay:
            threading.Event().wait(delay)
        received.append(pipestream.framing.read_exact(transport, count))

    thread = threading.Thread(target=reader, daemon=True)
    thread.start()
    return thread, received


def frames(data):
    """ Split raw stream bytes into a list of frame bodies, the hard way,
        without going through :func:`pipestream.framing.read_frame`.
    """

    bodies = list()
    offset = 0

    while offset < len(data):
        length = int.from_bytes(data[offset:offset + 4], 'big')
        offset += 4
        bodies.append(data[offset:offset + length])
        offset += length

    return bodies


class SteppingTransport(pipestream.transport.BufferTransport):
    """ A buffer transport that makes every writer pause right after writing
        a four byte length prefix, until a second writer has done the same.
        Two unsynchronized threads sharing one writer are thereby forced
        into the worst possible interleaving, every time.
    """

    def __init__(self):
        pipestream.transport.BufferTransport.__init__(self, name='stepping')
        self.barrier = threading.Barrier(2)

    def write(self, data):
        pipestream.transport.BufferTransport.write(self, data)
        if len(data) == 4:
            self.barrier.wait(timeout=5)


class FailingTransport(pipestream.transport.BufferTransport):
    """ A buffer transport whose writes fail as if the reader went away.
    """

    def write(self, data):
        raise pipestream.TransportBroken(32, 'failing: peer disconnected')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
