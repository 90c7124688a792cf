""" Send a handful of payloads from one process to another over a named
    pipe. Run the reader first, then the writer, in two terminals:

        python fifo.py read /tmp/pipestream.fifo
        python fifo.py write /tmp/pipestream.fifo

    Both ends pick up the shared key and codec from the environment; see
    :mod:`pipestream.config`. With ``PIPESTREAM_KEY`` unset the payloads
    travel in plaintext.
"""

import sys
import time

import pipestream


def main(mode, path):

    pipestream.log.configure(level='debug')
    settings = pipestream.config.Settings.from_environment()

    if mode == 'read':
        transport = pipestream.transport.PipeTransport.fifo(path, 'r', create=True)
        reader = pipestream.PipeStreamReader(transport, settings.key, settings.make_codec())

        for payload in reader:
            print('received:', payload)

    else:
        transport = pipestream.transport.PipeTransport.fifo(path, 'w', create=True)
        writer = pipestream.PipeStreamWriter(transport, settings.key, settings.make_codec())

        for count in range(5):
            writer.write_object({'count': count, 'time': time.time()})

        writer.wait_for_drain()

    transport.close()


if __name__ == '__main__':
    main(sys.argv[1], sys.argv[2])

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
