""" Configuration for pipestream endpoints. Nothing here is required: a
    writer constructed with explicit arguments never consults the
    environment. The functions in this module exist so that both ends of a
    pipe can agree on the shared key, the codec, and related settings
    out-of-band, without hard-coding them in the application.

    The recognized environment variables are:

    ``PIPESTREAM_HOME``
        Directory holding the default key file; defaults to
        ``$HOME/.pipestream``.

    ``PIPESTREAM_KEY``
        Hex-encoded shared encryption key.

    ``PIPESTREAM_KEYFILE``
        Path to a file containing the raw shared key bytes.

    ``PIPESTREAM_CODEC``
        Name of the payload codec; one of ``pickle``, ``json``, ``bytes``.

    ``PIPESTREAM_DRAIN_INTERVAL``
        Seconds between checks while waiting for the peer to drain a pipe.
"""

import binascii
import os

from . import cipher
from . import codec


default_codec = 'pickle'
default_drain_interval = 0.001


class Settings:
    """ A convenience class bundling the configured values for one endpoint.
        The values are resolved once, at construction time; later changes to
        the environment are not reflected in an existing instance.
    """

    def __init__(self, key=None, codec=None, drain_interval=None):

        self.key = key
        self.codec = codec
        self.drain_interval = drain_interval


    def __repr__(self):

        if self.key is None:
            key = 'null'
        else:
            key = '%d bytes' % (len(self.key))

        return 'Settings(key=%s, codec=%r, drain_interval=%r)' % (key, self.codec, self.drain_interval)


    @classmethod
    def from_environment(cls):
        """ Build a :class:`Settings` instance from the environment, as
            described in the module documentation.
        """

        return cls(key(), codec_name(), drain_interval())


    def make_codec(self):
        """ Return a codec instance for the configured codec name.
        """

        return codec.get(self.codec or default_codec)


# end of class Settings



def directory(default=None):
    """ Return the directory location where we should be loading and/or saving
        configuration files. This defaults to ``$HOME/.pipestream``, but can be
        overridden by calling this method with a valid path, or by setting
        the ``PIPESTREAM_HOME`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        if os.path.exists(default):
            pass
        else:
            os.makedirs(default, mode=0o700)

        os.environ['PIPESTREAM_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['PIPESTREAM_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('PIPESTREAM_HOME and HOME environment variables not set, cannot determine pipestream configuration directory')

    found = os.path.join(home, '.pipestream')

    directory.found = found
    return found

directory.found = None



def key(default=None):
    """ Return the shared encryption key, or None if no key is configured,
        which means the endpoint runs in plaintext mode. A *default* key, if
        provided, takes precedence over everything else. Otherwise the key is
        taken from the ``PIPESTREAM_KEY`` environment variable (hex), then
        from the file named by ``PIPESTREAM_KEYFILE``, then from the ``key``
        file in the :func:`directory`, if it exists. An empty or blank
        ``PIPESTREAM_KEY`` counts as unset, as it does for the codec.

        Whatever the source, the key is validated before it is returned;
        an invalid key raises :class:`pipestream.errors.EncryptError`.
    """

    if default is not None:
        cipher.validate_key(default)
        return bytes(default)

    found = None
    hexed = os.environ.get('PIPESTREAM_KEY', '').strip()

    if hexed != '':
        try:
            found = binascii.unhexlify(hexed)
        except (binascii.Error, ValueError):
            raise ValueError('PIPESTREAM_KEY is not a valid hex string')

    if found is None:
        try:
            filename = os.environ['PIPESTREAM_KEYFILE']
        except KeyError:
            filename = os.path.join(directory(), 'key')
            if os.path.exists(filename):
                found = _read_keyfile(filename)
        else:
            found = _read_keyfile(filename)

    if found is not None:
        cipher.validate_key(found)

    return found



def _read_keyfile(filename):

    with open(filename, 'rb') as keyfile:
        contents = keyfile.read()

    return contents



def codec_name():
    """ Return the name of the configured payload codec.
    """

    name = os.environ.get('PIPESTREAM_CODEC', default_codec)
    name = name.strip().lower()

    if name == '':
        name = default_codec

    return name



def drain_interval():
    """ Return the number of seconds to sleep between checks when waiting
        for a peer to drain the pipe.
    """

    try:
        interval = os.environ['PIPESTREAM_DRAIN_INTERVAL']
    except KeyError:
        return default_drain_interval

    interval = float(interval)

    if interval <= 0:
        raise ValueError('PIPESTREAM_DRAIN_INTERVAL must be positive')

    return interval


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
