""" Symmetric encryption of frame bodies. When a key is configured, each
    body on the wire is a freshly generated 16 byte initialization vector
    followed by the AES-CBC ciphertext of the PKCS7-padded plaintext::

        body := IV(16 bytes) || AES-CBC-Encrypt(key, IV, PKCS7(plaintext))

    The key length selects the AES variant: 16, 24, or 32 bytes for
    AES-128, AES-192, or AES-256.
"""

import os

from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import EncryptError, DecryptError


block_size = 16
iv_size = block_size
key_sizes = (16, 24, 32)


def validate_key(key):
    """ Raise :class:`EncryptError` if *key* is not a bytes-like object of
        a length AES accepts. A bad key is a configuration error, so this is
        checked as early as possible.
    """

    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise EncryptError('encryption key must be bytes, not ' + type(key).__name__)

    length = len(key)
    if length not in key_sizes:
        raise EncryptError('invalid AES key length: %d bytes (expected 16, 24, or 32)' % (length))



def generate_key(size=32):
    """ Return a new random key of *size* bytes, suitable for sharing
        between both ends of a pipe.
    """

    if size not in key_sizes:
        raise ValueError('invalid AES key size: %d' % (size))

    return os.urandom(size)



def encrypted_size(plaintext_size):
    """ Return the size of the body :func:`encrypt` produces for a plaintext
        of *plaintext_size* bytes. PKCS7 always adds at least one byte of
        padding, so an exact multiple of the block size gains a full block.
    """

    blocks = plaintext_size // block_size + 1
    return iv_size + blocks * block_size



def encrypt(plaintext, key):
    """ Encrypt *plaintext* with *key*, returning the IV followed by the
        ciphertext. Invalid keys and cipher failures raise
        :class:`EncryptError`; nothing is swallowed here.
    """

    validate_key(key)
    iv = os.urandom(iv_size)

    try:
        padder = padding.PKCS7(block_size * 8).padder()
        padded = padder.update(plaintext) + padder.finalize()

        encryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
    except (ValueError, TypeError, UnsupportedAlgorithm, InternalError) as e:
        raise EncryptError('encryption failed: ' + str(e)) from e

    return iv + ciphertext



def decrypt(body, key):
    """ Decrypt a *body* produced by :func:`encrypt`: the first block is the
        IV, the remainder is the ciphertext. Any structural problem with the
        body, or padding that does not validate after decryption, raises
        :class:`DecryptError`.

        Padding validation is the only integrity check CBC mode offers. A
        wrong key fails it most of the time, but roughly one time in 256 a
        wrong key produces a plausible final padding byte, and the returned
        plaintext is garbage. Codecs generally reject such garbage as well.
    """

    try:
        validate_key(key)
    except EncryptError as e:
        raise DecryptError(str(e)) from e

    body = bytes(body)
    length = len(body)

    if length < iv_size + block_size:
        raise DecryptError('encrypted body too short: %d bytes' % (length))

    if (length - iv_size) % block_size != 0:
        raise DecryptError('ciphertext is not a multiple of the block size: %d bytes' % (length - iv_size))

    iv = body[:iv_size]
    ciphertext = body[iv_size:]

    try:
        decryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(block_size * 8).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
    except (ValueError, TypeError, UnsupportedAlgorithm, InternalError) as e:
        raise DecryptError('decryption failed: ' + str(e)) from e

    return plaintext


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
