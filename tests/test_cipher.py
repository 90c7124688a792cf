import os
import pytest
from cryptography.exceptions import InternalError, UnsupportedAlgorithm

import pipestream
from pipestream import cipher


@pytest.mark.parametrize('key_size', (16, 24, 32))
@pytest.mark.parametrize('size', (0, 1, 15, 16, 17, 1000))
def test_encrypt_and_decrypt(key_size, size):

    key = os.urandom(key_size)
    plaintext = os.urandom(size)

    body = cipher.encrypt(plaintext, key)

    assert len(body) == cipher.encrypted_size(size)
    assert (len(body) - cipher.iv_size) % cipher.block_size == 0
    assert cipher.decrypt(body, key) == plaintext


def test_encrypted_size():

    # PKCS7 always pads, so a whole block of plaintext gains a whole block.

    assert cipher.encrypted_size(0) == 32
    assert cipher.encrypted_size(10) == 32
    assert cipher.encrypted_size(15) == 32
    assert cipher.encrypted_size(16) == 48
    assert cipher.encrypted_size(17) == 48


def test_nondeterministic(key):

    plaintext = b'the same message, twice'

    first = cipher.encrypt(plaintext, key)
    second = cipher.encrypt(plaintext, key)

    assert first[:16] != second[:16]
    assert first[16:] != second[16:]

    assert cipher.decrypt(first, key) == plaintext
    assert cipher.decrypt(second, key) == plaintext


def test_wrong_key(key):
    """ CBC with PKCS7 padding cannot always detect a wrong key. Most of the
        time the padding check fails; when it happens to pass, the result is
        not the original plaintext. Either way, nothing silently comes back
        as the original message.
    """

    plaintext = b'secret payload'
    wrong = bytes(reversed(key))

    failures = 0

    for attempt in range(50):
        body = cipher.encrypt(plaintext, key)
        try:
            decrypted = cipher.decrypt(body, wrong)
        except pipestream.DecryptError:
            failures += 1
        else:
            assert decrypted != plaintext

    assert failures > 0


@pytest.mark.parametrize('bad_key', (b'', b'short', bytes(15), bytes(33), bytes(64)))
def test_invalid_key(bad_key):

    with pytest.raises(pipestream.EncryptError):
        cipher.encrypt(b'data', bad_key)

    with pytest.raises(pipestream.DecryptError):
        cipher.decrypt(bytes(32), bad_key)


def test_key_type():

    with pytest.raises(pipestream.EncryptError):
        cipher.validate_key('0123456789abcdef')

    with pytest.raises(pipestream.EncryptError):
        cipher.validate_key(None)

    cipher.validate_key(bytearray(16))


def test_malformed_bodies(key):

    with pytest.raises(pipestream.DecryptError):
        cipher.decrypt(b'', key)

    with pytest.raises(pipestream.DecryptError):
        cipher.decrypt(bytes(16), key)

    with pytest.raises(pipestream.DecryptError):
        cipher.decrypt(bytes(16 + 17), key)


@pytest.mark.parametrize('failure', (UnsupportedAlgorithm('no AES backend'), InternalError('backend fault', [])))
def test_backend_failures(key, monkeypatch, failure):

    body = cipher.encrypt(b'data', key)

    def failing(*args, **kwargs):
        raise failure

    monkeypatch.setattr(cipher, 'Cipher', failing)

    with pytest.raises(pipestream.EncryptError):
        cipher.encrypt(b'data', key)

    with pytest.raises(pipestream.DecryptError):
        cipher.decrypt(body, key)


def test_generate_key():

    key = cipher.generate_key()
    assert len(key) == 32
    assert key != cipher.generate_key()

    assert len(cipher.generate_key(16)) == 16

    with pytest.raises(ValueError):
        cipher.generate_key(20)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
