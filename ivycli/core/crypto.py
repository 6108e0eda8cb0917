"""Passphrase based authenticated encryption for the history file.

Blob layout::

    salt (16 bytes) || nonce (12 bytes) || ciphertext + GCM tag (16 bytes)

The key is derived with PBKDF2-HMAC-SHA256 from the passphrase and the salt.
A fresh salt and nonce are drawn for every call to :func:`encrypt`.
"""
from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import CryptoError

SALT_SIZE = 16
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32
KDF_ITERATIONS = 100_000


def derive_key(passphrase: str, salt: bytes, iterations: int = KDF_ITERATIONS) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(passphrase.encode("utf-8"))


def encrypt(data: bytes, passphrase: str, iterations: int = KDF_ITERATIONS) -> bytes:
    """Return *data* sealed under a key derived from *passphrase*."""
    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    key = derive_key(passphrase, salt, iterations)
    return salt + nonce + AESGCM(key).encrypt(nonce, data, None)


def decrypt(blob: bytes, passphrase: str, iterations: int = KDF_ITERATIONS) -> bytes:
    """Return the plaintext sealed in *blob*.

    Raises :class:`CryptoError` if the blob is truncated, the passphrase is
    wrong or any byte was altered. Nothing is returned unless the tag verifies.
    """
    if len(blob) < SALT_SIZE + NONCE_SIZE + TAG_SIZE:
        raise CryptoError("history data too short")

    salt = blob[:SALT_SIZE]
    nonce = blob[SALT_SIZE:SALT_SIZE + NONCE_SIZE]
    ciphertext = blob[SALT_SIZE + NONCE_SIZE:]
    key = derive_key(passphrase, salt, iterations)
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except InvalidTag:
        raise CryptoError(
            "could not decrypt history (wrong passphrase or corrupted file)"
        ) from None
