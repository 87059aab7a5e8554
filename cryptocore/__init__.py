# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública de utilidades criptográficas del paquete cryptocore.
# --------------------------------------------------------------
"""Inicializa el paquete `cryptocore` y reexporta sus operaciones públicas."""

from cryptocore.crypto_asym import public_key_decrypt, public_key_encrypt
from cryptocore.crypto_sym import (
    symmetric_key_decrypt,
    symmetric_key_decrypt_text,
    symmetric_key_encrypt,
)
from cryptocore.errors import (
    AuthenticationError,
    CryptoCoreError,
    CryptoEnvironmentError,
    FormatError,
    IntegrityError,
    InvalidArgumentError,
    KeyFileNotFoundError,
    KeyFilePermissionError,
)
from cryptocore.password import check_password_hash, hash_password, needs_rehash
from cryptocore.random_string import RandomAlphabet, generate_random_string

__all__ = [
    "AuthenticationError",
    "CryptoCoreError",
    "CryptoEnvironmentError",
    "FormatError",
    "IntegrityError",
    "InvalidArgumentError",
    "KeyFileNotFoundError",
    "KeyFilePermissionError",
    "RandomAlphabet",
    "check_password_hash",
    "generate_random_string",
    "hash_password",
    "needs_rehash",
    "public_key_decrypt",
    "public_key_encrypt",
    "symmetric_key_decrypt",
    "symmetric_key_decrypt_text",
    "symmetric_key_encrypt",
]
