# --------------------------------------------------------------
# File: crypto_kdf.py
# Description: Obtención de claves de cifrado a partir del secreto del llamante.
# --------------------------------------------------------------
"""Funciones de derivación y borrado de claves simétricas."""

from __future__ import annotations

from typing import Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from cryptocore.errors import InvalidArgumentError

AEAD_INFO = b"cryptocore symmetric aead"


def secret_to_bytes(secret: Union[str, bytes, bytearray]) -> bytes:
    """Normaliza el secreto del llamante a bytes (UTF-8 para cadenas)."""

    if isinstance(secret, str):
        return secret.encode("utf-8")
    if isinstance(secret, (bytes, bytearray, memoryview)):
        return bytes(secret)
    raise InvalidArgumentError("La clave secreta debe ser str o bytes")


def truncate_key(secret: bytes, size: int) -> bytearray:
    """Recorta el secreto al tamaño de clave del cifrador.

    Si el secreto es más corto se completa con ceros, igual que hace
    libmcrypt con las claves cortas.

    Args:
        secret (bytes): Secreto proporcionado por el llamante.
        size (int): Tamaño de clave requerido en bytes.

    Returns:
        bytearray: Clave lista para el cifrador; debe borrarse con :func:`wipe`.

    """

    key = bytearray(size)
    chunk = secret[:size]
    key[: len(chunk)] = chunk
    return key


def derive_aead_key(secret: bytes, *, length: int = 32) -> bytearray:
    """Deriva una clave AES-GCM con HKDF-SHA256.

    Args:
        secret (bytes): Secreto proporcionado por el llamante.
        length (int): Longitud en bytes de la clave resultante.

    Returns:
        bytearray: Clave derivada; debe borrarse con :func:`wipe`.

    """

    hkdf = HKDF(algorithm=hashes.SHA256(), length=length, salt=None, info=AEAD_INFO)
    return bytearray(hkdf.derive(secret))


def wipe(buffer: bytearray) -> None:
    """Sobrescribe con ceros un búfer de clave."""

    for index in range(len(buffer)):
        buffer[index] = 0
