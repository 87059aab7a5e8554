# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Cifrado simétrico autenticado con sobre autodescriptivo.
# --------------------------------------------------------------
"""Rutinas de cifrado simétrico para proteger datos opacos.

Se soportan dos esquemas, seleccionables por configuración:

* ``legacy``: AES-256-CFB con IV cifrado en AES-256-ECB y HMAC-SHA256
  (encrypt-then-MAC) sobre ``IV cifrado || ciphertext``.
* ``aead``: AES-256-GCM con clave derivada mediante HKDF-SHA256.

El descifrado acepta siempre ambos esquemas según la etiqueta del sobre.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
from typing import Optional, Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.decrepit.ciphers.modes import CFB
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from cryptocore.config import load_settings
from cryptocore.crypto_kdf import derive_aead_key, secret_to_bytes, truncate_key, wipe
from cryptocore.errors import (
    CryptoEnvironmentError,
    FormatError,
    IntegrityError,
    InvalidArgumentError,
)
from cryptocore.models import SYMMETRIC_AEAD_TAG, SYMMETRIC_TAG, SymmetricEnvelope

logger = logging.getLogger(__name__)

MIN_SECRET_LENGTH = 8
KEY_SIZE = 32  # AES-256
IV_SIZE = 16  # bloque AES
NONCE_SIZE = 12  # nonce GCM de 96 bits
TAG_SIZE = 16

Secret = Union[str, bytes, bytearray]

__all__ = [
    "aes_gcm_decrypt_with_key",
    "aes_gcm_encrypt_with_key",
    "symmetric_key_decrypt",
    "symmetric_key_decrypt_text",
    "symmetric_key_encrypt",
    "verify_symmetric_environment",
]


def verify_symmetric_environment() -> None:
    """Comprueba que el backend ofrece las primitivas necesarias.

    Raises:
        CryptoEnvironmentError: Si falta algún modo AES o HMAC-SHA256.

    """
    backend = default_backend()
    zero_key = bytes(KEY_SIZE)
    required = [
        ("AES-256-CFB", CFB(bytes(IV_SIZE))),
        ("AES-256-ECB", modes.ECB()),
        ("AES-256-GCM", modes.GCM(bytes(NONCE_SIZE))),
    ]
    for name, mode in required:
        if not backend.cipher_supported(algorithms.AES(zero_key), mode):
            raise CryptoEnvironmentError(
                f"El cifrador {name} no está disponible en el backend criptográfico"
            )
    if not backend.hmac_supported(hashes.SHA256()):
        raise CryptoEnvironmentError("HMAC-SHA256 no está disponible en el backend criptográfico")


def aes_gcm_encrypt_with_key(
    key: Union[bytes, bytearray], plaintext: bytes, aad: Optional[bytes] = None
) -> Tuple[bytes, bytes, bytes]:
    """Cifra datos con AES-GCM utilizando una clave proporcionada.

    Args:
        key (bytes): Clave simétrica de 128, 192 o 256 bits.
        plaintext (bytes): Datos a cifrar.
        aad (Optional[bytes]): Datos autenticados adicionales.

    Returns:
        Tuple[bytes, bytes, bytes]: Ciphertext sin etiqueta, nonce y tag.

    """

    nonce = os.urandom(NONCE_SIZE)
    aes = AESGCM(key)
    ct_full = aes.encrypt(nonce, plaintext, aad)
    return ct_full[:-TAG_SIZE], nonce, ct_full[-TAG_SIZE:]


def aes_gcm_decrypt_with_key(
    key: Union[bytes, bytearray],
    nonce: bytes,
    ciphertext: bytes,
    tag: bytes,
    aad: Optional[bytes] = None,
) -> bytes:
    """Descifra datos con AES-GCM utilizando la clave simétrica proporcionada.

    Args:
        key (bytes): Clave simétrica que protege los datos.
        nonce (bytes): Vector de inicialización de 96 bits.
        ciphertext (bytes): Datos cifrados sin etiqueta.
        tag (bytes): Etiqueta de autenticación de 128 bits.
        aad (Optional[bytes]): Datos autenticados adicionales.

    Returns:
        bytes: Mensaje original en claro.

    """

    aes = AESGCM(key)
    return aes.decrypt(nonce, ciphertext + tag, aad)


def _mac(secret: bytes, encrypted_iv: bytes, ciphertext: bytes) -> bytes:
    return hmac.new(secret, encrypted_iv + ciphertext, hashlib.sha256).digest()


def _check_secret(secret_key: Secret) -> bytes:
    secret = secret_to_bytes(secret_key)
    if len(secret) < MIN_SECRET_LENGTH:
        raise InvalidArgumentError(
            "La clave secreta no cumple el mínimo de "
            f"{MIN_SECRET_LENGTH} caracteres de longitud"
        )
    return secret


def _legacy_encrypt(plaintext: bytes, secret: bytes) -> SymmetricEnvelope:
    key = truncate_key(secret, KEY_SIZE)
    try:
        iv = os.urandom(IV_SIZE)

        # El IV se guarda cifrado; ECB basta para un único bloque aleatorio.
        iv_encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
        encrypted_iv = iv_encryptor.update(iv) + iv_encryptor.finalize()

        # CFB no añade relleno: el claro recuperado tiene la longitud exacta.
        encryptor = Cipher(algorithms.AES(key), CFB(iv)).encryptor()
        ciphertext = encryptor.update(plaintext) + encryptor.finalize()
    finally:
        wipe(key)

    return SymmetricEnvelope(
        tag=SYMMETRIC_TAG,
        iv=encrypted_iv,
        ciphertext=ciphertext,
        mac=_mac(secret, encrypted_iv, ciphertext),
    )


def _legacy_decrypt(envelope: SymmetricEnvelope, secret: bytes) -> bytes:
    expected = _mac(secret, envelope.iv, envelope.ciphertext)
    if not hmac.compare_digest(expected, envelope.mac):
        logger.warning("Sobre simétrico rechazado: el MAC no coincide")
        raise IntegrityError("El texto cifrado parece haber sido manipulado o estar corrupto")

    if len(envelope.iv) != IV_SIZE:
        raise FormatError(f"El IV cifrado debe ocupar {IV_SIZE} bytes")

    key = truncate_key(secret, KEY_SIZE)
    try:
        iv_decryptor = Cipher(algorithms.AES(key), modes.ECB()).decryptor()
        iv = iv_decryptor.update(envelope.iv) + iv_decryptor.finalize()

        decryptor = Cipher(algorithms.AES(key), CFB(iv)).decryptor()
        return decryptor.update(envelope.ciphertext) + decryptor.finalize()
    finally:
        wipe(key)


def _aead_encrypt(plaintext: bytes, secret: bytes) -> SymmetricEnvelope:
    key = derive_aead_key(secret, length=KEY_SIZE)
    try:
        ciphertext, nonce, tag = aes_gcm_encrypt_with_key(key, plaintext)
    finally:
        wipe(key)
    return SymmetricEnvelope(tag=SYMMETRIC_AEAD_TAG, iv=nonce, ciphertext=ciphertext, mac=tag)


def _aead_decrypt(envelope: SymmetricEnvelope, secret: bytes) -> bytes:
    key = derive_aead_key(secret, length=KEY_SIZE)
    try:
        return aes_gcm_decrypt_with_key(key, envelope.iv, envelope.ciphertext, envelope.mac)
    except (InvalidTag, ValueError) as exc:
        logger.warning("Sobre simétrico rechazado: la etiqueta GCM no coincide")
        raise IntegrityError(
            "El texto cifrado parece haber sido manipulado o estar corrupto"
        ) from exc
    finally:
        wipe(key)


def symmetric_key_encrypt(
    plaintext: Union[str, bytes], secret_key: Secret, *, scheme: Optional[str] = None
) -> str:
    """Cifra datos con la clave secreta y devuelve un sobre autodescriptivo.

    Args:
        plaintext (str | bytes): Contenido a cifrar; las cadenas se codifican en UTF-8.
        secret_key (str | bytes): Clave secreta de al menos 8 bytes.
        scheme (Optional[str]): ``legacy`` o ``aead``; por defecto el configurado.

    Returns:
        str: Sobre ``<etiqueta>#<iv>#<ciphertext>#<mac>`` en Base64.

    Raises:
        InvalidArgumentError: Si la clave es demasiado corta o el esquema no existe.
        CryptoEnvironmentError: Si el backend no ofrece las primitivas necesarias.

    """
    secret = _check_secret(secret_key)
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")
    elif not isinstance(plaintext, (bytes, bytearray)):
        raise InvalidArgumentError("El texto en claro debe ser str o bytes")

    scheme = scheme or load_settings().symmetric_scheme
    if scheme not in ("legacy", "aead"):
        raise InvalidArgumentError(f"Esquema simétrico desconocido: {scheme!r}")

    verify_symmetric_environment()

    if scheme == "aead":
        envelope = _aead_encrypt(bytes(plaintext), secret)
    else:
        envelope = _legacy_encrypt(bytes(plaintext), secret)

    logger.debug("Cifrado simétrico %s de %d bytes", envelope.tag, len(plaintext))
    return envelope.serialize()


def symmetric_key_decrypt(ciphertext: str, secret_key: Secret) -> bytes:
    """Descifra un sobre producido por :func:`symmetric_key_encrypt`.

    La integridad se verifica siempre antes de descifrar.

    Args:
        ciphertext (str): Sobre serializado.
        secret_key (str | bytes): Clave secreta usada al cifrar.

    Returns:
        bytes: Contenido original, con su longitud exacta.

    Raises:
        InvalidArgumentError: Si la clave es demasiado corta.
        CryptoEnvironmentError: Si el backend no ofrece las primitivas necesarias.
        FormatError: Si el sobre no tiene cuatro campos o la etiqueta es desconocida.
        IntegrityError: Si el MAC o la etiqueta GCM no coinciden.

    """
    secret = _check_secret(secret_key)
    verify_symmetric_environment()

    envelope = SymmetricEnvelope.parse(ciphertext)
    if envelope.tag == SYMMETRIC_AEAD_TAG:
        plaintext = _aead_decrypt(envelope, secret)
    else:
        plaintext = _legacy_decrypt(envelope, secret)

    logger.debug("Descifrado simétrico %s de %d bytes", envelope.tag, len(plaintext))
    return plaintext


def symmetric_key_decrypt_text(
    ciphertext: str, secret_key: Secret, encoding: str = "utf-8"
) -> str:
    """Descifra un sobre y decodifica el resultado como texto."""

    return symmetric_key_decrypt(ciphertext, secret_key).decode(encoding)
