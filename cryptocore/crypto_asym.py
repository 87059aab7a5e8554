# --------------------------------------------------------------
# File: crypto_asym.py
# Description: Cifrado de clave pública con certificados X.509 y claves PEM.
# --------------------------------------------------------------
"""Envoltorio RSA para cifrar con un certificado y descifrar con la clave privada."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from cryptocore.config import load_settings
from cryptocore.crypto_kdf import wipe
from cryptocore.errors import (
    AuthenticationError,
    CryptoEnvironmentError,
    FormatError,
    IntegrityError,
    InvalidArgumentError,
    KeyFileNotFoundError,
    KeyFilePermissionError,
)
from cryptocore.models import PUBLIC_TAG, AsymmetricEnvelope

logger = logging.getLogger(__name__)

KeySource = Union[str, os.PathLike, bytes]

__all__ = [
    "load_private_key",
    "load_public_key",
    "public_key_decrypt",
    "public_key_encrypt",
    "verify_public_key_environment",
]


def _padding(name: Optional[str] = None) -> padding.AsymmetricPadding:
    """Devuelve el relleno RSA configurado (OAEP-SHA256 por defecto)."""

    name = name or load_settings().rsa_padding
    if name == "pkcs1v15":
        return padding.PKCS1v15()
    if name == "oaep":
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA256()),
            algorithm=hashes.SHA256(),
            label=None,
        )
    raise InvalidArgumentError(f"Relleno RSA desconocido: {name!r}")


def verify_public_key_environment(rsa_padding: Optional[padding.AsymmetricPadding] = None) -> None:
    """Comprueba que el backend admite cifrado RSA con el relleno indicado.

    Raises:
        CryptoEnvironmentError: Si el backend no ofrece el relleno requerido.

    """
    rsa_padding = rsa_padding or _padding()
    if not default_backend().rsa_encryption_supported(rsa_padding):
        raise CryptoEnvironmentError(
            f"El cifrado RSA con relleno {rsa_padding.name} no está disponible"
        )


def _read_key_file(source: KeySource, description: str) -> bytes:
    """Lee material de clave desde bytes en memoria o desde una ruta."""

    if isinstance(source, (bytes, bytearray)):
        return bytes(source)

    path = Path(source)
    if not path.is_file():
        raise KeyFileNotFoundError(f"La ruta al {description} indicada no es válida: {path}")
    if not os.access(path, os.R_OK):
        raise KeyFilePermissionError(f"El {description} indicado no se puede leer: {path}")
    try:
        with open(path, "rb") as handler:
            return handler.read()
    except FileNotFoundError as exc:
        raise KeyFileNotFoundError(f"La ruta al {description} indicada no es válida: {path}") from exc
    except PermissionError as exc:
        raise KeyFilePermissionError(f"El {description} indicado no se puede leer: {path}") from exc


def load_public_key(public_cert: KeySource) -> rsa.RSAPublicKey:
    """Carga la clave pública RSA de un certificado X.509 (PEM o DER).

    También se admite una clave pública PEM ``SubjectPublicKeyInfo``.

    Args:
        public_cert (str | PathLike | bytes): Ruta o contenido del certificado.

    Returns:
        rsa.RSAPublicKey: Clave pública lista para cifrar.

    Raises:
        KeyFileNotFoundError: Si la ruta no existe.
        KeyFilePermissionError: Si el fichero no se puede leer.
        FormatError: Si el contenido no es un certificado RSA válido.

    """
    data = _read_key_file(public_cert, "certificado X.509")

    public_key = None
    for loader in (x509.load_pem_x509_certificate, x509.load_der_x509_certificate):
        try:
            public_key = loader(data).public_key()
            break
        except ValueError:
            continue
    if public_key is None:
        try:
            public_key = serialization.load_pem_public_key(data)
        except (ValueError, TypeError) as exc:
            raise FormatError("El certificado X.509 indicado no se puede interpretar") from exc

    if not isinstance(public_key, rsa.RSAPublicKey):
        raise FormatError("El certificado indicado no contiene una clave pública RSA")
    return public_key


def load_private_key(
    private_key: KeySource, passphrase: Optional[Union[str, bytes]] = None
) -> rsa.RSAPrivateKey:
    """Carga una clave privada RSA en formato PEM, descifrándola si procede.

    Args:
        private_key (str | PathLike | bytes): Ruta o contenido PEM.
        passphrase (Optional[str | bytes]): Passphrase de la clave privada.

    Returns:
        rsa.RSAPrivateKey: Clave privada lista para descifrar.

    Raises:
        KeyFileNotFoundError: Si la ruta no existe.
        KeyFilePermissionError: Si el fichero no se puede leer.
        AuthenticationError: Si la passphrase es incorrecta o la clave no es utilizable.

    """
    data = _read_key_file(private_key, "clave privada PEM")

    password = None
    if passphrase:
        password = bytearray(
            passphrase.encode("utf-8") if isinstance(passphrase, str) else passphrase
        )
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        logger.warning("Clave privada rechazada: passphrase incorrecta o clave inutilizable")
        raise AuthenticationError(
            "La passphrase indicada no parece válida para la clave privada indicada"
        ) from exc
    finally:
        if password is not None:
            wipe(password)

    if not isinstance(key, rsa.RSAPrivateKey):
        raise AuthenticationError("La clave privada indicada no es una clave RSA utilizable")
    return key


def public_key_encrypt(
    plaintext: Union[str, bytes], public_cert: KeySource, *, rsa_padding: Optional[str] = None
) -> str:
    """Cifra datos con la clave pública de un certificado X.509.

    El tamaño del claro está limitado por el módulo RSA; no se trocea.

    Args:
        plaintext (str | bytes): Contenido a cifrar; las cadenas se codifican en UTF-8.
        public_cert (str | PathLike | bytes): Ruta o contenido del certificado.
        rsa_padding (Optional[str]): ``oaep`` o ``pkcs1v15``; por defecto el configurado.

    Returns:
        str: Sobre ``cryptocore::public#<ciphertext>`` en Base64.

    Raises:
        InvalidArgumentError: Si el claro no es str/bytes o excede el módulo RSA.

    """
    pad = _padding(rsa_padding)
    verify_public_key_environment(pad)

    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")
    elif not isinstance(plaintext, (bytes, bytearray)):
        raise InvalidArgumentError("El texto en claro debe ser str o bytes")
    public_key = load_public_key(public_cert)

    try:
        ciphertext = public_key.encrypt(bytes(plaintext), pad)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"El texto en claro ({len(plaintext)} bytes) excede lo que admite "
            f"una clave RSA de {public_key.key_size} bits"
        ) from exc

    logger.debug("Cifrado RSA-%d de %d bytes", public_key.key_size, len(plaintext))
    return AsymmetricEnvelope(tag=PUBLIC_TAG, ciphertext=ciphertext).serialize()


def public_key_decrypt(
    ciphertext: str,
    private_key: KeySource,
    passphrase: Optional[Union[str, bytes]] = None,
    *,
    rsa_padding: Optional[str] = None,
) -> bytes:
    """Descifra un sobre producido por :func:`public_key_encrypt`.

    Args:
        ciphertext (str): Sobre serializado.
        private_key (str | PathLike | bytes): Ruta o contenido PEM de la clave privada.
        passphrase (Optional[str | bytes]): Passphrase de la clave privada.
        rsa_padding (Optional[str]): Relleno usado al cifrar.

    Returns:
        bytes: Contenido original.

    Raises:
        AuthenticationError: Si la passphrase es incorrecta.
        FormatError: Si el sobre no tiene dos campos o la etiqueta no coincide.
        IntegrityError: Si el texto cifrado no corresponde a la clave privada.

    """
    pad = _padding(rsa_padding)
    verify_public_key_environment(pad)

    key = load_private_key(private_key, passphrase)
    envelope = AsymmetricEnvelope.parse(ciphertext)

    try:
        plaintext = key.decrypt(envelope.ciphertext, pad)
    except ValueError as exc:
        logger.warning("Sobre RSA rechazado: no se pudo descifrar")
        raise IntegrityError(
            "El texto cifrado parece haber sido manipulado o no corresponde a la clave"
        ) from exc

    logger.debug("Descifrado RSA-%d de %d bytes", key.key_size, len(plaintext))
    return plaintext
