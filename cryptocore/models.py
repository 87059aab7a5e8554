# --------------------------------------------------------------
# File: models.py
# Description: Modelos de los formatos serializados producidos por la capa criptográfica.
# --------------------------------------------------------------
"""Modelos Pydantic que encapsulan los sobres y tokens intercambiados."""

from __future__ import annotations

import base64
import binascii
from typing import List, Optional

from pydantic import BaseModel

from cryptocore.errors import FormatError, IntegrityError

DELIMITER = "#"

PASSWORD_TAG = "cryptocore::hash"
ARGON2_PASSWORD_TAG = "cryptocore::argon2"
SYMMETRIC_TAG = "cryptocore::symmetric"
SYMMETRIC_AEAD_TAG = "cryptocore::symmetric-gcm"
PUBLIC_TAG = "cryptocore::public"

SALT_LENGTH = 5
DIGEST_LENGTH = 40
HEX_DIGITS = frozenset("0123456789abcdef")


def b64(data: bytes) -> str:
    """Codifica datos binarios en Base64 estándar con relleno."""

    return base64.b64encode(data).decode("ascii")


def unb64(value: str) -> bytes:
    """Decodifica Base64 estricto y canónico.

    Los caracteres fuera del alfabeto o el relleno mal colocado son un error
    de formato. Una codificación no canónica (bits de relleno distintos de
    cero) representa los mismos bytes con otro texto, así que se trata como
    manipulación del sobre.

    Args:
        value (str): Campo codificado.

    Returns:
        bytes: Datos decodificados.

    Raises:
        FormatError: Si el campo no es Base64 válido.
        IntegrityError: Si el campo no está en su forma canónica.

    """
    if value == "":
        return b""
    try:
        raw = binascii.a2b_base64(value.encode("ascii"), strict_mode=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise FormatError("El sobre contiene un campo Base64 inválido") from exc
    if b64(raw) != value:
        raise IntegrityError("El texto cifrado parece haber sido manipulado o estar corrupto")
    return raw


def split_fields(serialized: str, expected: int, tags: List[str]) -> List[str]:
    """Separa un sobre en sus campos comprobando número y etiqueta.

    Args:
        serialized (str): Sobre recibido.
        expected (int): Número exacto de campos.
        tags (List[str]): Etiquetas aceptadas para el primer campo.

    Returns:
        List[str]: Campos del sobre, etiqueta incluida.

    Raises:
        FormatError: Si el sobre no es una cadena, el número de campos no
        coincide o la etiqueta es desconocida.

    """
    if not isinstance(serialized, str):
        raise FormatError("El sobre debe ser una cadena de texto")
    fields = serialized.split(DELIMITER)
    if len(fields) != expected or fields[0] not in tags:
        raise FormatError(
            "El texto cifrado no parece haber sido generado por cryptocore"
        )
    return fields


class PasswordToken(BaseModel):
    """Token verificable de una contraseña.

    Attributes:
        tag (str): Etiqueta del esquema.
        salt (str): Sal de 5 caracteres (esquema ``legacy``) o vacía.
        digest (str): Digest hexadecimal o hash Argon2 codificado.

    """

    tag: str = PASSWORD_TAG
    salt: str = ""
    digest: str

    def serialize(self) -> str:
        if self.tag == ARGON2_PASSWORD_TAG:
            return DELIMITER.join([self.tag, self.digest])
        return DELIMITER.join([self.tag, self.salt, self.digest])

    @classmethod
    def parse(cls, serialized: str) -> Optional["PasswordToken"]:
        """Interpreta un token; devuelve ``None`` si está mal formado."""

        if not isinstance(serialized, str):
            return None

        if serialized.startswith(ARGON2_PASSWORD_TAG + DELIMITER):
            encoded = serialized[len(ARGON2_PASSWORD_TAG) + 1 :]
            if not encoded.startswith("$argon2"):
                return None
            return cls(tag=ARGON2_PASSWORD_TAG, digest=encoded)

        # La sal ocupa una posición fija tras la etiqueta.
        offset = len(PASSWORD_TAG) + 1
        if len(serialized) != offset + SALT_LENGTH + 1 + DIGEST_LENGTH:
            return None
        if not serialized.startswith(PASSWORD_TAG + DELIMITER):
            return None
        salt = serialized[offset : offset + SALT_LENGTH]
        separator = serialized[offset + SALT_LENGTH]
        digest = serialized[offset + SALT_LENGTH + 1 :]
        if separator != DELIMITER or DELIMITER in salt:
            return None
        if not set(digest) <= HEX_DIGITS:
            return None
        return cls(tag=PASSWORD_TAG, salt=salt, digest=digest)


class SymmetricEnvelope(BaseModel):
    """Sobre de cifrado simétrico de cuatro campos.

    Attributes:
        tag (str): ``cryptocore::symmetric`` o ``cryptocore::symmetric-gcm``.
        iv (bytes): IV cifrado (legacy) o nonce (AEAD).
        ciphertext (bytes): Datos cifrados, misma longitud que el claro.
        mac (bytes): HMAC-SHA256 (legacy) o etiqueta GCM (AEAD).

    """

    tag: str = SYMMETRIC_TAG
    iv: bytes
    ciphertext: bytes
    mac: bytes

    def serialize(self) -> str:
        return DELIMITER.join([self.tag, b64(self.iv), b64(self.ciphertext), b64(self.mac)])

    @classmethod
    def parse(cls, serialized: str) -> "SymmetricEnvelope":
        tag, iv, ciphertext, mac = split_fields(
            serialized, 4, [SYMMETRIC_TAG, SYMMETRIC_AEAD_TAG]
        )
        return cls(tag=tag, iv=unb64(iv), ciphertext=unb64(ciphertext), mac=unb64(mac))


class AsymmetricEnvelope(BaseModel):
    """Sobre de cifrado de clave pública de dos campos."""

    tag: str = PUBLIC_TAG
    ciphertext: bytes

    def serialize(self) -> str:
        return DELIMITER.join([self.tag, b64(self.ciphertext)])

    @classmethod
    def parse(cls, serialized: str) -> "AsymmetricEnvelope":
        tag, ciphertext = split_fields(serialized, 2, [PUBLIC_TAG])
        return cls(tag=tag, ciphertext=unb64(ciphertext))
