# --------------------------------------------------------------
# File: password.py
# Description: Hash y verificación de contraseñas con sal aleatoria.
# --------------------------------------------------------------
"""Funciones para generar y comprobar tokens de contraseña."""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Optional

from argon2 import PasswordHasher, exceptions as argon_exc

from cryptocore.config import CryptoSettings, load_settings
from cryptocore.errors import InvalidArgumentError
from cryptocore.models import (
    ARGON2_PASSWORD_TAG,
    PASSWORD_TAG,
    SALT_LENGTH,
    PasswordToken,
)
from cryptocore.random_string import RandomAlphabet, generate_random_string

logger = logging.getLogger(__name__)

# Número de rondas SHA-1 encadenadas sobre la sal inicial.
HASH_ROUNDS = 1000

__all__ = ["check_password_hash", "hash_password", "hash_with_salt", "needs_rehash"]


def _argon2_hasher(settings: CryptoSettings) -> PasswordHasher:
    """Crea el PasswordHasher Argon2id con los parámetros configurados."""

    return PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
        hash_len=32,
    )


def _sha1_hex(data: str) -> str:
    return hashlib.sha1(data.encode("utf-8")).hexdigest()


def hash_with_salt(source: str, salt: str) -> str:
    """Aplica el hash SHA-1 iterado y devuelve el token serializado.

    Args:
        source (str): Contraseña en claro.
        salt (str): Sal de 5 caracteres.

    Returns:
        str: Token ``cryptocore::hash#<sal>#<digest>``.

    """
    digest = _sha1_hex(salt + source)
    for i in range(HASH_ROUNDS):
        digest = _sha1_hex(digest + (source if i % 2 == 0 else salt))

    return PasswordToken(tag=PASSWORD_TAG, salt=salt, digest=digest).serialize()


def hash_password(password: str, *, scheme: Optional[str] = None) -> str:
    """Genera un token verificable para la contraseña.

    Args:
        password (str): Contraseña en claro.
        scheme (Optional[str]): ``legacy`` o ``argon2``; por defecto el configurado.

    Returns:
        str: Token listo para almacenar.

    Raises:
        InvalidArgumentError: Si la contraseña no es una cadena o el esquema no existe.

    """
    if not isinstance(password, str):
        raise InvalidArgumentError("La contraseña debe ser una cadena de texto")

    settings = load_settings()
    scheme = scheme or settings.password_scheme

    if scheme == "argon2":
        encoded = _argon2_hasher(settings).hash(password)
        return PasswordToken(tag=ARGON2_PASSWORD_TAG, digest=encoded).serialize()
    if scheme != "legacy":
        raise InvalidArgumentError(f"Esquema de contraseña desconocido: {scheme!r}")

    salt = generate_random_string(SALT_LENGTH, RandomAlphabet.ALPHANUMERIC)
    return hash_with_salt(password, salt)


def check_password_hash(password: str, token: str) -> bool:
    """Comprueba una contraseña contra un token.

    Nunca lanza excepciones por tokens mal formados: cualquier problema de
    formato se indica igual que una contraseña incorrecta.

    Args:
        password (str): Contraseña a comprobar.
        token (str): Token generado por :func:`hash_password`.

    Returns:
        bool: ``True`` si la contraseña corresponde al token.

    """
    if not isinstance(password, str):
        return False
    parsed = PasswordToken.parse(token)
    if parsed is None:
        logger.debug("Token de contraseña con formato no reconocido")
        return False

    if parsed.tag == ARGON2_PASSWORD_TAG:
        try:
            return _argon2_hasher(load_settings()).verify(parsed.digest, password)
        except argon_exc.VerifyMismatchError:
            return False
        except (argon_exc.VerificationError, argon_exc.InvalidHashError):
            logger.debug("Hash Argon2 no verificable")
            return False

    expected = hash_with_salt(password, parsed.salt)
    return hmac.compare_digest(expected.encode("utf-8"), token.encode("utf-8"))


def needs_rehash(token: str) -> bool:
    """Indica si el token debe regenerarse con el esquema configurado.

    Args:
        token (str): Token almacenado.

    Returns:
        bool: ``True`` si el esquema o los parámetros Argon2 han cambiado.

    """
    settings = load_settings()
    parsed = PasswordToken.parse(token)
    if parsed is None:
        return True
    if settings.password_scheme == "legacy":
        return parsed.tag != PASSWORD_TAG
    if parsed.tag != ARGON2_PASSWORD_TAG:
        return True
    try:
        return _argon2_hasher(settings).check_needs_rehash(parsed.digest)
    except argon_exc.InvalidHashError:
        return True
