# --------------------------------------------------------------
# File: errors.py
# Description: Jerarquía de excepciones tipadas del paquete cryptocore.
# --------------------------------------------------------------
"""Errores públicos que exponen las operaciones criptográficas.

Cada excepción declara un atributo ``kind`` para que el código cliente pueda
discriminar por categoría sin depender del nombre concreto de la clase.
"""

from __future__ import annotations

__all__ = [
    "AuthenticationError",
    "CryptoCoreError",
    "CryptoEnvironmentError",
    "FormatError",
    "IntegrityError",
    "InvalidArgumentError",
    "KeyFileNotFoundError",
    "KeyFilePermissionError",
]


class CryptoCoreError(Exception):
    """Base común para todos los errores de cryptocore."""

    kind = "crypto"


class InvalidArgumentError(CryptoCoreError, ValueError):
    """Argumento inválido: longitud, alfabeto o tamaño de clave incorrectos."""

    kind = "invalid_argument"


class CryptoEnvironmentError(CryptoCoreError, RuntimeError):
    """La primitiva criptográfica requerida no está disponible."""

    kind = "environment"


class FormatError(CryptoCoreError, ValueError):
    """El sobre recibido no respeta el formato esperado."""

    kind = "format"


class IntegrityError(CryptoCoreError):
    """El MAC no coincide: datos manipulados o corruptos."""

    kind = "integrity"


class AuthenticationError(CryptoCoreError):
    """Passphrase incorrecta o clave privada inutilizable."""

    kind = "authentication"


class KeyFileNotFoundError(CryptoCoreError, FileNotFoundError):
    """El fichero de clave o certificado no existe."""

    kind = "not_found"


class KeyFilePermissionError(CryptoCoreError, PermissionError):
    """El fichero de clave o certificado no se puede leer."""

    kind = "permission"
