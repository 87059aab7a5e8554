# --------------------------------------------------------------
# File: config.py
# Description: Parámetros configurables del paquete leídos del entorno.
# --------------------------------------------------------------
"""Carga de configuración desde variables de entorno y fichero ``.env``."""

from __future__ import annotations

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from cryptocore.errors import InvalidArgumentError

load_dotenv()

ENV_PREFIX = "CRYPTOCORE_"


class CryptoSettings(BaseModel):
    """Parámetros que seleccionan esquemas y costes de las operaciones.

    Attributes:
        symmetric_scheme (str): ``legacy`` (CFB + HMAC) o ``aead`` (AES-GCM).
        password_scheme (str): ``legacy`` (SHA-1 iterado) o ``argon2``.
        rsa_padding (str): ``oaep`` o ``pkcs1v15`` para el cifrado RSA.
        argon2_time_cost (int): Iteraciones Argon2id.
        argon2_memory_cost (int): Memoria Argon2id en KiB.
        argon2_parallelism (int): Hilos Argon2id.

    """

    symmetric_scheme: Literal["legacy", "aead"] = "legacy"
    password_scheme: Literal["legacy", "argon2"] = "legacy"
    rsa_padding: Literal["oaep", "pkcs1v15"] = "oaep"
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 64 * 1024
    argon2_parallelism: int = 1


def load_settings() -> CryptoSettings:
    """Construye la configuración vigente a partir del entorno.

    Returns:
        CryptoSettings: Configuración validada.

    Raises:
        InvalidArgumentError: Si alguna variable tiene un valor no admitido.

    """
    raw = {}
    for field in CryptoSettings.model_fields:
        value = os.getenv(ENV_PREFIX + field.upper())
        if value is not None and value.strip():
            raw[field] = value.strip().lower()

    try:
        return CryptoSettings(**raw)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Configuración de cryptocore inválida: {exc}") from exc
