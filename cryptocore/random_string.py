# --------------------------------------------------------------
# File: random_string.py
# Description: Generación de cadenas aleatorias sobre alfabetos fijos.
# --------------------------------------------------------------
"""Generador de cadenas aleatorias usado para las sales de contraseñas."""

from __future__ import annotations

import secrets
from enum import Enum
from typing import Union

from cryptocore.errors import InvalidArgumentError

__all__ = ["RandomAlphabet", "generate_random_string"]


class RandomAlphabet(str, Enum):
    """Alfabetos admitidos por :func:`generate_random_string`."""

    ALPHANUMERIC = "alphanumeric"
    ALPHA = "alpha"
    NUMERIC = "numeric"
    HEXADECIMAL = "hexadecimal"

    @property
    def characters(self) -> str:
        """Conjunto de caracteres asociado al alfabeto."""

        return _CHARACTERS[self]


_LOWER = "abcdefghijklmnopqrstuvwxyz"
_UPPER = _LOWER.upper()
_DIGITS = "0123456789"

_CHARACTERS = {
    RandomAlphabet.ALPHANUMERIC: _LOWER + _UPPER + _DIGITS,
    RandomAlphabet.ALPHA: _LOWER + _UPPER,
    RandomAlphabet.NUMERIC: _DIGITS,
    RandomAlphabet.HEXADECIMAL: "abcdef" + _DIGITS,
}


def generate_random_string(
    length: int, alphabet: Union[RandomAlphabet, str] = RandomAlphabet.ALPHANUMERIC
) -> str:
    """Devuelve una cadena aleatoria de la longitud indicada.

    Args:
        length (int): Número de caracteres, como mínimo 1.
        alphabet (RandomAlphabet | str): Alfabeto o su nombre.

    Returns:
        str: Cadena de ``length`` caracteres tomados uniformemente del alfabeto.

    Raises:
        InvalidArgumentError: Si la longitud es menor que 1 o el alfabeto no existe.

    """
    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise InvalidArgumentError(
            f"La longitud indicada, {length!r}, es menor que el mínimo de 1"
        )

    try:
        characters = RandomAlphabet(alphabet).characters
    except ValueError as exc:
        raise InvalidArgumentError(f"Tipo de cadena inválido: {alphabet!r}") from exc

    return "".join(secrets.choice(characters) for _ in range(length))
