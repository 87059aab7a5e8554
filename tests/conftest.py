# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas para aislar la configuración y generar material PKI.
# --------------------------------------------------------------

import os
from datetime import UTC, datetime, timedelta
from typing import Iterator

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

PASSPHRASE = "Str0ng_P@ssphrase!"


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch) -> Iterator[None]:
    """Elimina las variables CRYPTOCORE_* para que cada prueba parta de los valores por defecto.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar variables de entorno.

    Returns:
        Iterator[None]: Control del fixture autouse durante la ejecución de cada test.
    """
    for name in list(os.environ):
        if name.startswith("CRYPTOCORE_"):
            monkeypatch.delenv(name)
    yield


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Genera una única clave RSA de 2048 bits para toda la sesión."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def cert_path(tmp_path, rsa_private_key):
    """Emite un certificado X.509 autofirmado y lo guarda en PEM.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        rsa_private_key (rsa.RSAPrivateKey): Clave del sujeto.

    Returns:
        Path: Ruta del certificado PEM.
    """
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "cryptocore test")])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(rsa_private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(datetime.now(UTC) - timedelta(minutes=1))
        .not_valid_after(datetime.now(UTC) + timedelta(days=1))
        .sign(private_key=rsa_private_key, algorithm=hashes.SHA256())
    )
    path = tmp_path / "cert.pem"
    path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    return path


@pytest.fixture
def private_key_path(tmp_path, rsa_private_key):
    """Guarda la clave privada cifrada con ``PASSPHRASE`` en PEM PKCS#8."""
    path = tmp_path / "key.pem"
    path.write_bytes(
        rsa_private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(PASSPHRASE.encode()),
        )
    )
    return path


@pytest.fixture
def passphrase() -> str:
    """Passphrase con la que se cifra ``private_key_path``."""
    return PASSPHRASE
