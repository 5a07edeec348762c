"""
Shared test fixtures for the pkiext test suite.

All PKI material is generated in memory with cryptography builders: a
session-wide RSA CA, plus factories for leaf certificates, CRLs and private
keys in each container format the decoder must accept.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.x509.oid import NameOID

from pkiext.adapters.pem_decoder import PemArtifactDecoder
from pkiext.config import HarnessSettings
from pkiext.logging_setup import configure_structlog

type CertFactory = Callable[..., str]
type CrlFactory = Callable[..., str]

NOW = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture(scope="session", autouse=True)
def _structlog() -> None:
    configure_structlog(HarnessSettings().log_level)


@pytest.fixture()
def decoder() -> PemArtifactDecoder:
    return PemArtifactDecoder()


# ─────────────────────── CA ───────────────────────


@pytest.fixture(scope="session")
def ca_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ca_name() -> x509.Name:
    return x509.Name(
        [
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "pkiext"),
            x509.NameAttribute(NameOID.COMMON_NAME, "pkiext Test Root CA"),
        ]
    )


@pytest.fixture(scope="session")
def ca_cert(ca_key: rsa.RSAPrivateKey, ca_name: x509.Name) -> x509.Certificate:
    return (
        x509.CertificateBuilder()
        .subject_name(ca_name)
        .issuer_name(ca_name)
        .public_key(ca_key.public_key())
        .serial_number(1)
        .not_valid_before(NOW - timedelta(days=1))
        .not_valid_after(NOW + timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(ca_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def ca_pem(ca_cert: x509.Certificate) -> str:
    return ca_cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


# ─────────────────────── Leaf certificates ───────────────────────


@pytest.fixture(scope="session")
def make_cert_pem(ca_key: rsa.RSAPrivateKey, ca_name: x509.Name) -> CertFactory:
    """Factory: issue a leaf certificate with the given serial, returned as PEM."""

    def _make(serial: int, common_name: str = "leaf.example.com") -> str:
        leaf_key = ec.generate_private_key(ec.SECP256R1())
        cert = (
            x509.CertificateBuilder()
            .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)]))
            .issuer_name(ca_name)
            .public_key(leaf_key.public_key())
            .serial_number(serial)
            .not_valid_before(NOW - timedelta(hours=1))
            .not_valid_after(NOW + timedelta(days=30))
            .sign(ca_key, hashes.SHA256())
        )
        return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")

    return _make


# ─────────────────────── CRLs ───────────────────────


@pytest.fixture(scope="session")
def make_crl_pem(ca_key: rsa.RSAPrivateKey, ca_name: x509.Name) -> CrlFactory:
    """Factory: sign a CRL listing `serials` (optionally with a CRLReason each), as PEM."""

    def _make(
        serials: Iterable[int],
        reason: x509.ReasonFlags | None = None,
    ) -> str:
        builder = (
            x509.CertificateRevocationListBuilder()
            .issuer_name(ca_name)
            .last_update(NOW)
            .next_update(NOW + timedelta(days=1))
        )
        for serial in serials:
            revoked = (
                x509.RevokedCertificateBuilder()
                .serial_number(serial)
                .revocation_date(NOW - timedelta(minutes=5))
            )
            if reason is not None:
                revoked = revoked.add_extension(x509.CRLReason(reason), critical=False)
            builder = builder.add_revoked_certificate(revoked.build())
        crl = builder.sign(ca_key, hashes.SHA256())
        return crl.public_bytes(serialization.Encoding.PEM).decode("ascii")

    return _make


# ─────────────────────── Private keys ───────────────────────


def _private_pem(
    key: Any,
    fmt: serialization.PrivateFormat,
    encryption: serialization.KeySerializationEncryption | None = None,
) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=fmt,
        encryption_algorithm=encryption or serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def rsa_key(ca_key: rsa.RSAPrivateKey) -> rsa.RSAPrivateKey:
    return ca_key


@pytest.fixture(scope="session")
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ed25519_key() -> ed25519.Ed25519PrivateKey:
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def rsa_pkcs8_pem(rsa_key: rsa.RSAPrivateKey) -> str:
    return _private_pem(rsa_key, serialization.PrivateFormat.PKCS8)


@pytest.fixture(scope="session")
def rsa_pkcs1_pem(rsa_key: rsa.RSAPrivateKey) -> str:
    return _private_pem(rsa_key, serialization.PrivateFormat.TraditionalOpenSSL)


@pytest.fixture(scope="session")
def ec_sec1_pem(ec_key: ec.EllipticCurvePrivateKey) -> str:
    return _private_pem(ec_key, serialization.PrivateFormat.TraditionalOpenSSL)


@pytest.fixture(scope="session")
def ec_pkcs8_pem(ec_key: ec.EllipticCurvePrivateKey) -> str:
    return _private_pem(ec_key, serialization.PrivateFormat.PKCS8)


@pytest.fixture(scope="session")
def ed25519_pkcs8_pem(ed25519_key: ed25519.Ed25519PrivateKey) -> str:
    return _private_pem(ed25519_key, serialization.PrivateFormat.PKCS8)


@pytest.fixture(scope="session")
def encrypted_pkcs8_pem(ec_key: ec.EllipticCurvePrivateKey) -> str:
    return _private_pem(
        ec_key,
        serialization.PrivateFormat.PKCS8,
        serialization.BestAvailableEncryption(b"correct horse"),
    )
