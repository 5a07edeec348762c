"""
Acceptance test fixtures — an in-memory stand-in for the PKI backend.

FakePkiBackend answers the handful of requests the acceptance tests make
(issue, revoke, read CRL) with LogicalResponse objects shaped like the real
backend's, carrying PEM text in their data fields.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

from pkiext.domain.models import LogicalResponse


class FakePkiBackend:
    """Issues EC leaf certificates from an RSA CA and tracks revocations."""

    def __init__(self, ca_key: rsa.RSAPrivateKey, ca_cert: x509.Certificate) -> None:
        self._ca_key = ca_key
        self._ca_cert = ca_cert
        self._issued: dict[int, x509.Certificate] = {}
        self._revoked: dict[int, datetime] = {}

    def _pem(self, obj: x509.Certificate | x509.CertificateRevocationList) -> str:
        return obj.public_bytes(serialization.Encoding.PEM).decode("ascii")

    def issue(self, common_name: str) -> LogicalResponse:
        if not common_name:
            return LogicalResponse(data={"error": "common_name is required"})
        key = ec.generate_private_key(ec.SECP256R1())
        now = datetime.now(UTC)
        cert = (
            x509.CertificateBuilder()
            .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)]))
            .issuer_name(self._ca_cert.subject)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now - timedelta(minutes=1))
            .not_valid_after(now + timedelta(days=1))
            .sign(self._ca_key, hashes.SHA256())
        )
        self._issued[cert.serial_number] = cert
        key_pem = key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.TraditionalOpenSSL,
            serialization.NoEncryption(),
        ).decode("ascii")
        return LogicalResponse(
            data={
                "certificate": self._pem(cert),
                "issuing_ca": self._pem(self._ca_cert),
                "ca_chain": self._pem(cert) + self._pem(self._ca_cert),
                "private_key": key_pem,
                "private_key_type": "ec",
                "serial_number": format(cert.serial_number, "x"),
            }
        )

    def revoke(self, serial_number: str) -> LogicalResponse:
        serial = int(serial_number, 16)
        if serial not in self._issued:
            return LogicalResponse(data={"error": f"certificate with serial {serial_number} not found"})
        revoked_at = datetime.now(UTC)
        self._revoked[serial] = revoked_at
        return LogicalResponse(data={"revocation_time": int(revoked_at.timestamp())})

    def tidy(self) -> LogicalResponse | None:
        return None

    def read_crl(self) -> LogicalResponse:
        now = datetime.now(UTC)
        builder = (
            x509.CertificateRevocationListBuilder()
            .issuer_name(self._ca_cert.subject)
            .last_update(now)
            .next_update(now + timedelta(hours=72))
        )
        for serial, revoked_at in self._revoked.items():
            builder = builder.add_revoked_certificate(
                x509.RevokedCertificateBuilder()
                .serial_number(serial)
                .revocation_date(revoked_at)
                .build()
            )
        return LogicalResponse(data={"crl": self._pem(builder.sign(self._ca_key, hashes.SHA256()))})


@pytest.fixture()
def backend(ca_key: rsa.RSAPrivateKey, ca_cert: x509.Certificate) -> FakePkiBackend:
    return FakePkiBackend(ca_key, ca_cert)
