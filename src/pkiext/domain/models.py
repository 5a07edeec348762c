"""
Domain models — immutable value objects for decoded PKI artifacts and backend responses.

The three artifact kinds form a closed variant (Artifact). Each kind declares
the PEM labels it accepts, so label dispatch in the decoder is driven by this
module rather than by string checks at call sites.

All models are frozen dataclasses: they are built once by the decoder (or by
the test that received a backend response) and never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, unique

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, padding, rsa

# ─────────────────────── Artifacts ───────────────────────


@unique
class ArtifactKind(Enum):
    """The artifact kinds a PEM block can decode into."""

    CERTIFICATE = "certificate"
    SIGNING_KEY = "signing_key"
    REVOCATION_LIST = "revocation_list"

    @property
    def pem_labels(self) -> frozenset[str]:
        return _PEM_LABELS[self]

    @classmethod
    def for_label(cls, label: str) -> ArtifactKind | None:
        """Return the kind that accepts `label`, or None if no kind does."""
        for kind in cls:
            if label in kind.pem_labels:
                return kind
        return None


_PEM_LABELS: dict[ArtifactKind, frozenset[str]] = {
    ArtifactKind.CERTIFICATE: frozenset({"CERTIFICATE", "X509 CERTIFICATE"}),
    ArtifactKind.SIGNING_KEY: frozenset(
        {"PRIVATE KEY", "RSA PRIVATE KEY", "EC PRIVATE KEY", "ENCRYPTED PRIVATE KEY"}
    ),
    ArtifactKind.REVOCATION_LIST: frozenset({"X509 CRL"}),
}


@dataclass(frozen=True, slots=True)
class PemBlock:
    """A single armoured region: its BEGIN/END label and the base64-decoded payload."""

    label: str
    payload: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class Certificate:
    """
    A decoded X.509 certificate.

    `serial_number` is a Python int, so serials wider than 64 bits compare
    exactly. Subject and issuer are RFC 4514 strings; this package does not
    interpret them.
    """

    serial_number: int
    subject: str
    issuer: str
    not_valid_before: datetime
    not_valid_after: datetime
    der: bytes = field(repr=False)

    @property
    def serial_hex(self) -> str:
        return hex(self.serial_number)


@unique
class KeyType(Enum):
    RSA = "rsa"
    EC = "ec"
    ED25519 = "ed25519"
    ED448 = "ed448"


type PrivateKey = (
    rsa.RSAPrivateKey
    | ec.EllipticCurvePrivateKey
    | ed25519.Ed25519PrivateKey
    | ed448.Ed448PrivateKey
)

type PublicKey = (
    rsa.RSAPublicKey
    | ec.EllipticCurvePublicKey
    | ed25519.Ed25519PublicKey
    | ed448.Ed448PublicKey
)


@dataclass(frozen=True, slots=True)
class SigningKey:
    """
    Private key material paired with its public half.

    `sign` picks the conventional scheme for the key type so callers can
    produce a verifiable signature without knowing which kind of key a
    fixture holds.
    """

    key_type: KeyType
    private_key: PrivateKey = field(repr=False)

    @property
    def public_key(self) -> PublicKey:
        return self.private_key.public_key()

    def sign(self, data: bytes) -> bytes:
        match self.private_key:
            case rsa.RSAPrivateKey():
                return self.private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())
            case ec.EllipticCurvePrivateKey():
                return self.private_key.sign(data, ec.ECDSA(hashes.SHA256()))
            case _:
                return self.private_key.sign(data)


@dataclass(frozen=True, slots=True)
class RevokedEntry:
    """One revoked certificate inside a CRL."""

    serial_number: int
    revocation_date: datetime
    reason: str | None = None

    def describe(self) -> str:
        reason = f", reason={self.reason}" if self.reason else ""
        return f"{hex(self.serial_number)} (revoked {self.revocation_date.isoformat()}{reason})"


@dataclass(frozen=True, slots=True)
class RevocationList:
    """
    A decoded certificate revocation list.

    `revoked` keeps the order of the encoding. Nothing downstream may rely on
    it being sorted, and it may be empty.
    """

    issuer: str
    this_update: datetime
    next_update: datetime | None
    revoked: tuple[RevokedEntry, ...] = ()
    der: bytes = field(default=b"", repr=False)

    @property
    def serial_numbers(self) -> list[int]:
        return [entry.serial_number for entry in self.revoked]


type Artifact = Certificate | SigningKey | RevocationList


# ─────────────────────── Backend responses ───────────────────────

type FieldValue = str | int | float | bool | bytes | list | dict | None
"""Value of one response field. None means the field is absent."""


@dataclass(frozen=True, slots=True)
class LogicalResponse:
    """
    The logical response returned by the PKI backend for one request.

    Only `data` and `warnings` are read here. An error response carries an
    `error` key and at most an additional `data` key.
    """

    data: Mapping[str, FieldValue] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()

    def is_error(self) -> bool:
        if self.data.get("error") is None:
            return False
        if len(self.data) == 1:
            return True
        return len(self.data) == 2 and "data" in self.data

    def error_message(self) -> str | None:
        if not self.is_error():
            return None
        error = self.data["error"]
        if isinstance(error, bytes):
            return error.decode("utf-8", errors="replace")
        return str(error)

    def is_empty(self) -> bool:
        return not self.data and not self.warnings


# ─────────────────────── User-agent ───────────────────────


@dataclass(frozen=True, slots=True)
class PluginEnvironment:
    """Version information the backend hands to a running plugin."""

    vault_version: str
    vault_version_prerelease: str = ""
    vault_version_metadata: str = ""

    @property
    def full_version(self) -> str:
        version = self.vault_version
        if self.vault_version_prerelease:
            version = f"{version}-{self.vault_version_prerelease}"
        if self.vault_version_metadata:
            version = f"{version}+{self.vault_version_metadata}"
        return version
