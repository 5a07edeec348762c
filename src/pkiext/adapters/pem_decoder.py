"""
PEM artifact decoder — PEM unarmoring + X.509 / private key / CRL parsing.

Adapter layer — implements the ArtifactDecoder port using:
  - asn1crypto: PEM armor handling (first-block extraction, bundle iteration, re-armoring)
  - cryptography (PyCA): DER parsing of certificates, private keys and CRLs

Pipeline:
  PEM text
    → asn1crypto: pem.unarmor() → PemBlock(label, payload)
    → label → ArtifactKind (the kind's parser is selected from the label)
    → cryptography: load_der_x509_certificate / load_der_private_key / load_der_x509_crl
    → Certificate | SigningKey | RevocationList (domain model)

Only the first PEM block of a buffer is consumed. decode_certificate_bundle()
is the one entry point that walks every block.
"""

from __future__ import annotations

import base64
import re
from typing import Callable

import structlog
from asn1crypto import pem
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa
from cryptography.x509.extensions import ExtensionNotFound

from pkiext.domain.models import (
    Artifact,
    ArtifactKind,
    Certificate,
    KeyType,
    PemBlock,
    RevocationList,
    RevokedEntry,
    SigningKey,
)
from pkiext.railway import ErrorCode, FailureDescription
from pkiext.railway.result import Result

log = structlog.get_logger()

_INVALID_CODE: dict[ArtifactKind, ErrorCode] = {
    ArtifactKind.CERTIFICATE: ErrorCode.INVALID_CERTIFICATE,
    ArtifactKind.SIGNING_KEY: ErrorCode.INVALID_KEY,
    ArtifactKind.REVOCATION_LIST: ErrorCode.INVALID_CRL,
}

_ARMOR_RE = re.compile(
    rb"-----BEGIN [^\r\n]*-----(?P<body>.*?)-----END [^\r\n]*-----",
    re.DOTALL,
)


# ─────────────────────── PEM Armor ───────────────────────


def _as_bytes(buffer: str | bytes) -> bytes:
    if isinstance(buffer, str):
        return buffer.encode("utf-8")
    if isinstance(buffer, (bytes, bytearray)):
        return bytes(buffer)
    raise TypeError(f"PEM buffer must be str or bytes, got {type(buffer).__name__}")


def _check_base64(body: bytes) -> None:
    # pem.unarmor drops characters outside the base64 alphabet; reject them instead
    encoded = b"".join(
        line.strip() for line in body.splitlines() if line.strip() and b":" not in line
    )
    base64.b64decode(encoded, validate=True)


def _check_armor(data: bytes, multiple: bool) -> None:
    blocks = _ARMOR_RE.finditer(data) if multiple else filter(None, [_ARMOR_RE.search(data)])
    for block in blocks:
        _check_base64(block.group("body"))


def _unarmor_first(buffer: str | bytes) -> PemBlock:
    data = _as_bytes(buffer)
    _check_armor(data, multiple=False)
    label, _headers, der_bytes = pem.unarmor(data)
    return PemBlock(label=label, payload=der_bytes)


def _unarmor_all(buffer: str | bytes) -> list[PemBlock]:
    data = _as_bytes(buffer)
    _check_armor(data, multiple=True)
    return [
        PemBlock(label=label, payload=der_bytes)
        for label, _headers, der_bytes in pem.unarmor(data, multiple=True)
    ]


def _first_block(buffer: str | bytes) -> Result[PemBlock]:
    """Extract the first PEM block, or fail with MALFORMED_INPUT."""
    return Result.from_computation(
        lambda: _unarmor_first(buffer),
        ErrorCode.MALFORMED_INPUT,
        "Failed to decode PEM block",
    )


def _expect_kind(block: PemBlock, kind: ArtifactKind) -> Result[PemBlock]:
    """Reject a block whose label belongs to another artifact kind."""
    if block.label in kind.pem_labels:
        return Result.success(block)
    return Result.failure(
        _INVALID_CODE[kind],
        f"Expected a {kind.value} PEM block "
        f"({', '.join(sorted(kind.pem_labels))}) but found {block.label!r}",
    )


# ─────────────────────── DER Parsing ───────────────────────


def _to_certificate(der_bytes: bytes) -> Certificate:
    cert = x509.load_der_x509_certificate(der_bytes)
    return Certificate(
        serial_number=cert.serial_number,
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        not_valid_before=cert.not_valid_before_utc,
        not_valid_after=cert.not_valid_after_utc,
        der=der_bytes,
    )


def _key_type(private_key: object) -> KeyType:
    match private_key:
        case rsa.RSAPrivateKey():
            return KeyType.RSA
        case ec.EllipticCurvePrivateKey():
            return KeyType.EC
        case ed25519.Ed25519PrivateKey():
            return KeyType.ED25519
        case ed448.Ed448PrivateKey():
            return KeyType.ED448
    raise ValueError(f"Unsupported private key type for signing: {type(private_key).__name__}")


def _to_signing_key(der_bytes: bytes) -> SigningKey:
    # load_der_private_key accepts PKCS#8 as well as PKCS#1 (RSA) and SEC1 (EC)
    private_key = serialization.load_der_private_key(der_bytes, password=None)
    return SigningKey(key_type=_key_type(private_key), private_key=private_key)  # type: ignore[arg-type]


def _revocation_reason(revoked_cert: x509.RevokedCertificate) -> str | None:
    try:
        reason_ext = revoked_cert.extensions.get_extension_for_class(x509.CRLReason)
        return reason_ext.value.reason.value
    except ExtensionNotFound:
        return None


def _to_revocation_list(der_bytes: bytes) -> RevocationList:
    crl = x509.load_der_x509_crl(der_bytes)
    entries = tuple(
        RevokedEntry(
            serial_number=revoked_cert.serial_number,
            revocation_date=revoked_cert.revocation_date_utc,
            reason=_revocation_reason(revoked_cert),
        )
        for revoked_cert in crl
    )
    return RevocationList(
        issuer=crl.issuer.rfc4514_string(),
        this_update=crl.last_update_utc,
        next_update=crl.next_update_utc,
        revoked=entries,
        der=der_bytes,
    )


def _parse_certificate(block: PemBlock) -> Result[Certificate]:
    return Result.from_computation(
        lambda: _to_certificate(block.payload),
        ErrorCode.INVALID_CERTIFICATE,
        "Failed to parse certificate",
    )


def _parse_signing_key(block: PemBlock) -> Result[SigningKey]:
    return Result.from_computation(
        lambda: _to_signing_key(block.payload),
        ErrorCode.INVALID_KEY,
        "Failed to parse private key",
    )


def _parse_revocation_list(block: PemBlock) -> Result[RevocationList]:
    return Result.from_computation(
        lambda: _to_revocation_list(block.payload),
        ErrorCode.INVALID_CRL,
        "Failed to parse CRL",
    )


_PARSERS: dict[ArtifactKind, Callable[[PemBlock], Result]] = {
    ArtifactKind.CERTIFICATE: _parse_certificate,
    ArtifactKind.SIGNING_KEY: _parse_signing_key,
    ArtifactKind.REVOCATION_LIST: _parse_revocation_list,
}


# ─────────────────────── Logging ───────────────────────


def _log_decoded(artifact: Artifact) -> None:
    match artifact:
        case Certificate():
            log.debug(
                "decoder.certificate_decoded",
                serial=artifact.serial_hex,
                subject=artifact.subject,
            )
        case SigningKey():
            log.debug("decoder.signing_key_decoded", key_type=artifact.key_type.value)
        case RevocationList():
            log.debug(
                "decoder.crl_decoded",
                issuer=artifact.issuer,
                revoked=len(artifact.revoked),
            )


def _log_failure(operation: str) -> Callable[[FailureDescription], None]:
    def _log(err: FailureDescription) -> None:
        log.warning(
            "decoder.decode_failed",
            operation=operation,
            code=err.code.value,
            reason=err.message,
        )
        if err.exception is not None:
            log.debug(
                "decoder.decode_failed_trace",
                operation=operation,
                trace=err.full_stack_trace(),
            )

    return _log


# ─────────────────────── Public Decoder Class ───────────────────────


class PemArtifactDecoder:
    """
    Decode PEM text into Certificate, SigningKey or RevocationList values.

    Implements the ArtifactDecoder port. Stateless: one instance can be
    shared by any number of tests. Parser exceptions are caught at this
    adapter boundary via Result.from_computation().
    """

    def decode(self, buffer: str | bytes) -> Result[Artifact]:
        """
        Decode the first PEM block into whichever artifact its label names.

        Returns Result.failure(MALFORMED_INPUT) when the label belongs to no
        known artifact kind.
        """
        return (
            _first_block(buffer)
            .flat_map(self._dispatch)
            .peek(_log_decoded)
            .peek_failure(_log_failure("decode"))
        )

    def decode_certificate(self, buffer: str | bytes) -> Result[Certificate]:
        """Decode the first PEM block of `buffer` as an X.509 certificate."""
        return self._decode_as(buffer, ArtifactKind.CERTIFICATE)

    def decode_signing_key(self, buffer: str | bytes) -> Result[SigningKey]:
        """
        Decode the first PEM block of `buffer` as an unencrypted private key.

        PKCS#8 ("PRIVATE KEY"), PKCS#1 ("RSA PRIVATE KEY") and SEC1
        ("EC PRIVATE KEY") containers are all accepted.
        """
        return self._decode_as(buffer, ArtifactKind.SIGNING_KEY)

    def decode_revocation_list(self, buffer: str | bytes) -> Result[RevocationList]:
        """Decode `buffer` as a single PEM-armored X.509 CRL."""
        return self._decode_as(buffer, ArtifactKind.REVOCATION_LIST)

    def decode_certificate_bundle(self, buffer: str | bytes) -> Result[tuple[Certificate, ...]]:
        """
        Decode every certificate block of `buffer`, in order.

        Blocks of other kinds (a key bundled with its chain, for instance) are
        skipped. Fails with MALFORMED_INPUT when no certificate block exists.
        """
        return (
            Result.from_computation(
                lambda: _unarmor_all(buffer),
                ErrorCode.MALFORMED_INPUT,
                "Failed to decode PEM bundle",
            )
            .map(lambda blocks: [b for b in blocks if b.label in ArtifactKind.CERTIFICATE.pem_labels])
            .ensure(bool, ErrorCode.MALFORMED_INPUT, "No certificate PEM block found in bundle")
            .flat_map(lambda blocks: Result.all_of([_parse_certificate(b) for b in blocks]))
            .map(tuple)
            .peek(lambda certs: log.debug("decoder.bundle_decoded", certificates=len(certs)))
            .peek_failure(_log_failure("decode_certificate_bundle"))
        )

    def _decode_as(self, buffer: str | bytes, kind: ArtifactKind) -> Result:
        return (
            _first_block(buffer)
            .flat_map(lambda block: _expect_kind(block, kind))
            .flat_map(_PARSERS[kind])
            .peek(_log_decoded)
            .peek_failure(_log_failure(f"decode_{kind.value}"))
        )

    @staticmethod
    def _dispatch(block: PemBlock) -> Result[Artifact]:
        kind = ArtifactKind.for_label(block.label)
        if kind is None:
            return Result.failure(
                ErrorCode.MALFORMED_INPUT,
                f"Unsupported PEM block label: {block.label!r}",
            )
        return _PARSERS[kind](block)


def encode_certificate(cert: Certificate) -> str:
    """Re-armor a decoded certificate as PEM text."""
    return pem.armor("CERTIFICATE", cert.der).decode("ascii")
