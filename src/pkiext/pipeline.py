"""
Pipeline — decode-then-check compositions over the ArtifactDecoder port.

Pure composition: no I/O, no shared state. Decoding is injected via the port,
so the stages connect through Result and the first decode failure
short-circuits:

  decode_revocation_list(crl_pem) ─┐
                                   ├─ combine ─▶ is_revoked / require_serial_in_crl
  decode_certificate(cert_pem) ────┘
"""

from __future__ import annotations

from pkiext.domain.models import RevokedEntry
from pkiext.domain.ports import ArtifactDecoder
from pkiext.railway.result import Result
from pkiext.revocation import is_revoked, require_serial_in_crl


def revocation_status(
    crl_pem: str | bytes,
    cert_pem: str | bytes,
    decoder: ArtifactDecoder,
) -> Result[bool]:
    """
    Decode both artifacts and report whether the certificate is revoked.

    A decode failure is returned as-is; False is only ever a real answer.
    """
    return Result.combine(
        decoder.decode_revocation_list(crl_pem),
        decoder.decode_certificate(cert_pem),
        is_revoked,
    )


def require_revoked(
    crl_pem: str | bytes,
    cert_pem: str | bytes,
    decoder: ArtifactDecoder,
) -> Result[RevokedEntry]:
    """Decode both artifacts and fail with NOT_REVOKED unless the certificate is listed."""
    return Result.combine(
        decoder.decode_revocation_list(crl_pem),
        decoder.decode_certificate(cert_pem),
        lambda crl, cert: (crl, cert),
    ).flat_map(lambda pair: require_serial_in_crl(*pair))
