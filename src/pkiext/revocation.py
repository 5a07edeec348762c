"""
Revocation membership — is a certificate's serial number listed in a CRL?

Serial numbers are compared as Python ints, so 160-bit (or wider) serials
compare exactly. Entries are scanned linearly; a CRL's entry order carries
no meaning and is never assumed sorted.
"""

from __future__ import annotations

import structlog

from pkiext.domain.models import Certificate, RevocationList, RevokedEntry
from pkiext.railway import ErrorCode
from pkiext.railway.result import Result

log = structlog.get_logger()


def find_revoked_entry(crl: RevocationList, cert: Certificate) -> RevokedEntry | None:
    """Return the first entry whose serial equals the certificate's, or None."""
    for entry in crl.revoked:
        if entry.serial_number == cert.serial_number:
            return entry
    return None


def is_revoked(crl: RevocationList, cert: Certificate) -> bool:
    """Pure predicate: True iff `cert`'s serial number appears in `crl`."""
    return find_revoked_entry(crl, cert) is not None


def _describe_missing(crl: RevocationList, cert: Certificate) -> str:
    if crl.revoked:
        listed = "\n  ".join(entry.describe() for entry in crl.revoked)
    else:
        listed = "(no revoked entries)"
    return (
        f"The serial number {cert.serial_hex} of certificate {cert.subject!r} "
        f"(issuer {cert.issuer!r}) was not found in the CRL issued by {crl.issuer!r} "
        f"containing {len(crl.revoked)} entries:\n  {listed}"
    )


def require_serial_in_crl(crl: RevocationList, cert: Certificate) -> Result[RevokedEntry]:
    """
    Asserting form of is_revoked().

    Returns the matching RevokedEntry, or Result.failure(NOT_REVOKED) whose
    message lists the sought certificate and every revoked entry of the CRL.
    """
    entry = find_revoked_entry(crl, cert)
    if entry is not None:
        log.debug("revocation.found", serial=cert.serial_hex, reason=entry.reason)
        return Result.success(entry)
    log.info("revocation.not_found", serial=cert.serial_hex, crl_entries=len(crl.revoked))
    return Result.failure(ErrorCode.NOT_REVOKED, _describe_missing(crl, cert))
