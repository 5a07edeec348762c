"""
Failure description — structured error information for the failure track.

Every decode and check in pkiext reports problems as a FailureDescription
carrying one ErrorCode from a closed taxonomy. None of these are transient:
they point at a broken fixture or a misbehaving backend, so callers never
retry them.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """
    Error codes for the failure track.

    Decode errors (the artifact never reached a usable structure):
    MALFORMED_INPUT, INVALID_CERTIFICATE, INVALID_KEY, INVALID_CRL.

    Assertion errors (the artifact or response was decoded but is wrong):
    NOT_REVOKED, MISSING_FIELDS, BACKEND_ERROR, ERROR_RESPONSE, UNEXPECTED_RESPONSE.
    """

    # --- Decode errors ---
    MALFORMED_INPUT = "MALFORMED_INPUT"
    """No decodable PEM block found in the buffer."""

    INVALID_CERTIFICATE = "INVALID_CERTIFICATE"
    """PEM block found, but the payload is not a parseable X.509 certificate."""

    INVALID_KEY = "INVALID_KEY"
    """PEM block found, but the payload is not a supported private key."""

    INVALID_CRL = "INVALID_CRL"
    """PEM block found, but the payload is not a parseable CRL."""

    # --- Assertion errors ---
    NOT_REVOKED = "NOT_REVOKED"
    """Certificate serial number absent from the revocation list."""

    MISSING_FIELDS = "MISSING_FIELDS"
    """One or more required response fields are absent or null."""

    BACKEND_ERROR = "BACKEND_ERROR"
    """The request to the backend itself raised or returned an error."""

    ERROR_RESPONSE = "ERROR_RESPONSE"
    """The backend answered with an error-shaped response."""

    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"
    """The response body was nil when one was expected, or the reverse."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor: error code, message, optional exception, timestamp.

    >>> desc = FailureDescription(ErrorCode.MISSING_FIELDS, "missing: ['serial_number']")
    >>> desc.code
    <ErrorCode.MISSING_FIELDS: 'MISSING_FIELDS'>
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def full_stack_trace(self) -> str:
        """Message followed by the formatted exception chain, if any."""
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(
                type(self.exception), self.exception, self.exception.__traceback__
            )
        )
        return f"{self.message}\n{tb}"
