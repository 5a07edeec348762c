"""
Test assertions for Result values.

Turns the failure track into a test failure with a message that carries the
full failure explanation, so a broken fixture or backend response can be
diagnosed from the test report alone.

    from pkiext.railway import ResultAssertions

    def test_issued_certificate_decodes(decoder, issued_pem):
        cert = ResultAssertions.assert_success(decoder.decode_certificate(issued_pem))
        assert cert.serial_number > 0

    def test_garbage_is_rejected(decoder):
        ResultAssertions.assert_failure(
            decoder.decode_certificate("garbage"), ErrorCode.MALFORMED_INPUT
        )
"""

from __future__ import annotations

from typing import TypeVar

from pkiext.railway.failure import ErrorCode, FailureDescription
from pkiext.railway.result import Result

T = TypeVar("T")


class ResultAssertions:
    """Expressive test assertions for Result values."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """
        Assert the Result is a Success and return the value.

            crl = ResultAssertions.assert_success(decoder.decode_revocation_list(pem))
        """
        context = f" — {message}" if message else ""
        assert result.is_success(), (
            f"Expected Success but got Failure("
            f"{result.error().code.value}: {result.error().message}){context}"
        )
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[T],
        expected_code: ErrorCode | None = None,
        message: str = "",
    ) -> FailureDescription:
        """Assert the Result is a Failure, optionally with a specific error code."""
        context = f" — {message}" if message else ""
        assert result.is_failure(), (
            f"Expected Failure but got Success({result.value()!r}){context}"
        )
        error = result.error()
        if expected_code is not None:
            assert error.code == expected_code, (
                f"Expected error code {expected_code.value} "
                f"but got {error.code.value}: {error.message!r}{context}"
            )
        return error

    @staticmethod
    def assert_failure_message_contains(result: Result[T], substring: str) -> None:
        """Case-insensitive check on the failure explanation."""
        error = ResultAssertions.assert_failure(result)
        assert substring.lower() in error.message.lower(), (
            f"Expected failure message to contain {substring!r} "
            f"but message was: {error.message!r}"
        )
