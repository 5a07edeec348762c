"""
Railway-oriented error handling for pkiext.

    from pkiext.railway import Result, ErrorCode

    def require_positive_serial(serial: int) -> Result[int]:
        if serial <= 0:
            return Result.failure(ErrorCode.INVALID_CERTIFICATE, "serial must be positive")
        return Result.success(serial)
"""

from pkiext.railway.assertions import ResultAssertions
from pkiext.railway.failure import ErrorCode, FailureDescription
from pkiext.railway.result import Failure, Result, Success

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultAssertions",
]
