"""
Response-shape checks over a LogicalResponse returned by the PKI backend.

These gate what reaches the decoder: a test first checks the response
succeeded and carries the expected fields, then decodes the PEM text held in
those fields. Every check reports all the evidence at once (every missing
field, the backend's own error text) so one failing run is enough to diagnose.
"""

from __future__ import annotations

from collections.abc import Iterable

from pkiext.domain.models import LogicalResponse
from pkiext.railway import ErrorCode
from pkiext.railway.result import Result


def missing_fields(resp: LogicalResponse, fields: Iterable[str]) -> list[str]:
    """Required fields absent from `resp.data` or set to None, in request order."""
    return [name for name in fields if resp.data.get(name) is None]


def require_fields_set(resp: LogicalResponse, *fields: str) -> Result[LogicalResponse]:
    """Fail with MISSING_FIELDS, naming every absent field, unless all are set."""
    missing = missing_fields(resp, fields)
    if missing:
        return Result.failure(
            ErrorCode.MISSING_FIELDS,
            f"The following fields were required but missing from response: {missing}\n"
            f"response data: {dict(resp.data)!r}",
        )
    return Result.success(resp)


def _check_success(resp: LogicalResponse | None, err: BaseException | None) -> Result[bool]:
    if err is not None:
        return Result.failure(
            ErrorCode.BACKEND_ERROR, f"Request to backend failed: {err}", err
        )
    if resp is not None and resp.is_error():
        return Result.failure(
            ErrorCode.ERROR_RESPONSE,
            f"Expected successful response but got error: {resp.error_message()}",
        )
    return Result.success(True)


def require_success_non_nil(
    resp: LogicalResponse | None,
    err: BaseException | None = None,
) -> Result[LogicalResponse]:
    """
    Fail unless the request succeeded and returned a response body.

    Checks in order: the request error, the response's error indicator,
    then the presence of a response.
    """
    return _check_success(resp, err).flat_map(
        lambda _: Result.success(resp)
        if resp is not None
        else Result.failure(
            ErrorCode.UNEXPECTED_RESPONSE, "Expected a non-nil response but got None"
        )
    )


def require_success_nil(
    resp: LogicalResponse | None,
    err: BaseException | None = None,
) -> Result[bool]:
    """
    Fail unless the request succeeded without a response body.

    An empty response (no data, no warnings) counts as no body.
    """
    return _check_success(resp, err).ensure(
        lambda _: resp is None or resp.is_empty(),
        ErrorCode.UNEXPECTED_RESPONSE,
        lambda _: f"Expected nil response but got: {resp!r}",
    )
