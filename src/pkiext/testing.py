"""
Asserting helpers for tests that drive the PKI backend.

Each helper wraps a Result-returning operation and turns its failure into an
AssertionError carrying the full explanation, which pytest reports as a test
failure. Decode helpers therefore never hand back a partial artifact.

    def test_revoke(backend):
        resp = backend.write("pki/revoke", serial_number=serial)
        require_success_non_nil_response(resp)
        require_fields_set_in_resp(resp, "revocation_time")
        crl = parse_crl(backend.read("pki/crl/pem").data["crl"])
        require_serial_number_in_crl(crl, parse_cert(issued_pem))
"""

from __future__ import annotations

from pkiext.adapters.pem_decoder import PemArtifactDecoder
from pkiext.domain.models import (
    Certificate,
    LogicalResponse,
    RevocationList,
    RevokedEntry,
    SigningKey,
)
from pkiext.railway import ResultAssertions
from pkiext.responses import require_fields_set, require_success_nil, require_success_non_nil
from pkiext.revocation import require_serial_in_crl

_decoder = PemArtifactDecoder()


def parse_cert(pem_cert: str | bytes) -> Certificate:
    return ResultAssertions.assert_success(
        _decoder.decode_certificate(pem_cert), "failed to decode certificate PEM"
    )


def parse_key(pem_key: str | bytes) -> SigningKey:
    return ResultAssertions.assert_success(
        _decoder.decode_signing_key(pem_key), "failed to decode private key PEM"
    )


def parse_crl(crl_pem: str | bytes) -> RevocationList:
    return ResultAssertions.assert_success(
        _decoder.decode_revocation_list(crl_pem), "failed to decode CRL PEM"
    )


def require_serial_number_in_crl(crl: RevocationList, cert: Certificate) -> RevokedEntry:
    return ResultAssertions.assert_success(require_serial_in_crl(crl, cert))


def require_fields_set_in_resp(resp: LogicalResponse, *fields: str) -> LogicalResponse:
    return ResultAssertions.assert_success(require_fields_set(resp, *fields))


def require_success_non_nil_response(
    resp: LogicalResponse | None,
    err: BaseException | None = None,
    message: str = "",
) -> LogicalResponse:
    return ResultAssertions.assert_success(require_success_non_nil(resp, err), message)


def require_success_nil_response(
    resp: LogicalResponse | None,
    err: BaseException | None = None,
    message: str = "",
) -> None:
    ResultAssertions.assert_success(require_success_nil(resp, err), message)
