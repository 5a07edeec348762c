"""
Ports — Protocol-based interfaces between the checks and the PEM decoder.

The revocation pipeline depends only on the shape of decoded artifacts,
never on how they were decoded. Any object with these methods satisfies the
port; tests use MagicMock stand-ins to exercise the short-circuit paths.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pkiext.domain.models import Artifact, Certificate, RevocationList, SigningKey
from pkiext.railway.result import Result


@runtime_checkable
class ArtifactDecoder(Protocol):
    """
    Port: turn PEM text into decoded artifacts.

    Every method returns a Failure rather than raising:
      - MALFORMED_INPUT when no PEM block can be extracted
      - INVALID_CERTIFICATE / INVALID_KEY / INVALID_CRL when the block's
        payload does not parse as the requested kind
    """

    def decode(self, buffer: str | bytes) -> Result[Artifact]: ...

    def decode_certificate(self, buffer: str | bytes) -> Result[Certificate]: ...

    def decode_signing_key(self, buffer: str | bytes) -> Result[SigningKey]: ...

    def decode_revocation_list(self, buffer: str | bytes) -> Result[RevocationList]: ...
