"""
pkiext — test-support harness for a PKI (certificate authority) backend.

Decodes PEM certificates, private keys and CRLs, checks revocation
membership, and asserts the shape of backend responses.

Built on a small Railway-Oriented Programming core (pkiext.railway):
every operation returns a Result, and pkiext.testing turns failures
into test failures.
"""

__version__ = "0.1.0"
