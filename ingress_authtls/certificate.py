"""
Client-authentication certificate bundle.
"""

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass

from cryptography import x509

from ingress_authtls.errors import InvalidCertificateError

CA_CERTIFICATE_KEY = "ca.crt"
CRL_KEY = "ca.crl"


def _sha1(data: str) -> str:
    return hashlib.sha1(data.encode()).hexdigest()


def _text(secret: str, key: str, value: bytes | str | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    try:
        return value.decode()
    except UnicodeDecodeError as e:
        raise InvalidCertificateError(f"secret {secret} key {key} is not PEM text: {e}") from e


@dataclass(frozen=True)
class AuthSSLCert:
    """
    CA material used to verify client certificates.

    Attributes:
        secret: "namespace/name" of the secret the material came from
        ca_certificate: PEM encoded CA bundle
        ca_sha: SHA-1 checksum of the CA bundle
        crl: PEM encoded certificate revocation list, if the secret has one
        crl_sha: SHA-1 checksum of the CRL ("" without a CRL)
        pem_sha: SHA-1 checksum of the CA bundle and CRL together

    Two bundles are equal when every field is equal, so a rotated CA in the
    same secret compares unequal through its checksums.
    """

    secret: str
    ca_certificate: str
    ca_sha: str
    crl: str | None = None
    crl_sha: str = ""
    pem_sha: str = ""

    @property
    def has_crl(self) -> bool:
        """Check if a revocation list is attached."""
        return self.crl is not None

    @classmethod
    def from_secret_data(cls, secret: str, data: Mapping[str, bytes | str]) -> "AuthSSLCert":
        """
        Create an AuthSSLCert from decoded secret data.

        The CA bundle must parse as at least one PEM certificate and the
        optional CRL as a PEM CRL. No chain or signature checks are made.

        Args:
            secret: "namespace/name" of the secret
            data: Decoded secret data keyed by file name ("ca.crt", "ca.crl");
                other keys are ignored

        Returns:
            AuthSSLCert instance

        Raises:
            InvalidCertificateError: If the CA bundle is missing or unparsable
        """
        ca = _text(secret, CA_CERTIFICATE_KEY, data.get(CA_CERTIFICATE_KEY))
        if not ca:
            raise InvalidCertificateError(
                f"secret {secret} contains no CA certificate ({CA_CERTIFICATE_KEY})"
            )

        try:
            x509.load_pem_x509_certificates(ca.encode())
        except ValueError as e:
            raise InvalidCertificateError(
                f"secret {secret} contains an invalid CA certificate: {e}"
            ) from e

        crl = _text(secret, CRL_KEY, data.get(CRL_KEY)) or None
        if crl is not None:
            try:
                x509.load_pem_x509_crl(crl.encode())
            except ValueError as e:
                raise InvalidCertificateError(
                    f"secret {secret} contains an invalid CRL: {e}"
                ) from e

        return cls(
            secret=secret,
            ca_certificate=ca,
            ca_sha=_sha1(ca),
            crl=crl,
            crl_sha=_sha1(crl) if crl else "",
            pem_sha=_sha1(ca + (crl or "")),
        )
