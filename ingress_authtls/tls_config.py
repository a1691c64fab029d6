"""
Validated client-authentication configuration.
"""

from dataclasses import dataclass
from typing import Any

from ingress_authtls.certificate import AuthSSLCert

DEFAULT_VERIFY_CLIENT = "on"
DEFAULT_VALIDATION_DEPTH = 1
DEFAULT_OCSP = "off"
DEFAULT_OCSP_CACHE = "off"


@dataclass(frozen=True)
class AuthTLSConfig:
    """
    Client-certificate authentication settings for one ingress.

    Attributes:
        auth_ssl_cert: CA material used to verify client certificates
        verify_client: One of "on", "off", "optional", "optional_no_ca"
        validation_depth: Maximum depth of the client certificate chain
        error_page: URL to redirect to when verification fails ("" for none)
        pass_cert_to_upstream: Whether the client certificate is forwarded upstream
        ocsp: One of "on", "off", "leaf"
        ocsp_responder: HTTP(S) URL overriding the certificate's responder ("" for none)
        ocsp_cache: "off" or "shared:<name>:<size>"
    """

    auth_ssl_cert: AuthSSLCert
    verify_client: str = DEFAULT_VERIFY_CLIENT
    validation_depth: int = DEFAULT_VALIDATION_DEPTH
    error_page: str = ""
    pass_cert_to_upstream: bool = False
    ocsp: str = DEFAULT_OCSP
    ocsp_responder: str = ""
    ocsp_cache: str = DEFAULT_OCSP_CACHE

    def to_dict(self) -> dict[str, Any]:
        """Render the configuration with the field names used by config templates."""
        cert = self.auth_ssl_cert
        return {
            "secret": cert.secret,
            "caSha": cert.ca_sha,
            "crlSha": cert.crl_sha,
            "pemSha": cert.pem_sha,
            "verify_client": self.verify_client,
            "validationDepth": self.validation_depth,
            "errorPage": self.error_page,
            "passCertToUpstream": self.pass_cert_to_upstream,
            "ocsp": self.ocsp,
            "ocspResponser": self.ocsp_responder,
            "ocspCache": self.ocsp_cache,
        }


def configs_equal(first: AuthTLSConfig | None, second: AuthTLSConfig | None) -> bool:
    """
    Compare two optional configurations.

    Two missing configurations are equal; a missing one never equals a
    present one.
    """
    if first is second:
        return True
    if first is None or second is None:
        return False
    return first == second
