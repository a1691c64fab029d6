"""
Client-certificate authentication annotation parser.
"""

import logging
import re

from ingress_authtls.annotations import AnnotationExtractor, IngressAnnotations
from ingress_authtls.config import AnnotationConfig
from ingress_authtls.errors import (
    IngressAnnotationError,
    InvalidAnnotationConfigurationError,
    LocationDeniedError,
)
from ingress_authtls.ingress import Ingress, parse_namespaced_name
from ingress_authtls.resolvers import CertificateResolver
from ingress_authtls.tls_config import (
    DEFAULT_OCSP,
    DEFAULT_OCSP_CACHE,
    DEFAULT_VALIDATION_DEPTH,
    DEFAULT_VERIFY_CLIENT,
    AuthTLSConfig,
)

logger = logging.getLogger(__name__)

AUTH_TLS_SECRET = "auth-tls-secret"
AUTH_TLS_VERIFY_CLIENT = "auth-tls-verify-client"
AUTH_TLS_VERIFY_DEPTH = "auth-tls-verify-depth"
AUTH_TLS_ERROR_PAGE = "auth-tls-error-page"
AUTH_TLS_PASS_CERTIFICATE_TO_UPSTREAM = "auth-tls-pass-certificate-to-upstream"
AUTH_TLS_OCSP = "auth-tls-ocsp"
AUTH_TLS_OCSP_RESPONDER = "auth-tls-ocsp-responder"
AUTH_TLS_OCSP_CACHE = "auth-tls-ocsp-cache"

# Matched against the whole value
VERIFY_CLIENT_REGEX = re.compile(r"on|off|optional|optional_no_ca")
OCSP_REGEX = re.compile(r"on|off|leaf")
OCSP_CACHE_REGEX = re.compile(r"off|shared:[^:]+:[^:]+")
# Only the scheme prefix is checked
OCSP_RESPONDER_REGEX = re.compile(r"^https?://")


class AuthTLSParser:
    """
    Parses the auth-tls-* annotations of an ingress.

    Only a missing or unusable CA secret and an OCSP setting that needs
    client verification are errors. Every other annotation silently falls
    back to its default when it is absent or malformed.

    Example:
        parser = AuthTLSParser(resolver)
        try:
            config = parser.parse(ingress)
        except LocationDeniedError:
            ...  # deny all traffic to the location
    """

    def __init__(
        self,
        resolver: CertificateResolver,
        annotations: AnnotationExtractor | None = None,
    ) -> None:
        self.resolver = resolver
        self.annotations = annotations or IngressAnnotations()

    def _string_or_default(
        self,
        name: str,
        ingress: Ingress,
        default: str,
        pattern: re.Pattern[str] | None = None,
    ) -> str:
        try:
            value = self.annotations.get_string_annotation(name, ingress)
        except IngressAnnotationError as e:
            logger.debug(f"{ingress.key}: {name} not usable ({e.message}), using {default!r}")
            return default

        if pattern is not None and not pattern.fullmatch(value):
            logger.debug(f"{ingress.key}: {name}={value!r} is not valid, using {default!r}")
            return default
        return value

    def _validation_depth(self, ingress: Ingress) -> int:
        try:
            depth = self.annotations.get_int_annotation(AUTH_TLS_VERIFY_DEPTH, ingress)
        except IngressAnnotationError:
            return DEFAULT_VALIDATION_DEPTH
        # Negative depths are passed through unchanged
        if depth == 0:
            return DEFAULT_VALIDATION_DEPTH
        return depth

    def _pass_cert_to_upstream(self, ingress: Ingress) -> bool:
        try:
            return self.annotations.get_bool_annotation(
                AUTH_TLS_PASS_CERTIFICATE_TO_UPSTREAM, ingress
            )
        except IngressAnnotationError:
            return False

    def parse(self, ingress: Ingress) -> AuthTLSConfig:
        """
        Build the client-authentication configuration of an ingress.

        Args:
            ingress: The ingress to read annotations from

        Returns:
            AuthTLSConfig with every field validated or defaulted

        Raises:
            LocationDeniedError: If the CA secret annotation is missing or
                malformed, or the certificate cannot be resolved
            InvalidAnnotationConfigurationError: If OCSP is "on" while
                client verification is not "on"
        """
        try:
            secret = self.annotations.get_string_annotation(AUTH_TLS_SECRET, ingress)
        except IngressAnnotationError as e:
            logger.warning(f"{ingress.key}: {AUTH_TLS_SECRET} not usable: {e.message}")
            raise LocationDeniedError(e) from e

        try:
            parse_namespaced_name(secret)
        except ValueError as e:
            logger.warning(f"{ingress.key}: {e}")
            raise LocationDeniedError(str(e)) from e

        try:
            cert = self.resolver.get_auth_certificate(secret)
        except Exception as e:
            logger.warning(f"{ingress.key}: error obtaining certificate from {secret}: {e}")
            raise LocationDeniedError(f"error obtaining certificate: {e}") from e

        verify_client = self._string_or_default(
            AUTH_TLS_VERIFY_CLIENT, ingress, DEFAULT_VERIFY_CLIENT, VERIFY_CLIENT_REGEX
        )
        validation_depth = self._validation_depth(ingress)
        error_page = self._string_or_default(AUTH_TLS_ERROR_PAGE, ingress, "")
        pass_cert_to_upstream = self._pass_cert_to_upstream(ingress)
        ocsp = self._string_or_default(AUTH_TLS_OCSP, ingress, DEFAULT_OCSP, OCSP_REGEX)

        # Checked after both values are final since defaulting can change the outcome
        if ocsp.lower() == "on" and verify_client.lower() != "on":
            logger.warning(f"{ingress.key}: {AUTH_TLS_OCSP} requires {AUTH_TLS_VERIFY_CLIENT} on")
            raise InvalidAnnotationConfigurationError(
                AUTH_TLS_OCSP, f"requires {AUTH_TLS_VERIFY_CLIENT} to be set on"
            )

        ocsp_responder = self._string_or_default(AUTH_TLS_OCSP_RESPONDER, ingress, "")
        if not OCSP_RESPONDER_REGEX.match(ocsp_responder):
            ocsp_responder = ""
        ocsp_cache = self._string_or_default(
            AUTH_TLS_OCSP_CACHE, ingress, DEFAULT_OCSP_CACHE, OCSP_CACHE_REGEX
        )

        return AuthTLSConfig(
            auth_ssl_cert=cert,
            verify_client=verify_client,
            validation_depth=validation_depth,
            error_page=error_page,
            pass_cert_to_upstream=pass_cert_to_upstream,
            ocsp=ocsp,
            ocsp_responder=ocsp_responder,
            ocsp_cache=ocsp_cache,
        )


def parse_auth_tls(
    ingress: Ingress,
    resolver: CertificateResolver,
    config: AnnotationConfig | None = None,
) -> AuthTLSConfig:
    """
    Parse the auth-tls-* annotations of an ingress in one call.

    Args:
        ingress: The ingress to read annotations from
        resolver: Resolver for the CA secret reference
        config: Annotation configuration (default prefix when omitted)

    Returns:
        AuthTLSConfig

    Raises:
        LocationDeniedError: See AuthTLSParser.parse
        InvalidAnnotationConfigurationError: See AuthTLSParser.parse
    """
    parser = AuthTLSParser(resolver, IngressAnnotations(config))
    return parser.parse(ingress)
