"""
ingress-authtls: client-certificate authentication annotations for ingresses.

This library provides:
- Typed, defaulting access to the auth-tls-* annotations of an ingress
- Validation of the annotation set into an immutable AuthTLSConfig
- Pluggable resolution of the CA secret (Kubernetes API client included)
- A FastAPI router for validating ingress manifests

Quick start:
    from ingress_authtls import AuthTLSParser, Ingress, LocationDeniedError

    parser = AuthTLSParser(resolver)
    try:
        config = parser.parse(Ingress.from_manifest(manifest))
    except LocationDeniedError:
        ...  # deny traffic to the location
"""

from ingress_authtls.annotations import AnnotationExtractor, IngressAnnotations
from ingress_authtls.certificate import AuthSSLCert
from ingress_authtls.config import AnnotationConfig, SecretStoreConfig
from ingress_authtls.core import AuthTLSParser, parse_auth_tls
from ingress_authtls.errors import (
    IngressAnnotationError,
    InvalidAnnotationConfigurationError,
    InvalidAnnotationContentError,
    InvalidCertificateError,
    LocationDeniedError,
    MissingAnnotationError,
    ResolverError,
    SecretNotFoundError,
    SecretStoreError,
)
from ingress_authtls.ingress import Ingress, parse_namespaced_name
from ingress_authtls.resolvers import (
    CertificateResolver,
    SecretCertificateResolver,
    SecretSource,
)
from ingress_authtls.secret_store import SecretStoreClient
from ingress_authtls.tls_config import AuthTLSConfig, configs_equal

__version__ = "0.1.0"

__all__ = [
    # Config
    "AnnotationConfig",
    "SecretStoreConfig",
    # Models
    "Ingress",
    "AuthSSLCert",
    "AuthTLSConfig",
    "configs_equal",
    "parse_namespaced_name",
    # Core
    "AuthTLSParser",
    "parse_auth_tls",
    # Annotations
    "AnnotationExtractor",
    "IngressAnnotations",
    # Resolvers
    "CertificateResolver",
    "SecretSource",
    "SecretCertificateResolver",
    "SecretStoreClient",
    # Errors
    "IngressAnnotationError",
    "MissingAnnotationError",
    "InvalidAnnotationContentError",
    "InvalidAnnotationConfigurationError",
    "LocationDeniedError",
    "ResolverError",
    "SecretNotFoundError",
    "InvalidCertificateError",
    "SecretStoreError",
]
