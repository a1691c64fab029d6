"""
Certificate resolver protocols.

The annotation parser does not know where CA material lives. It asks a
``CertificateResolver`` for the bundle behind a "namespace/name" reference;
consumers plug in their own implementation or use ``SecretCertificateResolver``
on top of any ``SecretSource`` (``SecretStoreClient`` reads the Kubernetes API).

Usage:
    from ingress_authtls import AuthTLSParser, SecretStoreConfig
    from ingress_authtls.resolvers import SecretCertificateResolver
    from ingress_authtls.secret_store import SecretStoreClient

    client = SecretStoreClient(SecretStoreConfig(api_url="https://kubernetes.default.svc"))
    parser = AuthTLSParser(SecretCertificateResolver(client))
"""

import logging
from collections.abc import Mapping
from typing import Protocol

from ingress_authtls.certificate import AuthSSLCert
from ingress_authtls.errors import InvalidCertificateError
from ingress_authtls.ingress import parse_namespaced_name

logger = logging.getLogger(__name__)


class CertificateResolver(Protocol):
    """
    Protocol for resolving client-authentication CA material.

    Implementations raise ResolverError (or a subclass) when the secret
    is missing or does not contain usable material.
    """

    def get_auth_certificate(self, secret: str) -> AuthSSLCert:
        """
        Resolve a secret reference.

        Args:
            secret: "namespace/name" of the secret

        Returns:
            The CA bundle

        Raises:
            ResolverError: If the certificate cannot be resolved
        """
        ...


class SecretSource(Protocol):
    """Protocol for anything that returns decoded secret data by namespace and name."""

    def get_secret(self, namespace: str, name: str) -> Mapping[str, bytes | str]: ...


class SecretCertificateResolver:
    """
    CertificateResolver reading "ca.crt" (and optionally "ca.crl") from a secret.

    Example:
        resolver = SecretCertificateResolver(client)
        cert = resolver.get_auth_certificate("default/ca-secret")
    """

    def __init__(self, source: SecretSource) -> None:
        self.source = source

    def get_auth_certificate(self, secret: str) -> AuthSSLCert:
        try:
            namespace, name = parse_namespaced_name(secret)
        except ValueError as e:
            raise InvalidCertificateError(str(e)) from e

        data = self.source.get_secret(namespace, name)
        cert = AuthSSLCert.from_secret_data(secret, data)
        logger.debug(f"Resolved CA certificate from secret {secret} (sha {cert.ca_sha})")
        return cert
