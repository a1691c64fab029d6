"""
Shared fixtures: throwaway CA material and a fake certificate resolver.
"""

from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from ingress_authtls import AuthSSLCert, AuthTLSParser, Ingress, SecretNotFoundError

PREFIX = "nginx.ingress.kubernetes.io"


def generate_ca(common_name: str = "Test CA") -> tuple[str, str]:
    """Create a self-signed CA certificate and an empty CRL, both PEM encoded."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)

    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    crl = (
        x509.CertificateRevocationListBuilder()
        .issuer_name(name)
        .last_update(now)
        .next_update(now + timedelta(days=1))
        .sign(key, hashes.SHA256())
    )

    return (
        cert.public_bytes(serialization.Encoding.PEM).decode(),
        crl.public_bytes(serialization.Encoding.PEM).decode(),
    )


class FakeResolver:
    """CertificateResolver backed by a dict, recording every lookup."""

    def __init__(self, certs: dict[str, AuthSSLCert]) -> None:
        self.certs = certs
        self.calls: list[str] = []

    def get_auth_certificate(self, secret: str) -> AuthSSLCert:
        self.calls.append(secret)
        if secret not in self.certs:
            raise SecretNotFoundError(f"secret {secret} was not found")
        return self.certs[secret]


@pytest.fixture(scope="session")
def ca_material():
    """PEM encoded CA certificate and CRL."""
    return generate_ca()


@pytest.fixture
def ca_pem(ca_material):
    return ca_material[0]


@pytest.fixture
def crl_pem(ca_material):
    return ca_material[1]


@pytest.fixture
def cert(ca_pem):
    """Certificate bundle stored in secret ns/cert."""
    return AuthSSLCert.from_secret_data("ns/cert", {"ca.crt": ca_pem})


@pytest.fixture
def resolver(cert):
    return FakeResolver({"ns/cert": cert})


@pytest.fixture
def parser(resolver):
    return AuthTLSParser(resolver)


@pytest.fixture
def make_ingress():
    """Build an Ingress from annotation suffixes, e.g. make_ingress(**{"auth-tls-ocsp": "on"})."""

    def factory(**annotations: str) -> Ingress:
        return Ingress(
            namespace="ns",
            name="echo",
            annotations={f"{PREFIX}/{key}": value for key, value in annotations.items()},
        )

    return factory


@pytest.fixture
def make_resolver():
    """Factory for FakeResolver instances."""
    return FakeResolver


@pytest.fixture(scope="session")
def other_ca_pem():
    """PEM encoded certificate of a second, unrelated CA."""
    return generate_ca("Other CA")[0]
