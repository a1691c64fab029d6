"""
Tests for the Kubernetes secret client and the secret-backed resolver.
"""

import base64

import httpx
import pytest
import respx
from httpx import Response

from ingress_authtls import (
    AuthTLSParser,
    InvalidCertificateError,
    LocationDeniedError,
    SecretCertificateResolver,
    SecretNotFoundError,
    SecretStoreClient,
    SecretStoreConfig,
    SecretStoreError,
)

SECRET_URL = "https://kubernetes.test/api/v1/namespaces/ns/secrets/cert"


def secret_body(**data: str) -> dict:
    """Build a Secret object with base64 encoded data."""
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": "cert", "namespace": "ns"},
        "data": {key: base64.b64encode(value.encode()).decode() for key, value in data.items()},
    }


@pytest.fixture
def config():
    """Create test config."""
    return SecretStoreConfig(
        api_url="https://kubernetes.test",
        token="test-token",
        cache_ttl_seconds=10,
        http_timeout=5.0,
    )


@pytest.fixture
def client(config):
    """Create test secret client."""
    return SecretStoreClient(config)


@respx.mock
def test_fetch_secret_success(client, ca_pem):
    """Test successful secret fetch."""
    route = respx.get(SECRET_URL).mock(return_value=Response(200, json=secret_body(**{"ca.crt": ca_pem})))

    data = client.get_secret("ns", "cert")

    assert data == {"ca.crt": ca_pem.encode()}
    assert route.calls.last.request.headers["Authorization"] == "Bearer test-token"


@respx.mock
def test_secret_cache_ttl(client, ca_pem):
    """Test that secrets are cached and respect the TTL."""
    route = respx.get(SECRET_URL).mock(return_value=Response(200, json=secret_body(**{"ca.crt": ca_pem})))

    client.get_secret("ns", "cert")
    assert route.call_count == 1

    client.get_secret("ns", "cert")
    assert route.call_count == 1
    assert client.cache_valid("ns", "cert")

    client.get_secret("ns", "cert", force_refresh=True)
    assert route.call_count == 2


@respx.mock
def test_zero_ttl_disables_cache(ca_pem):
    """Test that a zero TTL fetches on every call."""
    client = SecretStoreClient(SecretStoreConfig(api_url="https://kubernetes.test", cache_ttl_seconds=0))
    route = respx.get(SECRET_URL).mock(return_value=Response(200, json=secret_body(**{"ca.crt": ca_pem})))

    client.get_secret("ns", "cert")
    client.get_secret("ns", "cert")

    assert route.call_count == 2
    assert "Authorization" not in route.calls.last.request.headers


@respx.mock
def test_cached_secret_not_shared(client, ca_pem):
    """Test that changing a returned secret does not change the cache."""
    respx.get(SECRET_URL).mock(return_value=Response(200, json=secret_body(**{"ca.crt": ca_pem})))

    first = client.get_secret("ns", "cert")
    first["ca.crt"] = b"tampered"
    first["extra"] = b"x"

    assert client.get_secret("ns", "cert") == {"ca.crt": ca_pem.encode()}


@respx.mock
def test_clear_cache(client, ca_pem):
    """Test cache clearing."""
    respx.get(SECRET_URL).mock(return_value=Response(200, json=secret_body(**{"ca.crt": ca_pem})))

    client.get_secret("ns", "cert")
    assert client.cache_valid("ns", "cert")

    client.clear_cache()
    assert not client.cache_valid("ns", "cert")


@respx.mock
def test_secret_not_found(client):
    """Test that a 404 is reported as a missing secret."""
    respx.get(SECRET_URL).mock(return_value=Response(404, json={"kind": "Status"}))

    with pytest.raises(SecretNotFoundError):
        client.get_secret("ns", "cert")


@respx.mock
def test_secret_fetch_failure(client):
    """Test handling of secret fetch failure."""
    respx.get(SECRET_URL).mock(return_value=Response(500, text="Internal Server Error"))

    with pytest.raises(SecretStoreError) as exc_info:
        client.get_secret("ns", "cert")

    assert "HTTP 500" in str(exc_info.value)


@respx.mock
def test_secret_transport_error(client):
    """Test that connection errors are wrapped."""
    respx.get(SECRET_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(SecretStoreError):
        client.get_secret("ns", "cert")


@respx.mock
def test_secret_invalid_base64(client):
    """Test that undecodable data is rejected."""
    body = secret_body()
    body["data"] = {"ca.crt": "%%%not-base64%%%"}
    respx.get(SECRET_URL).mock(return_value=Response(200, json=body))

    with pytest.raises(SecretStoreError):
        client.get_secret("ns", "cert")


@respx.mock
def test_resolver_builds_certificate(client, ca_pem, crl_pem):
    """Test resolving a certificate bundle through the API."""
    respx.get(SECRET_URL).mock(
        return_value=Response(200, json=secret_body(**{"ca.crt": ca_pem, "ca.crl": crl_pem}))
    )

    cert = SecretCertificateResolver(client).get_auth_certificate("ns/cert")

    assert cert.secret == "ns/cert"
    assert cert.ca_certificate == ca_pem
    assert cert.has_crl


@respx.mock
def test_resolver_ignores_unrelated_binary_keys(client, ca_pem):
    """Test that binary entries next to the CA do not block resolution."""
    body = secret_body(**{"ca.crt": ca_pem})
    body["data"]["keystore.p12"] = base64.b64encode(b"\xff\xfe\x00binary").decode()
    respx.get(SECRET_URL).mock(return_value=Response(200, json=body))

    cert = SecretCertificateResolver(client).get_auth_certificate("ns/cert")

    assert cert.ca_certificate == ca_pem


@respx.mock
def test_resolver_rejects_binary_ca(client):
    """Test that a CA entry that is not text is rejected."""
    body = secret_body()
    body["data"] = {"ca.crt": base64.b64encode(b"\xff\xfe").decode()}
    respx.get(SECRET_URL).mock(return_value=Response(200, json=body))

    with pytest.raises(InvalidCertificateError):
        SecretCertificateResolver(client).get_auth_certificate("ns/cert")


@respx.mock
def test_resolver_rejects_secret_without_ca(client):
    """Test that a TLS secret without a CA is rejected."""
    respx.get(SECRET_URL).mock(return_value=Response(200, json=secret_body(**{"tls.crt": "x"})))

    with pytest.raises(InvalidCertificateError):
        SecretCertificateResolver(client).get_auth_certificate("ns/cert")


def test_resolver_rejects_bad_reference(client):
    """Test that malformed references never reach the API."""
    with pytest.raises(InvalidCertificateError):
        SecretCertificateResolver(client).get_auth_certificate("cert")


@respx.mock
def test_parser_denies_location_when_secret_missing(client, make_ingress):
    """Test the parser end to end with a missing secret."""
    respx.get(SECRET_URL).mock(return_value=Response(404, json={"kind": "Status"}))
    parser = AuthTLSParser(SecretCertificateResolver(client))

    with pytest.raises(LocationDeniedError) as exc_info:
        parser.parse(make_ingress(**{"auth-tls-secret": "ns/cert"}))

    assert "error obtaining certificate" in exc_info.value.message


@respx.mock
def test_parser_with_secret_store(client, make_ingress, ca_pem):
    """Test the parser end to end with a stored CA."""
    respx.get(SECRET_URL).mock(return_value=Response(200, json=secret_body(**{"ca.crt": ca_pem})))
    parser = AuthTLSParser(SecretCertificateResolver(client))

    config = parser.parse(make_ingress(**{"auth-tls-secret": "ns/cert", "auth-tls-verify-depth": "2"}))

    assert config.auth_ssl_cert.ca_certificate == ca_pem
    assert config.validation_depth == 2


def test_secret_store_config_validation():
    """Test that invalid settings are rejected."""
    with pytest.raises(ValueError):
        SecretStoreConfig(api_url="")
    with pytest.raises(ValueError):
        SecretStoreConfig(api_url="https://kubernetes.test", http_timeout=0)
    with pytest.raises(ValueError):
        SecretStoreConfig(api_url="https://kubernetes.test", cache_ttl_seconds=-1)
