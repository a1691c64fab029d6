"""
Kubernetes secret client with TTL-based caching.
"""

import base64
import binascii
import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from ingress_authtls.config import SecretStoreConfig
from ingress_authtls.errors import SecretNotFoundError, SecretStoreError

logger = logging.getLogger(__name__)


@dataclass
class CachedSecret:
    """Cached secret data with expiration."""

    data: dict[str, bytes]
    fetched_at: float
    expires_at: float


@dataclass
class SecretStoreClient:
    """
    Client reading secrets from the Kubernetes API server.

    Features:
    - Caches each secret for a configurable TTL (default: 5 minutes)
    - Decodes the base64 "data" section into bytes
    - Distinguishes a missing secret from transport errors

    Example:
        client = SecretStoreClient(config)
        data = client.get_secret("default", "ca-secret")
        pem = data["ca.crt"].decode()
    """

    config: SecretStoreConfig
    _cache: dict[str, CachedSecret] = field(default_factory=dict, init=False, repr=False)

    def _secret_url(self, namespace: str, name: str) -> str:
        base = self.config.api_url.rstrip("/")
        return f"{base}/api/v1/namespaces/{namespace}/secrets/{name}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    def _fetch_secret(self, namespace: str, name: str) -> dict[str, bytes]:
        """
        Fetch and decode a secret.

        Returns:
            Secret data with base64 values decoded to bytes

        Raises:
            SecretNotFoundError: If the API server answers 404
            SecretStoreError: If the fetch fails or the response is invalid
        """
        url = self._secret_url(namespace, name)
        try:
            with httpx.Client(
                timeout=self.config.http_timeout, verify=self.config.verify
            ) as client:
                response = client.get(url, headers=self._headers())
        except httpx.HTTPError as e:
            raise SecretStoreError(f"HTTP error fetching secret {namespace}/{name}: {e}") from e

        if response.status_code == 404:
            raise SecretNotFoundError(f"secret {namespace}/{name} was not found")
        if response.status_code != 200:
            raise SecretStoreError(
                f"Failed to fetch secret {namespace}/{name}: HTTP {response.status_code}"
            )

        try:
            body: dict[str, Any] = response.json()
        except ValueError as e:
            raise SecretStoreError(f"Invalid secret response for {namespace}/{name}: {e}") from e

        data = _decode_data(body.get("data") or {})
        logger.debug(f"Fetched secret {namespace}/{name} with {len(data)} keys")
        return data

    def get_secret(self, namespace: str, name: str, force_refresh: bool = False) -> dict[str, bytes]:
        """
        Get secret data, using the cache if valid.

        Args:
            namespace: Namespace of the secret
            name: Name of the secret
            force_refresh: If True, bypass cache and fetch the secret again

        Returns:
            A copy of the decoded secret data
        """
        key = f"{namespace}/{name}"
        now = time.time()

        cached = self._cache.get(key)
        if not force_refresh and cached is not None and now < cached.expires_at:
            return dict(cached.data)

        data = self._fetch_secret(namespace, name)

        self._cache[key] = CachedSecret(
            data=data,
            fetched_at=now,
            expires_at=now + self.config.cache_ttl_seconds,
        )

        logger.info(f"Secret {key} cached, expires in {self.config.cache_ttl_seconds}s")
        return dict(data)

    def clear_cache(self) -> None:
        """Clear the secret cache. Useful for testing or forced refresh."""
        self._cache.clear()
        logger.debug("Secret cache cleared")

    def cache_valid(self, namespace: str, name: str) -> bool:
        """Check if a cached copy of the secret is currently valid."""
        cached = self._cache.get(f"{namespace}/{name}")
        if cached is None:
            return False
        return time.time() < cached.expires_at


def _decode_data(raw: dict[str, Any]) -> dict[str, bytes]:
    data: dict[str, bytes] = {}
    for key, value in raw.items():
        try:
            data[key] = base64.b64decode(str(value), validate=True)
        except binascii.Error as e:
            raise SecretStoreError(f"Invalid base64 value for secret key {key}: {e}") from e
    return data
