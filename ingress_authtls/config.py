"""
Library configuration.
"""

from dataclasses import dataclass

DEFAULT_ANNOTATION_PREFIX = "nginx.ingress.kubernetes.io"


@dataclass(frozen=True)
class AnnotationConfig:
    """
    Configuration for reading ingress annotations.

    Attributes:
        prefix: Prefix prepended to every annotation key
            (default: "nginx.ingress.kubernetes.io")

    Example:
        config = AnnotationConfig(prefix="ingress.example.com")
        config.key("auth-tls-secret")  # "ingress.example.com/auth-tls-secret"
    """

    prefix: str = DEFAULT_ANNOTATION_PREFIX

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.prefix:
            raise ValueError("prefix is required")
        if self.prefix.endswith("/"):
            raise ValueError("prefix must not end with '/'")

    def key(self, suffix: str) -> str:
        """Return the full annotation key for a suffix."""
        return f"{self.prefix}/{suffix}"


@dataclass(frozen=True)
class SecretStoreConfig:
    """
    Configuration for fetching secrets from the Kubernetes API.

    Attributes:
        api_url: Base URL of the API server (e.g., "https://kubernetes.default.svc")
        token: Bearer token sent with each request (default: None)
        http_timeout: Timeout for secret fetch requests (default: 10.0 seconds)
        cache_ttl_seconds: How long to cache a fetched secret (default: 300 = 5 minutes)
        verify: TLS verification for the API server; True, False or a CA bundle path

    Example:
        config = SecretStoreConfig(
            api_url="https://kubernetes.default.svc",
            token=open("/var/run/secrets/kubernetes.io/serviceaccount/token").read(),
            verify="/var/run/secrets/kubernetes.io/serviceaccount/ca.crt",
        )
    """

    api_url: str
    token: str | None = None
    http_timeout: float = 10.0
    cache_ttl_seconds: int = 300
    verify: bool | str = True

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.api_url:
            raise ValueError("api_url is required")
        if self.cache_ttl_seconds < 0:
            raise ValueError("cache_ttl_seconds must be non-negative")
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")
