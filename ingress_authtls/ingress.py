"""
Ingress model.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Ingress:
    """
    The parts of an ingress object that annotation parsers read.

    Attributes:
        namespace: Namespace of the ingress
        name: Name of the ingress
        annotations: Free-form string metadata attached to the ingress

    Example:
        ingress = Ingress(
            namespace="default",
            name="echo",
            annotations={"nginx.ingress.kubernetes.io/auth-tls-secret": "default/ca"},
        )
    """

    namespace: str
    name: str
    annotations: Mapping[str, str] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """Return the "namespace/name" key of the ingress."""
        return f"{self.namespace}/{self.name}"

    @classmethod
    def from_manifest(cls, manifest: dict[str, Any]) -> "Ingress":
        """
        Create an Ingress from a Kubernetes manifest dictionary.

        Args:
            manifest: Decoded ingress object (as returned by the API server)

        Returns:
            Ingress instance

        Raises:
            ValueError: If metadata or name is missing
        """
        metadata = manifest.get("metadata")
        if not isinstance(metadata, dict):
            raise ValueError("Ingress missing required 'metadata'")

        name = metadata.get("name")
        if not name:
            raise ValueError("Ingress missing required 'metadata.name'")

        # Annotation values are strings on the wire; anything else is stringified
        annotations_raw = metadata.get("annotations") or {}
        if isinstance(annotations_raw, dict):
            annotations = {str(k): str(v) for k, v in annotations_raw.items()}
        else:
            annotations = {}

        return cls(
            namespace=str(metadata.get("namespace") or "default"),
            name=str(name),
            annotations=annotations,
        )


def parse_namespaced_name(value: str) -> tuple[str, str]:
    """
    Split a "namespace/name" reference.

    Args:
        value: Reference such as "default/ca-secret"

    Returns:
        (namespace, name) tuple

    Raises:
        ValueError: If the value is not exactly two non-empty parts
    """
    parts = value.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"invalid format (namespace/name) found in '{value}'")
    return parts[0], parts[1]
