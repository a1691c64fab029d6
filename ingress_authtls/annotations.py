"""
Typed access to ingress annotations.

Parsers never read ``Ingress.annotations`` directly; they go through an
``AnnotationExtractor`` so tests and other metadata stores can substitute
their own implementation.
"""

import re
from typing import Protocol

from ingress_authtls.config import AnnotationConfig
from ingress_authtls.errors import InvalidAnnotationContentError, MissingAnnotationError
from ingress_authtls.ingress import Ingress

_INT_REGEX = re.compile(r"[+-]?[0-9]+")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class AnnotationExtractor(Protocol):
    """
    Protocol for typed annotation lookups.

    Every method takes the annotation key suffix (e.g. "auth-tls-secret")
    and raises MissingAnnotationError when the annotation is absent or
    InvalidAnnotationContentError when it cannot be read as the type.
    """

    def get_string_annotation(self, name: str, ingress: Ingress) -> str: ...

    def get_int_annotation(self, name: str, ingress: Ingress) -> int: ...

    def get_bool_annotation(self, name: str, ingress: Ingress) -> bool: ...


class IngressAnnotations:
    """
    AnnotationExtractor reading from ``Ingress.annotations``.

    Example:
        extractor = IngressAnnotations(AnnotationConfig())
        depth = extractor.get_int_annotation("auth-tls-verify-depth", ingress)
    """

    def __init__(self, config: AnnotationConfig | None = None) -> None:
        self.config = config or AnnotationConfig()

    def _get_value(self, name: str, ingress: Ingress) -> str:
        key = self.config.key(name)
        if not ingress.annotations or key not in ingress.annotations:
            raise MissingAnnotationError(key)

        value = ingress.annotations[key]
        if not value:
            raise InvalidAnnotationContentError(key, value)
        return value

    def get_string_annotation(self, name: str, ingress: Ingress) -> str:
        """Return the annotation value as a string."""
        return self._get_value(name, ingress)

    def get_int_annotation(self, name: str, ingress: Ingress) -> int:
        """Return the annotation value as a base-10 integer."""
        value = self._get_value(name, ingress)
        if not _INT_REGEX.fullmatch(value):
            raise InvalidAnnotationContentError(self.config.key(name), value)
        return int(value)

    def get_bool_annotation(self, name: str, ingress: Ingress) -> bool:
        """Return the annotation value as a boolean."""
        value = self._get_value(name, ingress)
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise InvalidAnnotationContentError(self.config.key(name), value)
