"""
Errors raised while reading annotations and resolving certificates.
"""


class IngressAnnotationError(Exception):
    """
    Base class for annotation parsing errors.

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingAnnotationError(IngressAnnotationError):
    """The ingress has no annotation with the requested key."""

    def __init__(self, annotation: str) -> None:
        super().__init__(f"ingress rule without annotations: {annotation}")
        self.annotation = annotation


class InvalidAnnotationContentError(IngressAnnotationError):
    """The annotation exists but its value cannot be read as the requested type."""

    def __init__(self, annotation: str, value: str) -> None:
        super().__init__(
            f"the annotation {annotation} does not contain a valid value ({value!r})"
        )
        self.annotation = annotation
        self.value = value


class InvalidAnnotationConfigurationError(IngressAnnotationError):
    """
    Annotations are individually valid but inconsistent with each other.

    Callers should surface this to the operator rather than drop the setting.
    """

    def __init__(self, annotation: str, reason: str) -> None:
        super().__init__(
            f"the annotation {annotation} does not contain a valid configuration: {reason}"
        )
        self.annotation = annotation
        self.reason = reason


class LocationDeniedError(IngressAnnotationError):
    """
    Traffic to the location must be denied.

    Raised when client authentication is requested but cannot be set up,
    so the location is not served without it.

    Attributes:
        reason: The underlying error or a description of it
    """

    def __init__(self, reason: Exception | str) -> None:
        super().__init__(f"Location denied, reason: {reason}")
        self.reason = reason


class ResolverError(IngressAnnotationError):
    """Certificate material could not be resolved."""

    pass


class SecretNotFoundError(ResolverError):
    """The referenced secret does not exist."""

    pass


class InvalidCertificateError(ResolverError):
    """The secret exists but does not hold usable CA material."""

    pass


class SecretStoreError(ResolverError):
    """Error talking to the secret store."""

    pass
