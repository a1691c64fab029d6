"""
FastAPI integration for validating ingress client-authentication annotations.

Usage:
    from fastapi import FastAPI
    from ingress_authtls import AuthTLSParser
    from ingress_authtls.fastapi import create_validation_router

    app = FastAPI()
    app.include_router(create_validation_router(AuthTLSParser(resolver)))

    # POST /auth-tls/validate with an ingress manifest as JSON body
"""

import logging
from collections.abc import Callable
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ingress_authtls.core import AuthTLSParser
from ingress_authtls.errors import InvalidAnnotationConfigurationError, LocationDeniedError
from ingress_authtls.ingress import Ingress
from ingress_authtls.tls_config import AuthTLSConfig

logger = logging.getLogger(__name__)


def _denied_exception(detail: str) -> HTTPException:
    """Create a 403 Forbidden exception."""
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=detail,
    )


def _invalid_exception(detail: str) -> HTTPException:
    """Create a 422 Unprocessable Entity exception."""
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=detail,
    )


def require_auth_tls(
    parser: AuthTLSParser,
) -> Callable[..., AuthTLSConfig]:
    """
    Create a FastAPI dependency that parses an ingress manifest from the request body.

    Returns AuthTLSConfig if the annotations are usable.
    Raises 422 for a malformed manifest or an inconsistent annotation set,
    403 when the location would have to be denied.

    Args:
        parser: Parser used for every request

    Returns:
        FastAPI dependency function

    Example:
        @app.post("/render")
        async def render(config: AuthTLSConfig = Depends(require_auth_tls(parser))):
            return config.to_dict()
    """

    def dependency(
        manifest: Annotated[dict[str, Any], Body()],
    ) -> AuthTLSConfig:
        try:
            ingress = Ingress.from_manifest(manifest)
        except ValueError as e:
            raise _invalid_exception(str(e))

        try:
            return parser.parse(ingress)
        except LocationDeniedError as e:
            logger.warning(f"Ingress {ingress.key} denied: {e.message}")
            raise _denied_exception(e.message)
        except InvalidAnnotationConfigurationError as e:
            logger.warning(f"Ingress {ingress.key} rejected: {e.message}")
            raise _invalid_exception(e.message)

    return dependency


def create_validation_router(
    parser: AuthTLSParser,
    prefix: str = "/auth-tls",
) -> APIRouter:
    """
    Create a router exposing a validation endpoint for ingress manifests.

    Args:
        parser: Parser used for every request
        prefix: Path prefix of the router (default: "/auth-tls")

    Returns:
        APIRouter with ``POST {prefix}/validate``
    """
    router = APIRouter(prefix=prefix)

    @router.post("/validate")
    def validate(
        config: Annotated[AuthTLSConfig, Depends(require_auth_tls(parser))],
    ) -> dict[str, Any]:
        return {"allowed": True, "config": config.to_dict()}

    return router
