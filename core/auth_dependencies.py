"""
FastAPI Authentication Dependencies

Bearer-token dependencies shared by all LazyMint routers, plus the
internal-service guard used by maintenance endpoints. The identity
provider and internal secret are taken from the application container.
"""

from fastapi import Header, Request
from typing import Optional
import hmac
import logging

from core.errors import AuthRequiredError, PermissionDeniedError
from core.jwt_manager import Identity

logger = logging.getLogger(__name__)


def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Identity:
    """
    Authentication dependency: a valid bearer token is required

    Raises:
        AuthRequiredError: missing or invalid credential (401)
    """
    token = _extract_bearer(authorization)
    if not token:
        raise AuthRequiredError("Authentication required")
    provider = request.app.state.container.identity_provider
    return provider.verify_credential(token)


async def optional_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Optional[Identity]:
    """Optional authentication: invalid or missing credentials yield an anonymous caller"""
    token = _extract_bearer(authorization)
    if not token:
        return None
    provider = request.app.state.container.identity_provider
    try:
        return provider.verify_credential(token)
    except AuthRequiredError as e:
        logger.debug(f"Optional auth ignored invalid credential on {request.url.path}: {e}")
        return None


async def require_internal_service(
    request: Request,
    x_internal_service: Optional[str] = Header(None, alias="X-Internal-Service"),
    x_internal_service_secret: Optional[str] = Header(None, alias="X-Internal-Service-Secret"),
) -> str:
    """
    Internal service authentication (X-Internal-Service + X-Internal-Service-Secret)

    Returns:
        "internal-service"
    """
    if x_internal_service != "true" or not x_internal_service_secret:
        raise AuthRequiredError("Internal service authentication required")

    expected = request.app.state.container.settings.auth.internal_service_secret
    if not hmac.compare_digest(x_internal_service_secret, expected):
        client_host = request.client.host if request.client else "unknown"
        logger.warning(f"Invalid internal service secret from {client_host}")
        raise PermissionDeniedError("Invalid internal service credentials")

    logger.debug(f"Internal service request to {request.url.path}")
    return "internal-service"


__all__ = [
    "require_user",
    "optional_user",
    "require_internal_service",
]
