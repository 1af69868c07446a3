"""
JWT Identity Provider for the LazyMint backend

Exchanges a bearer credential for the caller's identity. Tokens are HS256
JWTs whose subject is the stable user id.
"""

import jwt
import uuid
import secrets
import logging
from typing import Optional, Protocol, runtime_checkable
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass

from core.errors import AuthRequiredError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Verified caller identity"""
    subject_id: str
    email: Optional[str] = None
    email_verified: bool = False


@runtime_checkable
class IdentityProviderProtocol(Protocol):
    """Interface for bearer credential verification"""

    def verify_credential(self, token: str) -> Identity:
        """Raises AuthRequiredError when the credential is missing or invalid"""
        ...


class JWTManager:
    """
    JWT Token Manager

    Features:
    - Verifies bearer tokens into an Identity
    - Issues access tokens for development and tests
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: str = "HS256",
        issuer: str = "lazymint",
        access_token_expiry: int = 3600,  # 1 hour
    ):
        """
        Initialize JWT Manager

        Args:
            secret_key: Secret key for signing tokens (will auto-generate if not provided)
            algorithm: JWT algorithm (default: HS256)
            issuer: Token issuer identifier
            access_token_expiry: Access token expiry in seconds
        """
        self.secret_key = secret_key or self._generate_secret()
        self.algorithm = algorithm
        self.issuer = issuer
        self.access_token_expiry = access_token_expiry

        if not secret_key:
            logger.warning(
                "No JWT_SECRET provided - using generated secret. "
                "This should ONLY be used in development!"
            )

    def _generate_secret(self) -> str:
        """Generate a secure random secret"""
        return secrets.token_urlsafe(64)

    def create_access_token(
        self,
        subject_id: str,
        email: Optional[str] = None,
        email_verified: bool = False,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create an access token

        Args:
            subject_id: Stable user identifier
            email: User email
            email_verified: Whether the identity provider verified the email
            expires_delta: Custom expiration time (optional)

        Returns:
            JWT access token string
        """
        now = datetime.now(tz=timezone.utc)
        expires = now + (expires_delta or timedelta(seconds=self.access_token_expiry))

        payload = {
            "iss": self.issuer,
            "sub": subject_id,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
            "jti": str(uuid.uuid4()),
            "email": email,
            "email_verified": email_verified,
        }
        payload = {k: v for k, v in payload.items() if v is not None}

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"Created access token for user: {subject_id}, expires: {expires}")
        return token

    def verify_credential(self, token: str) -> Identity:
        """
        Verify and decode a bearer token

        Raises:
            AuthRequiredError: token missing, expired, or invalid
        """
        if not token:
            raise AuthRequiredError("Authentication required")

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except jwt.ExpiredSignatureError:
            raise AuthRequiredError("Token has expired")
        except jwt.InvalidIssuerError:
            raise AuthRequiredError("Invalid token issuer")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected bearer token: {e}")
            raise AuthRequiredError("Invalid authentication token")

        subject_id = payload.get("sub")
        if not subject_id:
            raise AuthRequiredError("Invalid authentication token")

        return Identity(
            subject_id=subject_id,
            email=payload.get("email"),
            email_verified=bool(payload.get("email_verified", False)),
        )
