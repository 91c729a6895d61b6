"""Bearer token authentication for the HealthWatch API"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Set

from jose import JWTError, jwt
from pydantic import BaseModel

from healthwatch.config import SecurityConfig, settings
from healthwatch.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# Identity used when authentication is not required
DEVELOPMENT_IDENTITY = "dev_user"


class AuthResult(BaseModel):
    """Authentication result"""
    authenticated: bool
    user_id: Optional[str] = None
    role: Optional[str] = None
    error: Optional[str] = None


class Authenticator:
    """
    Issues and verifies signed bearer tokens for dashboard users.

    Route handlers only need to know that a caller is authenticated; the
    identity is logged but never changes what a route does.
    """

    def __init__(self, config: Optional[SecurityConfig] = None):
        config = config or settings.security
        self.secret_key = config.jwt_secret
        self.algorithm = config.jwt_algorithm
        self.expiry_minutes = config.jwt_expiry_minutes
        self.issuer_secret = config.token_issuer_secret
        self._revoked_tokens: Set[str] = set()

    def authorize_issuance(self, issuer_secret: Optional[str], require_auth: bool) -> None:
        """
        Check that a caller may mint a token.

        With an issuer secret configured the caller must present it. Without
        one, issuance is open only while authentication is not required.

        Raises:
            AuthenticationError: If issuance is not allowed
        """
        if self.issuer_secret:
            if not issuer_secret or not hmac.compare_digest(
                issuer_secret.encode("utf-8"), self.issuer_secret.encode("utf-8")
            ):
                logger.warning("Token issuance refused: bad issuer secret")
                raise AuthenticationError(
                    "Invalid issuer secret",
                    details={"scheme": "IssuerSecret"}
                )
        elif require_auth:
            raise AuthenticationError(
                "Token issuance is disabled: no issuer secret configured",
                details={"scheme": "IssuerSecret"}
            )

    def generate_token(
        self,
        user_id: str,
        role: str = "field_worker",
        expiry_minutes: Optional[int] = None
    ) -> str:
        """
        Generate a signed token.

        Args:
            user_id: User identifier
            role: Dashboard role (field_worker, health_officer, admin)
            expiry_minutes: Custom lifetime (overrides configuration)
        """
        issued_at = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=expiry_minutes or self.expiry_minutes),
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.info("Issued token", extra={"user_id": user_id, "role": role})
        return token

    def verify_token(self, token: str) -> AuthResult:
        """Check signature, expiry and revocation of a token."""
        if token in self._revoked_tokens:
            logger.warning("Attempted use of revoked token")
            return AuthResult(authenticated=False, error="Token has been revoked")

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            return AuthResult(authenticated=False, error="Token has expired")
        except JWTError as e:
            logger.warning("Token verification failed", extra={"error": str(e)})
            return AuthResult(authenticated=False, error=f"Invalid token: {str(e)}")

        user_id = payload.get("sub")
        if not user_id:
            return AuthResult(authenticated=False, error="Invalid token payload")

        return AuthResult(authenticated=True, user_id=user_id, role=payload.get("role"))

    def revoke_token(self, token: str) -> None:
        """Reject a token from now on."""
        self._revoked_tokens.add(token)
        logger.info("Token revoked")


# Global authenticator instance
authenticator = Authenticator()
