"""JWT authentication for FastAPI."""
from functools import lru_cache
from typing import Optional, Sequence

from fastapi import Depends, HTTPException, Request, status
from jose import jwt, JWTError
from pydantic import BaseModel

from app.config import Settings, get_settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Tried in order; different issuers name the subject differently
USER_ID_CLAIMS = ("sub", "nameid", "userid")


class CurrentUser(BaseModel):
    """User information extracted from a validated token."""
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


class TokenValidator:
    """Validates application bearer tokens. Stateless and safe to share."""

    def __init__(
        self,
        secret_key: str,
        issuer: str,
        audience: str,
        clock_skew_seconds: int = 0,
        algorithms: Sequence[str] = ("HS256",),
    ):
        self.secret_key = secret_key
        self.issuer = issuer
        self.audience = audience
        self.clock_skew_seconds = clock_skew_seconds
        self.algorithms = list(algorithms)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenValidator":
        return cls(
            secret_key=settings.jwt_secret_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            clock_skew_seconds=settings.jwt_clock_skew_seconds,
        )

    def validate(self, token: Optional[str]) -> Optional[CurrentUser]:
        """
        Verify signature, issuer, audience and expiry.

        Returns None for any failure; callers cannot tell an expired token from
        a malformed one.
        """
        if not token or not isinstance(token, str):
            return None

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"require_exp": True, "leeway": self.clock_skew_seconds},
            )
        except (JWTError, ValueError) as e:
            logger.debug("Token rejected", reason=type(e).__name__)
            return None

        user_id = next((payload[claim] for claim in USER_ID_CLAIMS if payload.get(claim)), None)
        if not user_id:
            return None

        return CurrentUser(
            user_id=str(user_id),
            email=payload.get("email"),
            name=payload.get("name"),
            role=payload.get("role"),
        )


@lru_cache
def _validator_for(settings: Settings) -> TokenValidator:
    return TokenValidator.from_settings(settings)


def get_token_validator(settings: Settings = Depends(get_settings)) -> TokenValidator:
    """Dependency returning the process-wide validator for the active settings."""
    return _validator_for(settings)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    validator: TokenValidator = Depends(get_token_validator),
) -> CurrentUser:
    """
    Validate the bearer token from the Authorization header.

    Raises:
        HTTPException: 401 for a missing header or any invalid token
    """
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise _unauthorized()

    current_user = validator.validate(auth_header[7:].strip())
    if current_user is None:
        raise _unauthorized()
    return current_user
