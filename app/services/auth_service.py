"""OAuth callback handling: code exchange, user upsert and application tokens."""
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import httpx
import jwt
from jose import jwt as jose_jwt, JWTError
from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.models.user import User
from app.repositories.base import UserStore
from app.schemas.auth import AuthCallbackResponse, OAuthTokenResponse, UserInfo
from app.services.errors import InvalidIdTokenError, TokenExchangeError
from app.utils.logger import get_logger
from app.utils.time import utcnow

logger = get_logger(__name__)

DEFAULT_ROLE = "User"
OAUTH_SCOPE = "openid profile email"


def create_access_token(user: User, settings: Settings, now: Optional[datetime] = None) -> str:
    """Issue an HS256 application token for an authenticated user."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.jwt_expiration_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm="HS256")


def read_id_token_claims(id_token: str) -> Optional[Dict[str, Any]]:
    """
    Read the claims of an id_token received directly from the token endpoint.

    The signature is not verified here.
    """
    try:
        return jose_jwt.get_unverified_claims(id_token)
    except JWTError as e:
        logger.error("Could not read id_token claims", error=str(e))
        return None


class AzureADClient:
    """Authorization-code exchange against the Azure AD v2.0 token endpoint."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.settings = settings
        self.transport = transport
        self.timeout = timeout

    async def exchange_code(self, code: str) -> Optional[OAuthTokenResponse]:
        """
        Exchange an authorization code for tokens.

        Returns:
            The token payload, or None when the provider rejects the code or is unreachable
        """
        data = {
            "client_id": self.settings.azure_ad_client_id,
            "client_secret": self.settings.azure_ad_client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.settings.azure_ad_redirect_uri,
            "scope": OAUTH_SCOPE,
        }
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(self.settings.azure_ad_token_endpoint, data=data)
        except httpx.HTTPError as e:
            logger.error("Token endpoint unreachable", error=str(e))
            return None

        if not response.is_success:
            logger.error(
                "Token exchange failed",
                status_code=response.status_code,
                body=response.text[:500],
            )
            return None

        try:
            return OAuthTokenResponse.model_validate(response.json())
        except ValueError as e:
            logger.error("Token endpoint returned an unreadable payload", error=str(e))
            return None


class AuthService:
    """Completes an OAuth login and issues the application token."""

    def __init__(
        self,
        settings: Settings,
        users: UserStore,
        oauth_client: AzureADClient,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.settings = settings
        self.users = users
        self.oauth_client = oauth_client
        self.clock = clock

    def upsert_user(self, claims: Dict[str, Any]) -> User:
        """Create the user on first login, otherwise bump its last-login timestamp."""
        user_id = claims.get("oid") or claims.get("sub")
        email = claims.get("email") or claims.get("preferred_username")
        if not user_id or not email:
            raise InvalidIdTokenError("Token is missing the user id or email")

        name = claims.get("name")
        if not name:
            name = f"{claims.get('given_name') or ''} {claims.get('family_name') or ''}".strip() or email

        now = self.clock()
        existing = self.users.get_by_id(user_id)
        if existing is not None:
            self.users.update_last_login(user_id, now)
            logger.info("Existing user signed in", user_id=user_id)
            return existing

        user = self.users.create(
            User(
                id=user_id,
                name=name.strip(),
                email=email,
                role=DEFAULT_ROLE,
                is_active=True,
                created_at=now,
                last_login_at=now,
            )
        )
        logger.info("New user created", user_id=user_id)
        return user

    async def complete_login(self, code: str) -> AuthCallbackResponse:
        """
        Exchange the code, upsert the user and issue an application token.

        Raises:
            TokenExchangeError: the provider returned no usable tokens
            InvalidIdTokenError: the id_token is unreadable or incomplete
        """
        tokens = await self.oauth_client.exchange_code(code)
        if tokens is None or not tokens.id_token:
            raise TokenExchangeError("Could not obtain access tokens")

        claims = read_id_token_claims(tokens.id_token)
        if claims is None:
            raise InvalidIdTokenError("Invalid token")

        user = await run_in_threadpool(self.upsert_user, claims)
        return AuthCallbackResponse(
            token=create_access_token(user, self.settings),
            user=UserInfo(id=user.id, name=user.name, email=user.email, role=user.role),
            expires_in=self.settings.jwt_expiration_minutes * 60,
        )
