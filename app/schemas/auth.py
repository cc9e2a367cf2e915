"""Authentication schemas for the Task Management API."""
from pydantic import BaseModel
from typing import Optional


class UserInfo(BaseModel):
    """Public summary of an authenticated user."""
    id: str
    name: str
    email: str
    role: str


class AuthCallbackResponse(BaseModel):
    """Application token issued after a successful OAuth callback."""
    token: str
    user: UserInfo
    expires_in: int


class OAuthTokenResponse(BaseModel):
    """Token endpoint payload returned by the identity provider."""
    access_token: Optional[str] = None
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: Optional[str] = None
