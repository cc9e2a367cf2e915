"""Authentication router for the Task Management API."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from sqlmodel import Session

from app.config import Settings, get_settings
from app.db.config import get_session
from app.repositories.user_repository import UserRepository
from app.schemas.response import ApiResponse, success_response
from app.services.auth_service import AuthService, AzureADClient
from app.services.errors import InvalidIdTokenError, TokenExchangeError
from app.utils.logger import get_logger

router = APIRouter(tags=["Authentication"])  # main.py adds the /api/auth prefix

logger = get_logger(__name__)


def get_oauth_client(settings: Settings = Depends(get_settings)) -> AzureADClient:
    return AzureADClient(settings)


def get_auth_service(
    session: Session = Depends(get_session),
    oauth_client: AzureADClient = Depends(get_oauth_client),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    """Dependency for getting AuthService instance."""
    return AuthService(settings, UserRepository(session), oauth_client)


@router.get("/callback", response_model=ApiResponse)
async def auth_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    error_description: Optional[str] = Query(None),
    service: AuthService = Depends(get_auth_service),
):
    """Complete the Azure AD authorization-code flow and issue an application token."""
    if error:
        logger.warning("OAuth provider returned an error", error=error, description=error_description)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Authentication error: {error}" + (f" - {error_description}" if error_description else ""),
        )

    if not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Authorization code not provided",
        )

    try:
        result = await service.complete_login(code)
    except TokenExchangeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except InvalidIdTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    logger.info("User authenticated", user_id=result.user.id, state=state)
    return success_response(result, "Authentication completed successfully")
