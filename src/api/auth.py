"""Authentication endpoints: Google sign-in and token refresh."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from src.api.deps import CurrentUser, DbSession
from src.core.config import settings
from src.core.logging import get_logger
from src.core.security import (
    REFRESH_TOKEN,
    InvalidTokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    token_user_id,
)
from src.integrations.google import verify_google_credential_async
from src.models.user import User
from src.storage.users import UserStorage

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class GoogleLoginRequest(BaseModel):
    """Credential returned by Google Sign-In in the browser."""

    credential: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """Access/refresh token pair."""

    success: bool = True
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Current user profile."""

    id: int
    username: str
    full_name: str
    email: str
    role: str
    avatar: str | None


def _issue_tokens(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(
            user_id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
        ),
        refresh_token=create_refresh_token(user.id),
    )


@router.post("/google", response_model=TokenResponse)
async def google_login(payload: GoogleLoginRequest, db: DbSession) -> TokenResponse:
    """Exchange a verified Google credential for an API token pair.

    The user is provisioned on first sign-in.
    """
    if not settings.google_client_id:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google sign-in is not configured",
        )

    try:
        info = await verify_google_credential_async(
            payload.credential, settings.google_client_id
        )
    except ValueError as exc:
        logger.warning("google_login_rejected", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Google credential",
        ) from exc

    user = await UserStorage(db).upsert_google_user(
        google_sub=info.sub,
        email=info.email,
        full_name=info.name,
        avatar=info.picture,
    )
    logger.info("user_logged_in", user_id=user.id)
    return _issue_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_tokens(payload: RefreshRequest, db: DbSession) -> TokenResponse:
    """Trade a refresh token for a new token pair."""
    try:
        claims = decode_token(payload.refresh_token, expected_type=REFRESH_TOKEN)
        user_id = token_user_id(claims)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        ) from exc

    user = await UserStorage(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists",
        )
    return _issue_tokens(user)


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        email=user.email,
        role=user.role,
        avatar=user.avatar,
    )
