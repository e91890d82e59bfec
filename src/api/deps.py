"""FastAPI dependency injection for database access and request identity."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import user_id_ctx
from src.core.security import InvalidTokenError, decode_token, token_user_id
from src.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session from the app's session factory.

    Args:
        request: FastAPI request containing app state.

    Yields:
        AsyncSession for database operations with automatic commit/rollback.
        Declared with function scope so the commit lands before the response
        is sent and before any background task runs.
    """
    async with request.app.state.async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    db: Annotated[AsyncSession, Depends(get_db, scope="function")],
) -> User:
    """Resolve the acting user from the ``Authorization: Bearer`` access token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or names no user.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        claims = decode_token(credentials.credentials)
        user_id = token_user_id(claims)
    except InvalidTokenError as exc:
        raise _unauthorized("Invalid or expired token") from exc

    user = await db.get(User, user_id)
    if user is None:
        raise _unauthorized("User no longer exists")

    user_id_ctx.set(user.id)
    return user


DbSession = Annotated[AsyncSession, Depends(get_db, scope="function")]
CurrentUser = Annotated[User, Depends(get_current_user)]
