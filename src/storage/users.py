"""User lookups and Google account provisioning."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_logger
from src.models.user import User

logger = get_logger(__name__)


class UserStorage:
    """Reads users and provisions them on first Google sign-in."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def get_by_username(self, username: str) -> User | None:
        return await self._first(select(User).where(User.username == username))

    async def get_by_email(self, email: str) -> User | None:
        return await self._first(select(User).where(User.email == email.lower()))

    async def get_by_google_sub(self, google_sub: str) -> User | None:
        return await self._first(select(User).where(User.google_sub == google_sub))

    async def upsert_google_user(
        self,
        google_sub: str,
        email: str,
        full_name: str,
        avatar: str | None = None,
    ) -> User:
        """Find the user by Google subject, then email, else create one.

        Name and avatar are refreshed from the identity provider on each login.
        """
        email = email.lower()
        user = await self.get_by_google_sub(google_sub) or await self.get_by_email(email)
        if user is None:
            user = User(
                username=await self._free_username(email.split("@")[0]),
                email=email,
                full_name=full_name or email,
                avatar=avatar,
                google_sub=google_sub,
            )
            self.session.add(user)
            await self.session.flush()
            logger.info("user_provisioned", user_id=user.id)
            return user

        user.google_sub = google_sub
        if full_name:
            user.full_name = full_name
        if avatar:
            user.avatar = avatar
        await self.session.flush()
        return user

    async def _free_username(self, base: str) -> str:
        candidate = base
        suffix = 1
        while await self.get_by_username(candidate) is not None:
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    async def _first(self, stmt) -> User | None:
        result = await self.session.execute(stmt.limit(1))
        return result.scalars().first()
