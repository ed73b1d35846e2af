"""User repository for account lookups."""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.db.models import User


class UserRepository:
    """Repository for User entities.

    Users are not owner-scoped; they are the owners.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def create_user(self, email: str, password_hash: Optional[str] = None) -> User:
        """Create a new user."""
        user = User(email=email.strip().lower(), password_hash=password_hash)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def ensure_user(self, user_id: str) -> User:
        """Get a user by ID, creating a passwordless local account if missing."""
        user = await self.get_by_id(user_id)
        if user is None:
            user = User(id=user_id, email=f"{user_id}@local")
            self.session.add(user)
            await self.session.flush()
        return user
