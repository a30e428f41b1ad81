"""
User repository - encapsulates all user data access.
"""

from sqlalchemy import or_, select

from inventory_api.db.models.enums import UserStatus
from inventory_api.db.models.user import User
from inventory_api.db.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """User-specific queries. Extends base CRUD with domain logic."""

    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Find user by email - used for authentication."""
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def active_user_ids(self) -> list[str]:
        result = await self.session.execute(select(User.id).where(User.status == UserStatus.ACTIVE.value))
        return list(result.scalars().all())

    @staticmethod
    def filters(status: str | None = None, search: str | None = None) -> list:
        conditions = []
        if status:
            conditions.append(User.status == status)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        return conditions
