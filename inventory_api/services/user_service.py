"""
User service - registration, login and account changes, plus the admin
view of accounts. Account actions are published as UserActivity events
for the audit log.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from inventory_api.core.security import create_access_token, hash_password, verify_password
from inventory_api.db.base import is_valid_id, utcnow
from inventory_api.db.models.activity import Activity
from inventory_api.db.models.enums import ActivityAction, UserStatus
from inventory_api.db.models.item import Item
from inventory_api.db.models.user import User
from inventory_api.db.repositories.activity_repository import ActivityRepository
from inventory_api.db.repositories.item_repository import ItemRepository
from inventory_api.db.repositories.user_repository import UserRepository
from inventory_api.events.dispatcher import EventDispatcher
from inventory_api.events.payloads import UserActivity
from inventory_api.schemas.user import PasswordUpdate, UserCreate


class UserService:
    def __init__(self, session: AsyncSession, dispatcher: EventDispatcher, client: dict | None = None):
        self.session = session
        self.user_repo = UserRepository(session)
        self.dispatcher = dispatcher
        self.client = client or {}

    async def _publish_after_commit(self, user_id: str, action: ActivityAction, details: dict | None = None) -> None:
        await self.session.commit()
        self.dispatcher.publish(UserActivity(user_id=user_id, action=action.value, details=details or {}, **self.client))

    async def register(self, data: UserCreate) -> tuple[User, str]:
        if await self.user_repo.get_by_email(data.email):
            raise ConflictError("Email already registered")
        user = await self.user_repo.add(
            User(
                email=data.email.lower(),
                hashed_password=hash_password(data.password),
                name=data.name,
            )
        )
        await self._publish_after_commit(user.id, ActivityAction.REGISTER, {"email": user.email})
        return user, create_access_token(user.id)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        user = await self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise UnauthorizedError("Invalid email or password")
        if not user.is_active:
            raise UnauthorizedError("Account is deactivated")
        user.last_login_at = utcnow()
        user = await self.user_repo.save(user)
        await self._publish_after_commit(user.id, ActivityAction.LOGIN)
        return user, create_access_token(user.id)

    async def logout(self, user: User) -> None:
        # Tokens are stateless; the audit record is the only side effect
        self.dispatcher.publish(UserActivity(user_id=user.id, action=ActivityAction.LOGOUT.value, **self.client))

    async def update_profile(self, user: User, name: str) -> User:
        user.name = name
        return await self.user_repo.save(user)

    async def update_password(self, user: User, data: PasswordUpdate) -> str:
        if not verify_password(data.current_password, user.hashed_password):
            raise UnauthorizedError("Current password is incorrect")
        if data.current_password == data.new_password:
            raise BadRequestError("New password must differ from the current one")
        user.hashed_password = hash_password(data.new_password)
        await self.user_repo.save(user)
        await self._publish_after_commit(user.id, ActivityAction.UPDATE_PASSWORD)
        return create_access_token(user.id)

    # Admin

    async def list_users(
        self, status: str | None = None, search: str | None = None, page: int = 1, limit: int = 20
    ) -> tuple[list[User], int]:
        conditions = UserRepository.filters(status, search)
        rows = await self.user_repo.find(
            *conditions, order_by=[User.created_at.desc()], skip=(page - 1) * limit, limit=limit
        )
        return rows, await self.user_repo.count(*conditions)

    async def get_user(self, user_id: str) -> User:
        user = await self.user_repo.get_by_id(user_id) if is_valid_id(user_id) else None
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def user_details(self, user_id: str) -> tuple[User, int, list[Activity]]:
        """Account, its item count and its ten latest activities."""
        user = await self.get_user(user_id)
        item_count = await ItemRepository(self.session).count(Item.user_id == user.id)
        activities = await ActivityRepository(self.session).newest_first(
            ActivityRepository.filters(user.id), limit=10
        )
        return user, item_count, activities

    async def update_status(self, admin: User, user_id: str, status: UserStatus) -> User:
        if user_id == admin.id:
            raise BadRequestError("Cannot update your own status")
        user = await self.get_user(user_id)
        previous = user.status
        if previous == status.value:
            return user
        user.status = status.value
        user = await self.user_repo.save(user)
        await self.session.commit()
        self.dispatcher.publish(
            UserActivity(
                user_id=admin.id,
                subject_id=user.id,
                action=ActivityAction.STATUS_CHANGE.value,
                details={"email": user.email, "from": previous, "to": user.status},
                **self.client,
            )
        )
        return user
