"""
Pytest fixtures - test DB, running dispatcher, client, auth (TDD/BDD support).
Every test gets its own in-memory database and its own dispatcher wired to it.
"""

import os

# Must be set before the app (and its engine) is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("CACHE_ENABLED", "false")

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from inventory_api.config import get_settings
from inventory_api.core.security import create_access_token, hash_password
from inventory_api.db.base import Base
from inventory_api.db.models import User
from inventory_api.db.models.enums import UserRole
from inventory_api.db.session import get_db
from inventory_api.events.subscribers import build_dispatcher
from inventory_api.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite://"


class SettledClient(AsyncClient):
    """Waits for the dispatcher to drain after each request, so activities and alerts are visible."""

    def __init__(self, dispatcher, **kwargs):
        super().__init__(**kwargs)
        self.dispatcher = dispatcher

    async def request(self, *args, **kwargs):
        response = await super().request(*args, **kwargs)
        await self.dispatcher.join()
        return response


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as s:
        yield s


@pytest_asyncio.fixture
async def dispatcher(session_factory):
    dispatcher = build_dispatcher(session_factory, get_settings())
    await dispatcher.start()
    yield dispatcher
    await dispatcher.stop()


@pytest_asyncio.fixture
async def client(session_factory, dispatcher):
    async def override_get_db():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    previous = getattr(app.state, "dispatcher", None)
    app.state.dispatcher = dispatcher
    async with SettledClient(
        dispatcher,
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.state.dispatcher = previous
    app.dependency_overrides.clear()


async def _make_user(session: AsyncSession, email: str, name: str, role: UserRole = UserRole.USER) -> User:
    user = User(
        email=email,
        hashed_password=hash_password("password123"),
        name=name,
        role=role.value,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(session: AsyncSession) -> User:
    return await _make_user(session, "test@example.com", "Test User")


@pytest_asyncio.fixture
async def other_user(session: AsyncSession) -> User:
    return await _make_user(session, "other@example.com", "Other User")


@pytest_asyncio.fixture
async def admin_user(session: AsyncSession) -> User:
    return await _make_user(session, "admin@example.com", "Admin User", UserRole.ADMIN)


def _headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    return _headers(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return _headers(other_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return _headers(admin_user)
