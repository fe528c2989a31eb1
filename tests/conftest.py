"""Конфигурация тестов."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pr_reviewer.api.dependencies import get_session
from pr_reviewer.core.database import Base
from pr_reviewer.db.models import Team, User
from pr_reviewer.main import app


@pytest.fixture(scope="function")
async def test_db():
    """Создать тестовую БД в памяти."""

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_session_maker

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def session(test_db):
    """Создать сессию БД для теста."""
    async with test_db() as session:
        yield session


async def add_team(session, team_name: str, members: list[tuple[str, str, bool]]) -> Team:
    """Записать команду и её участников напрямую в БД."""
    team = Team(team_name=team_name)
    session.add(team)
    await session.flush()

    for user_id, username, is_active in members:
        session.add(User(user_id=user_id, username=username, team_id=team.id, is_active=is_active))

    await session.commit()
    return team


@pytest.fixture
async def sample_team(session):
    """Создать тестовую команду."""
    return await add_team(
        session,
        "backend",
        [
            ("u1", "Alice", True),
            ("u2", "Bob", True),
            ("u3", "Charlie", True),
            ("u4", "Dave", True),
        ],
    )


@pytest.fixture
async def frontend_team(session):
    """Вторая команда: один неактивный и два активных участника."""
    return await add_team(
        session,
        "frontend",
        [
            ("f1", "Eve", True),
            ("f2", "Frank", False),
            ("f3", "Grace", True),
        ],
    )


@pytest.fixture
async def client(session):
    """HTTP клиент приложения, работающий на тестовой сессии."""

    async def override_get_session():
        try:
            yield session
        except BaseException:
            await session.rollback()
            raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
