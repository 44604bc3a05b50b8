from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from classroom_app.core.database import get_db
from classroom_app.core.dependencies import get_file_storage
from classroom_app.main import app
from classroom_app.models import Base
from classroom_app.services.file_storage import LocalFileStorage
from classroom_app.services.user_service import UserService


class FrozenClock:
    """Callable clock the tests can move forward."""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)

    def set(self, value: datetime):
        self.current = value


def enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    # Enforce foreign keys like the PostgreSQL deployment does
    event.listen(engine.sync_engine, "connect", enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FrozenClock(datetime.now(timezone.utc))


@pytest_asyncio.fixture
async def teacher(db):
    return await UserService(db).create_user("Tina Teacher", "tina@example.com", "teacher")


@pytest_asyncio.fixture
async def student(db):
    return await UserService(db).create_user("Sam Student", "sam@example.com", "student")


@pytest_asyncio.fixture
async def outsider(db):
    return await UserService(db).create_user("Uma Outsider", "uma@example.com", "student")


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "uploads")


@pytest_asyncio.fixture
async def client(session_factory, storage):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth(user):
    return {"X-User-Id": str(user.id)}
