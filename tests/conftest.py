import os


# ----------------------------------------------------------------------
# 1. Environment MUST be set before any tasktrack imports happen
# ----------------------------------------------------------------------

os.environ.setdefault("ENV", "test")
os.environ.setdefault("PG_DSN_ASYNC", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RUN_DDL_ON_STARTUP", "false")


import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tasktrack.database import get_async_pg_session
from tasktrack.main import app as tasktrack_app
from tasktrack.models import TodoBase


# ----------------------------------------------------------------------
# 2. One in-memory SQLite database per test
# ----------------------------------------------------------------------

@pytest.fixture
async def engine():
    # StaticPool keeps every session on the same in-memory connection.
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(TodoBase.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ----------------------------------------------------------------------
# 3. The FastAPI app bound to the test database
# ----------------------------------------------------------------------

@pytest.fixture
def app(engine, session_factory):
    async def _session_override():
        async with session_factory() as session:
            yield session

    tasktrack_app.dependency_overrides[get_async_pg_session] = _session_override
    tasktrack_app.state.db_engine = engine
    yield tasktrack_app
    tasktrack_app.dependency_overrides.clear()
    del tasktrack_app.state.db_engine


@pytest.fixture
def asgi_transport(app):
    return httpx.ASGITransport(app=app)


@pytest.fixture
async def api(asgi_transport):
    async with httpx.AsyncClient(transport=asgi_transport, base_url="http://test") as client:
        yield client


BUY_MILK = {
    "title": "Buy milk",
    "description": "",
    "priority": "Low",
    "project": "Errands",
    "due_date": "2024-06-01",
}


@pytest.fixture
def buy_milk():
    return dict(BUY_MILK)
