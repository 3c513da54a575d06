# ruff: noqa: E402
# IMPORTANT:
# 1) Set environment variables (DATABASE_URL etc.) first, then import application modules.
# 2) anyio_backend must be session-scoped to avoid ScopeMismatch.

from collections.abc import AsyncGenerator
import os

from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# --- Function for early test environment setup ---
# Must be called before any application imports
def _setup_test_environment() -> None:
    os.environ["DATABASE_URL"] = TEST_DATABASE_URL
    os.environ.setdefault("DB_CHECK_ON_START", "false")
    os.environ.setdefault("DB_CREATE_ALL", "false")
    os.environ.setdefault("ENVIRONMENT", "development")


_setup_test_environment()

# isort: off
from app import create_app
from db.database import Base, get_db
from db.models.post import Post  # noqa: F401  register the posts table
from db.repositories.post_repository import PostRepository
from services.post_service import PostService

# isort: on


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Align anyio_backend scope with anyio plugin expectations."""
    return "asyncio"


@pytest.fixture(scope="session")
def app():
    """FastAPI application instance for tests, created by factory."""
    return create_app()


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """
    Fresh in-memory database per test.
    StaticPool keeps a single connection so every session sees the same data.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield test_engine
    finally:
        await test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def post_repository(db_session: AsyncSession) -> PostRepository:
    return PostRepository(db_session)


@pytest.fixture(scope="function")
def post_service(post_repository: PostRepository) -> PostService:
    return PostService(post_repository)


@pytest.fixture(scope="function")
def override_get_db(app, session_factory: async_sessionmaker[AsyncSession]):
    """
    Override FastAPI dependency to provide a fresh AsyncSession per request,
    bound to the per-test in-memory engine.
    """

    async def _get_db_test() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db_test
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture(scope="function")
async def client(app, override_get_db: None) -> AsyncGenerator[AsyncClient]:
    """HTTP client without lifespan; redirects are returned, not followed."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture(scope="function")
async def lifespan_client(app, override_get_db: None) -> AsyncGenerator[AsyncClient]:
    """HTTP client with app lifespan management for integration tests."""
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
            yield ac
