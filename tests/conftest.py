"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, seeded users, bearer tokens, an answer
service faked with httpx.MockTransport, and an ASGI client with the
application's dependencies overridden.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, httpx, fastapi
System role: Test infrastructure and fixture management
"""

from typing import Any, Callable

import httpx
import pytest

from gyanmitra.configs import Settings, get_settings
from gyanmitra.configs.auth import AuthSettings
from gyanmitra.configs.inference import InferenceSettings
from tests.support import TEST_SECRET, answer_handler


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a known JWT secret and the live (mocked-transport) client."""
    return Settings(
        auth=AuthSettings(secret_key=TEST_SECRET),
        inference=InferenceSettings(url="http://inference.test", use_mock=False),
    )


@pytest.fixture
def make_inference_client(test_settings: Settings) -> Callable:
    """Factory for InferenceClient instances backed by a MockTransport handler."""
    from gyanmitra.boundary.inference import InferenceClient

    def factory(handler: Callable = answer_handler()) -> InferenceClient:
        http_client = httpx.AsyncClient(
            base_url=test_settings.inference.url,
            transport=httpx.MockTransport(handler),
        )
        return InferenceClient(test_settings.inference, http_client=http_client)

    return factory


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine sharing one connection across sessions
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from gyanmitra.boundary.db import Base, init_models

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory):
    """Session for service-level tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


async def _create_user(session_factory, **fields):
    from gyanmitra.boundary.db import UserModel

    async with session_factory() as session:
        user = UserModel(**fields)
        session.add(user)
        await session.commit()
        return user


@pytest.fixture
async def student(session_factory):
    """Student without a preferred language."""
    return await _create_user(
        session_factory, name="Asha", email="asha@example.com", grade=7, subjects=["science"]
    )


@pytest.fixture
async def hindi_student(session_factory):
    """Student whose profile prefers Hindi."""
    return await _create_user(
        session_factory,
        name="Ravi",
        email="ravi@example.com",
        grade=8,
        preferred_language="hindi",
        subjects=["math"],
    )


@pytest.fixture
async def other_student(session_factory):
    return await _create_user(session_factory, name="Meera", email="meera@example.com")


@pytest.fixture
def auth_headers(test_settings: Settings) -> Callable[[Any], dict[str, str]]:
    """Build an Authorization header for a user."""
    from gyanmitra.api.deps import create_access_token

    def build(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id, test_settings.auth)}"}

    return build


@pytest.fixture
def inference_handler() -> Callable:
    """Answer-service behaviour for API tests; override per module or test."""
    return answer_handler()


@pytest.fixture
async def app(test_settings, session_factory, make_inference_client, inference_handler):
    """Application with database, settings and answer service overridden."""
    from gyanmitra.api.deps import get_inference_client
    from gyanmitra.boundary.db import get_async_db
    from gyanmitra.main import create_app

    application = create_app()
    inference_client = make_inference_client(inference_handler)

    async def override_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_async_db] = override_db
    application.dependency_overrides[get_settings] = lambda: test_settings
    application.dependency_overrides[get_inference_client] = lambda: inference_client

    yield application

    await inference_client.close()


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the application (no network)."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
