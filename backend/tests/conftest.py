import os

# Settings are read once at import time, so the environment is fixed up first
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_TO_FILE"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from storerate.api import deps
from storerate.core import security
from storerate.database.database import build_engine, build_session_factory, init_models
from storerate.main import app
from storerate.schemas.enums import Role
from storerate.services import user_service

PASSWORD = "Abc!2345"

@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """A fresh SQLite database per test, with foreign keys enforced."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_models(engine)
    try:
        yield engine
    finally:
        await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def session_factory(engine):
    return build_session_factory(engine)

@pytest_asyncio.fixture(scope="function")
async def db(session_factory):
    async with session_factory() as session:
        yield session

@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[deps.get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def create_user(db):
    """Factory: register a user directly and optionally promote them."""
    async def _create_user(email, name="Test User", password=PASSWORD, role=Role.NORMAL_USER):
        user = await user_service.register(db, name=name, email=email, password=password)
        if role != Role.NORMAL_USER:
            user.role = role
            await db.commit()
            await db.refresh(user)
        return user
    return _create_user

@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = security.create_access_token(user.id, user.role.value)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
