import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from mongomock_motor import AsyncMongoMockClient

from app.core.config import JWT_ALGORITHM, JWT_SECRET_KEY
from app.core.database import create_indexes
from app.core.dependencies import get_db
from app.main import app


def make_token(user_id: str) -> str:
    return jwt.encode({"sub": user_id}, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest_asyncio.fixture
async def db():
    database = AsyncMongoMockClient()["pathshala_test"]
    await create_indexes(database)
    return database


@pytest_asyncio.fixture
async def client(db):
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def alice():
    return auth_headers("user-alice")


@pytest.fixture
def bob():
    return auth_headers("user-bob")


@pytest.fixture
def headers_for():
    return auth_headers
