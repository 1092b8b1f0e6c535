"""Общие фикстуры тестов.

Переменные окружения задаются до импорта приложения: настройки читаются
при импорте ``blog.core.config``. Каждый тест получает отдельную SQLite
базу во временном каталоге, зависимость ``get_db`` подменяется.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from blog.core.db import get_db
from blog.db.models import Base
from blog.domains.identity.schemas import UserCreate
from blog.domains.identity.services import IdentityService
from blog.main import app

TEST_EMAIL = "admin@blog.cz"
TEST_PASSWORD = "Heslo12345"


@pytest_asyncio.fixture()
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def http_client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def user(session_factory):
    async with session_factory() as session:
        return await IdentityService(session).create_user(
            UserCreate(email=TEST_EMAIL, password=TEST_PASSWORD)
        )


@pytest_asyncio.fixture()
async def token(http_client, user):
    response = await http_client.post(
        "/api/login", json={"email": TEST_EMAIL, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture()
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def article_payload():
    """Фабрика тела запроса статьи в форме редактора"""
    def make(title="My Post", **overrides):
        payload = {
            "title": title,
            "coverImage": "https://example.com/cover.jpg",
            "author": "Jane",
            "blocks": [
                {"id": "1", "type": "heading", "data": {"text": "Intro"}},
                {"id": "2", "type": "paragraph", "data": {"text": "Hello **world**"}},
            ],
        }
        payload.update(overrides)
        return payload

    return make
