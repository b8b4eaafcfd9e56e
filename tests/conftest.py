"""
Shared fixtures: a throwaway SQLite store per test, a fast hasher, and an
HTTP client bound to an app wired onto that store.

JWT_SECRET / DATABASE_URL must be in the environment before ``main`` is
imported, because ``main`` builds its module-level app from settings.
"""

from __future__ import annotations

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-suite-only")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
import pytest_asyncio
from argon2 import PasswordHasher as Argon2Hasher

from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from auth.service import AuthService
from config.settings import Settings
from database.session import Database

TEST_SECRET = "test-secret-key-for-the-suite-only"


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}")
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimal Argon2 cost so the suite stays fast.
    return PasswordHasher(Argon2Hasher(time_cost=1, memory_cost=8, parallelism=1))


@pytest.fixture
def jwt_secret() -> str:
    return TEST_SECRET


@pytest.fixture
def tokens() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def service(db, hasher, tokens) -> AuthService:
    return AuthService(db, hasher, tokens)


def _make_settings(**overrides) -> Settings:
    values = {
        "jwt_secret": TEST_SECRET,
        "database_url": "sqlite+aiosqlite:///:memory:",
        "debug": False,
    }
    values.update(overrides)
    return Settings(**values)


def _make_client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


def _make_app(db, hasher, **overrides):
    from main import create_app

    app = create_app(_make_settings(**overrides), db=db)
    app.state.auth_service = AuthService(db, hasher, app.state.token_issuer)
    return app


@pytest.fixture
def app(db, hasher):
    return _make_app(db, hasher)


@pytest.fixture
def debug_app(db, hasher):
    return _make_app(db, hasher, debug=True)


@pytest_asyncio.fixture
async def client(app):
    async with _make_client(app) as http:
        yield http


@pytest_asyncio.fixture
async def debug_client(debug_app):
    async with _make_client(debug_app) as http:
        yield http
