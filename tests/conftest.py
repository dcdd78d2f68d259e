"""Pytest fixtures for ConferenceTracker tests"""

from collections.abc import AsyncGenerator, Generator
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from conference_tracker.core.config import Settings
from conference_tracker.db import ensure_created
from conference_tracker.startup import create_app

TEST_SECRET_KEY = "conference-tracker-test-secret"
TEST_PASSWORD = "testpassword123"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment, each on its own in-memory store"""
    values = {
        "JWT_SECRET_KEY": TEST_SECRET_KEY,
        "IN_MEMORY_DATABASE_NAME": f"ConferenceTracker-{uuid4().hex}",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def production_app() -> FastAPI:
    return create_app(make_settings(ENVIRONMENT="production"))


@pytest.fixture
def sync_client(app: FastAPI) -> Generator[TestClient, None, None]:
    """HTTPS client against the development app, lifespan included"""
    with TestClient(app, base_url="https://testserver", raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def production_client(production_app: FastAPI) -> Generator[TestClient, None, None]:
    """HTTPS client against the production app, lifespan included"""
    with TestClient(production_app, base_url="https://testserver", raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTPS client; the store is created up front since no lifespan runs"""
    database = app.state.services.database
    await ensure_created(database)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="https://test") as ac:
        yield ac

    await database.dispose()


async def register_user(client: AsyncClient, email: str, password: str = TEST_PASSWORD) -> dict:
    response = await client.post(
        "/Identity/Account/Register",
        json={"email": email, "password": password},
    )
    assert response.status_code == 200
    return response.json()["data"]


async def sign_in(client: AsyncClient, email: str = "speaker.admin@example.com") -> dict[str, str]:
    """Register, confirm and log in; returns bearer auth headers"""
    registration = await register_user(client, email)
    confirm = await client.get(registration["confirmation_url"])
    assert confirm.status_code == 200

    login = await client.post(
        "/Identity/Account/Login",
        json={"email": email, "password": TEST_PASSWORD},
    )
    assert login.status_code == 200
    token = login.json()["data"]["access_token"]
    # Authenticate by header only; the identity cookie would leak into anonymous calls
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    return await sign_in(client)
