"""
Root conftest for the pytest test suite.

Each test runs against a fresh in-memory SQLite database with the admin
account already seeded. API tests drive the FastAPI app in-process through
``httpx.AsyncClient`` so that requests share the test's event loop and
database connection.

Key Fixtures:
- `initialize_test_db`: (autouse) Creates a fresh DB schema and the admin for each test.
- `app_for_testing`: The FastAPI application with its production lifespan
  disabled, so that `initialize_test_db` owns the database.
- `client`: A non-authenticated AsyncClient.
- `admin_token`: A bearer token for the seeded admin.
- `admin_client`: An AsyncClient authenticated as the seeded admin.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from tortoise import Tortoise

from shopdash.features.auth.models import Admin
from shopdash.features.auth.security import get_password_hash, get_pin_hash
from shopdash.main import MODEL_MODULES
from shopdash.main import app as actual_app

ADMIN_FULL_NAME = "Ada Admin"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "adminpassword123"
ADMIN_PIN = "1234"


async def add_admin() -> Admin:
    return await Admin.create(
        full_name=ADMIN_FULL_NAME,
        username=ADMIN_USERNAME,
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        hashed_pin=get_pin_hash(ADMIN_PIN),
        password_length=len(ADMIN_PASSWORD),
        pin_length=len(ADMIN_PIN),
    )


@pytest_asyncio.fixture(scope="function", autouse=True)
async def initialize_test_db() -> AsyncGenerator[None, None]:
    """
    Initializes the database for each test function.

    This async, autouse fixture creates a fresh in-memory database and schema
    for each test and tears it down afterwards.
    """
    test_db_config = {
        "connections": {"default": "sqlite://:memory:"},
        "apps": {
            "models": {
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
        "use_tz": True,
        "timezone": "UTC",
    }
    await Tortoise.init(config=test_db_config)
    await Tortoise.generate_schemas()
    await add_admin()

    yield

    await Tortoise.close_connections()


@pytest.fixture(scope="function")
def app_for_testing() -> Generator[FastAPI, Any, None]:
    """
    Provides the FastAPI application with its production lifespan manager
    disabled, so the test DB fixture manages the database connection.
    """
    original_lifespan = actual_app.router.lifespan_context

    @asynccontextmanager
    async def dummy_lifespan(app: FastAPI):
        yield

    actual_app.router.lifespan_context = dummy_lifespan

    yield actual_app

    actual_app.router.lifespan_context = original_lifespan


@pytest_asyncio.fixture(scope="function")
async def client(app_for_testing: FastAPI) -> AsyncGenerator[httpx.AsyncClient, Any]:
    transport = httpx.ASGITransport(app=app_for_testing)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def admin_token(client: httpx.AsyncClient) -> str:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    if response.status_code != 200:
        raise Exception(f"Admin authentication failed for {ADMIN_USERNAME}: {response.text}")
    return response.json()["access_token"]


@pytest_asyncio.fixture(scope="function")
async def admin_client(
    app_for_testing: FastAPI, admin_token: str
) -> AsyncGenerator[httpx.AsyncClient, Any]:
    """
    Provides an AsyncClient authenticated as the seeded admin.
    """
    transport = httpx.ASGITransport(app=app_for_testing)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {admin_token}"},
    ) as ac:
        yield ac
