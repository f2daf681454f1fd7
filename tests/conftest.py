"""Test configuration and fixtures for the OAuth2 engine.

This module provides pytest fixtures for the in-memory storage model, seeded
clients and users, engine settings, mock models and a FastAPI test client.
"""

from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import AsyncClient

from oauth2_core.core.config import OAuth2Settings
from oauth2_core.models.entities import Client
from oauth2_core.server import OAuth2Server
from tests.fixtures.test_data import (
    CLIENT_SECRET,
    USER_PASSWORD,
    AsyncInMemoryModel,
    InMemoryModel,
    OAuth2TestDataFactory,
)

if TYPE_CHECKING:
    from fastapi import FastAPI


@pytest.fixture
def settings() -> OAuth2Settings:
    """Settings with the library defaults, independent of the environment."""
    return OAuth2Settings(
        access_token_lifetime=3600,
        refresh_token_lifetime=1209600,
        authorization_code_lifetime=300,
    )


@pytest.fixture
def client() -> Client:
    """Confidential client allowed to use every grant type."""
    return OAuth2TestDataFactory.create_client()


@pytest.fixture
def model(client: Client) -> InMemoryModel:
    """In-memory model seeded with one client and one user."""
    storage = InMemoryModel()
    storage.add_client(client, CLIENT_SECRET)
    storage.add_user("alice", USER_PASSWORD)
    return storage


@pytest.fixture
def async_model(client: Client) -> AsyncInMemoryModel:
    """Coroutine flavour of the seeded in-memory model."""
    storage = AsyncInMemoryModel()
    storage.add_client(client, CLIENT_SECRET)
    storage.add_user("alice", USER_PASSWORD)
    return storage


@pytest.fixture
def user(model: InMemoryModel) -> dict[str, Any]:
    """The seeded resource owner."""
    return model.users["alice"][0]


@pytest.fixture
def mock_model() -> MagicMock:
    """Create mock model with async hooks for testing.

    Only the listed hooks exist, so optional hooks such as
    ``generate_access_token`` are treated as not implemented.
    """
    mock = MagicMock(
        spec=[
            "get_client",
            "get_user",
            "save_token",
            "get_access_token",
            "save_authorization_code",
            "validate_scope",
        ]
    )
    mock.get_client = AsyncMock(return_value=None)
    mock.get_user = AsyncMock(return_value=None)
    mock.save_token = AsyncMock(return_value=None)
    mock.get_access_token = AsyncMock(return_value=None)
    mock.save_authorization_code = AsyncMock(return_value=None)
    mock.validate_scope = AsyncMock(return_value="read")
    return mock


@pytest.fixture
def server(model: InMemoryModel, settings: OAuth2Settings) -> OAuth2Server:
    """Authorization server over the seeded model."""
    return OAuth2Server(model=model, settings=settings)


@pytest.fixture
def test_app(server: OAuth2Server, user: dict[str, Any]) -> "FastAPI":
    """Create FastAPI test application exposing the OAuth2 endpoints."""
    from fastapi import FastAPI

    from oauth2_core.api import create_oauth2_router

    app = FastAPI(title="Test App")
    app.include_router(
        create_oauth2_router(server, authenticate_handler=lambda request, response: user)
    )
    return app


@pytest.fixture
def test_client(test_app: "FastAPI") -> TestClient:
    """Create test client for FastAPI app."""
    return TestClient(test_app, follow_redirects=False)


@pytest_asyncio.fixture  # type: ignore[misc]
async def async_test_client(test_app: "FastAPI") -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app."""
    from httpx import ASGITransport

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
