"""
Test fixtures and configuration.
"""

from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from guichet.config.settings import Settings, reset_settings
from guichet.main import create_app
from helpers import make_settings

# Settings read from the environment; cleared so the host's env can't leak in
SETTINGS_ENV_VARS = (
    "ENV",
    "PORT",
    "API_HOST",
    "CORS_ALLOWED_ORIGINS",
    "SHUTDOWN_GRACE_PERIOD",
    "QUERY_PATH",
    "PLAYGROUND_TITLE",
    "LOG_LEVEL",
    "LOG_JSON",
    "ACCESS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Run every test without settings from the host environment."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    """Default test settings."""
    return make_settings()


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Application with the production middleware chain and routes."""
    return create_app(settings)


@pytest.fixture
def client_factory() -> Callable[[FastAPI], httpx.AsyncClient]:
    """Build in-process HTTP clients for an application."""

    def factory(application: FastAPI) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=application),
            base_url="http://testserver",
        )

    return factory


@pytest_asyncio.fixture
async def client(
    app: FastAPI, client_factory
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Provide HTTP client for API testing."""
    async with client_factory(app) as http_client:
        yield http_client
