"""
Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite store (aiosqlite + StaticPool) so
tests never share state or need a running PostgreSQL.
"""

from typing import Any, Dict

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from main import create_app
from tracker.client.api import JobsApiClient
from tracker.config import Settings
from tracker.database import Database
from tracker.services.job_service import JobService
from tracker.services.job_store import JobStore

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        log_level="WARNING",
        api_base_url="http://testserver/api",
    )


@pytest.fixture
def database() -> Database:
    """Isolated in-memory store handle."""
    return Database(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def app(test_settings, database):
    return create_app(test_settings, database=database)


@pytest.fixture
def client(app):
    """FastAPI test client; entering it runs the lifespan (table creation)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def initialized_database(database):
    """Store with tables created, for tests that bypass the app lifespan."""
    await database.init()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def service(initialized_database):
    async with initialized_database.session_factory() as session:
        yield JobService(JobStore(session))


@pytest_asyncio.fixture
async def api(app, initialized_database):
    """Async API client talking to the in-process app."""
    transport = httpx.ASGITransport(app=app)
    async with JobsApiClient("http://testserver/api", transport=transport) as api_client:
        yield api_client


@pytest.fixture
def leak_job() -> Dict[str, Any]:
    """Valid job submission."""
    return {
        "description": "Fix the leak",
        "location": "Building 1, Room 203",
        "priority": "High",
    }


@pytest.fixture
def create_job(client):
    """Submit a job through the API and return the response body."""
    def _create(description="Replace bulb", location="Lobby", priority="Low") -> Dict[str, Any]:
        response = client.post(
            "/api/jobs",
            json={"description": description, "location": location, "priority": priority},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _create
