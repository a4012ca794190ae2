"""API-specific test fixtures."""

from contextlib import asynccontextmanager

import fakeredis.aioredis
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

_TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_EMAIL = "ops@studio.test"
ADMIN_PASSWORD = "hunter22"


@pytest.fixture
def blob_store():
    from portal.gateway.memory import InMemoryBlobStore

    return InMemoryBlobStore()


@pytest.fixture
def api_client(monkeypatch, blob_store):
    """FastAPI test client on in-memory SQLite, fakeredis and an in-memory blob store.

    The database, Redis client and admin seed are all set up inside the
    TestClient's own event loop so route handlers can use them.
    """
    from fastapi import HTTPException
    from fastapi.middleware.cors import CORSMiddleware

    from portal.api.routes import api_router
    from portal.core.config import get_settings
    from portal.core.exceptions import PortalError
    from portal.db import close_db, close_redis, init_db, init_redis
    from portal.db.seed import seed_admin_user
    from portal.main import generic_exception_handler, http_exception_handler, portal_exception_handler
    from portal.middleware.correlation import setup_correlation_middleware

    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    get_settings.cache_clear()

    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        """Test lifespan - initialize DB and Redis in TestClient's event loop."""
        import portal.db.base as db_mod

        # Reset globals so init_db creates a fresh engine in THIS loop
        db_mod._engine = None
        db_mod._session_factory = None
        await init_db(_TEST_DB_URL)
        await seed_admin_user()

        await init_redis(client=fakeredis.aioredis.FakeRedis(decode_responses=True))
        app.state.blob_store = blob_store
        yield
        await close_redis()
        await close_db()

    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Client Project Portal - Test Client",
        version="0.1.0",
        lifespan=test_lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_correlation_middleware(app)

    # Exception handlers (needed for debug_id testing)
    app.exception_handler(PortalError)(portal_exception_handler)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    with TestClient(app) as client:
        yield client

    get_settings.cache_clear()


@pytest.fixture
def admin_headers(api_client):
    """Bearer header for the seeded admin."""
    response = api_client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def acme(api_client, admin_headers):
    """Project "Acme Site" created through the admin API, as its full admin tree."""
    response = api_client.post(
        "/api/projects",
        json={
            "client_name": "Acme Corp",
            "project_name": "Acme Site",
            "passcode": "WXYZ-1234",
            "start_date": "2025-01-06",
            "launch_date": "2025-04-30",
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    tree = api_client.get(f"/api/projects/{response.json()['id']}", headers=admin_headers)
    return tree.json()


@pytest.fixture
def client_headers():
    return {"X-Project-Passcode": "wxyz-1234"}
