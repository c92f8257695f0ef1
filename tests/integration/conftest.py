"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from zentype.main import app
from zentype.core.security import create_access_token


@pytest.fixture
async def client(database):
    """
    HTTP client for testing API endpoints.

    Attaches the in-memory database where the lifespan would put the real one.
    """
    original_db = getattr(app.state, "database", None)
    app.state.database = database

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.state.database = original_db


@pytest.fixture
def auth_headers(sample_profile_data):
    """
    Provides authentication headers for protected endpoints.

    The profile itself is not created here; use `seeded_profile` for that.
    """
    token = create_access_token(
        sample_profile_data["_id"],
        sample_profile_data["email"]
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def unguarded_client(database):
    """
    Like `client`, but app exceptions are not re-raised into the test.

    Starlette re-raises after the catch-all handler has sent its response.
    """
    original_db = getattr(app.state, "database", None)
    app.state.database = database

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.database = original_db
