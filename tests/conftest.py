"""Shared test fixtures.

Provides a ``test_client`` for FastAPI, mock Supabase clients for the
health router, and auth overrides that sign requests in as an applicant
or an admin without touching Supabase Auth.
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock, patch
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

# ``app.core.config`` builds its settings at import time.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")

APPLICANT_ID = UUID("11111111-1111-4111-8111-111111111111")
ADMIN_ID = UUID("22222222-2222-4222-8222-222222222222")


@pytest.fixture()
def mock_supabase_module() -> Generator[MagicMock, None, None]:
    """Patch the Supabase client at module level in the health router."""
    mock_client = MagicMock()
    # Mock the select -> limit -> execute chain
    mock_table = MagicMock()
    mock_select = MagicMock()
    mock_limit = MagicMock()

    mock_client.table.return_value = mock_table
    mock_table.select.return_value = mock_select
    mock_select.limit.return_value = mock_limit
    mock_limit.execute.return_value = MagicMock()  # non-None result

    with patch("app.routers.health.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def mock_supabase_disconnected() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to simulate a disconnected database."""
    with patch(
        "app.routers.health.get_supabase",
        side_effect=Exception("Connection refused"),
    ):
        yield MagicMock()


@pytest.fixture()
def test_client() -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient."""
    from app.main import app

    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def as_applicant() -> Generator[None, None, None]:
    """Sign every request in as a regular applicant."""
    from app.core.auth import get_current_user, require_admin
    from app.core.errors import ForbiddenError
    from app.main import app
    from app.models.auth import AuthUser

    def _deny() -> None:
        raise ForbiddenError("You don't have permission to access this page")

    user = AuthUser(id=APPLICANT_ID, email="applicant@example.com")
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[require_admin] = _deny
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def as_admin() -> Generator[None, None, None]:
    """Sign every request in as an admin."""
    from app.core.auth import get_current_user, require_admin
    from app.main import app
    from app.models.auth import AuthUser

    admin = AuthUser(id=ADMIN_ID, email="admin@example.com", is_admin=True)
    app.dependency_overrides[get_current_user] = lambda: admin
    app.dependency_overrides[require_admin] = lambda: admin
    yield
    app.dependency_overrides.clear()
