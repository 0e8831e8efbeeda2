"""
HerbScape Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── sample_herbs: Ginger / Mint / Tulsi catalog rows
    ├── sample_image_bytes: Fake photo content for upload tests
    ├── mock_services: AsyncMock stand-ins for every outside service
    └── test_client: HTTPX AsyncClient for endpoint testing, wired to mock_services
"""

import os

# Settings are read at import time; point them at test values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SUPABASE_URL"] = "https://project.supabase.test"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["REMEDIES_WEBHOOK_URL"] = "https://hooks.test/remedies"
os.environ["CATALOG_VARIANT"] = "full"
os.environ["LOG_LEVEL"] = "WARNING"

from types import SimpleNamespace  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from herbscape.schemas.herb import HerbRecord  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = rows
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_herbs():
    return [
        HerbRecord(
            id="11111111-1111-1111-1111-111111111111",
            name="Ginger",
            scientific_name="Zingiber officinale",
            description="Pungent root used for digestion",
            category="Culinary",
            benefits=["Eases nausea"],
        ),
        HerbRecord(
            id="22222222-2222-2222-2222-222222222222",
            name="Mint",
            scientific_name="Mentha",
            description="Cooling leaf",
            category="Aromatic",
            benefits=["Freshens breath"],
        ),
        HerbRecord(
            id="33333333-3333-3333-3333-333333333333",
            name="Tulsi",
            scientific_name="Ocimum tenuiflorum",
            description="Holy basil leaf",
            category="medicinal",
            benefits=[],
        ),
    ]


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def mock_services(sample_herbs):
    """
    AsyncMock stand-ins for the herbs table, edge functions, auth and webhook.

    Defaults: the catalog holds sample_herbs, identification finds nothing,
    translation returns None, tokens are rejected, the webhook echoes "ok".
    """
    from herbscape.exceptions import AuthenticationError

    herbs = MagicMock()
    herbs.fetch_all = AsyncMock(return_value=list(sample_herbs))

    functions = MagicMock()
    functions.identify_plant = AsyncMock(return_value=None)
    functions.translate_herb = AsyncMock(return_value=None)

    auth = MagicMock()
    auth.resolve_session = AsyncMock(side_effect=AuthenticationError())
    auth.sign_out = AsyncMock(return_value=None)

    remedies = MagicMock()
    remedies.ask = AsyncMock(return_value="ok")

    return SimpleNamespace(herbs=herbs, functions=functions, auth=auth, remedies=remedies)


@pytest_asyncio.fixture
async def test_client(mock_services, mock_db_session, monkeypatch):
    """
    Provides an async HTTP test client for endpoint testing.

    Pages created during the test use mock_services; the registry is emptied
    before and after so cookies never leak between tests.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from herbscape.catalog.page import CatalogPage
    from herbscape.catalog.registry import page_registry
    from herbscape.database import get_db_session
    from herbscape.main import app

    def factory(client_id):
        return CatalogPage(
            client_id,
            herbs=mock_services.herbs,
            functions=mock_services.functions,
            auth=mock_services.auth,
            remedies=mock_services.remedies,
        )

    async def override_db_session():
        yield mock_db_session

    page_registry.clear()
    monkeypatch.setattr(page_registry, "_factory", factory)
    app.dependency_overrides[get_db_session] = override_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    page_registry.clear()
