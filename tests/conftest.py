"""Pytest configuration and shared fixtures."""

import os
import pytest
from unittest.mock import AsyncMock, Mock

# Set required environment variables for testing BEFORE importing app
os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("LOG_LEVEL", "INFO")

from fastapi.testclient import TestClient

from app.main import app
from app.schemas.analysis import CharacterEntry, IdentifiedCharacters, KeyInformation


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def sample_document_text() -> str:
    """Short narrative document used across analysis tests."""
    return "Alice met Bob at the market. They discussed trade routes."


@pytest.fixture
def sample_summary() -> str:
    return "Alice and Bob discuss trade at a market."


@pytest.fixture
def sample_key_information() -> KeyInformation:
    return KeyInformation(
        keywords=["market", "trade routes"],
        important_points=["Alice and Bob meet"],
    )


@pytest.fixture
def sample_characters() -> IdentifiedCharacters:
    return IdentifiedCharacters(
        characters=[
            CharacterEntry(name="Alice", description="A trader who meets Bob at the market."),
            CharacterEntry(name="Bob", description="Discusses trade routes with Alice."),
        ]
    )


@pytest.fixture
def mock_llm_client() -> Mock:
    """Create mock text-generation client.

    Returns:
        Mock: Client whose ``generate_content`` is an AsyncMock
    """
    client = Mock()
    client.generate_content = AsyncMock()
    return client
