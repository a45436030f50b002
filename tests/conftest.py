"""Root conftest — shared fixtures for all tests."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env at the root so smoke tests pick up credentials.
load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=False)

TEST_KEY = "a" * 64


@pytest.fixture
def user_id() -> str:
    return "user-123"


@pytest.fixture
def workspace_id() -> str:
    return "workspace-456"


@pytest.fixture
def encryption_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """EMAIL_ENCRYPTION_KEY set to 64 'a' hex chars for the duration of the test."""
    monkeypatch.setenv("EMAIL_ENCRYPTION_KEY", TEST_KEY)
    return TEST_KEY
