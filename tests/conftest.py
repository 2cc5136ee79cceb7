"""Shared test fixtures."""

import os
import tempfile
from pathlib import Path


# Settings are cached on first use, so the test environment is set up
# before anything imports the application.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_FORMAT", "json")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault(
    "LOG_DIR", str(Path(tempfile.gettempdir()) / "judol-sweeper-test-logs")
)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from sweeper.main import app  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    """Test client without lifespan (services are overridden per test)."""
    return TestClient(app)
