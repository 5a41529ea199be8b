"""Shared fixtures: deterministic model provider and API test client."""
import os
import tempfile

# Keep test runs from writing into the repository's logs/ directory
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="bioface-logs-"))

import pytest
from fastapi.testclient import TestClient

from providers import get_provider
from tests.fakes import FakeProvider


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def app(provider):
    from app import app as fastapi_app

    fastapi_app.dependency_overrides[get_provider] = lambda: provider
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
