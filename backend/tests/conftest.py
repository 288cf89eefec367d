"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import app
from pipeline.cache import AcquisitionCache


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Test client with a fresh in-memory acquisition cache."""
    app.state.acquisition_cache = AcquisitionCache()
    with TestClient(app) as test_client:
        yield test_client
