"""Shared fixtures for API tests."""

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from layered_search.api.search import get_provider
from layered_search.main import app
from layered_search.search import LayeredProductSearchProvider


@pytest.fixture
def provider(catalog: Any) -> LayeredProductSearchProvider:
    """Provider over the in-memory Color/Size catalog."""
    return LayeredProductSearchProvider(catalog, catalog)


@pytest.fixture
def client(provider: LayeredProductSearchProvider) -> Iterator[TestClient]:
    """Create test client with the search provider overridden."""
    app.dependency_overrides[get_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()
