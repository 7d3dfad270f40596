"""Tests for error handling in the ListingRec API.

Tests unknown items, missing identity, invalid request bodies and catalog
failures.
"""

import logging
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from listingrec.api.dependencies import get_item_service
from listingrec.api.main import app
from listingrec.catalog.models import Category, Item, User
from listingrec.catalog.service import ItemService
from listingrec.catalog.store import InMemoryCatalog
from listingrec.catalog.users import UserDirectory

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)

# Create test client
client = TestClient(app)


class BrokenCatalog(InMemoryCatalog):
    """Catalog whose reads fail like a lost database connection."""

    def list_by_category(self, category_id):
        raise ConnectionError("connection reset by peer")

    def list_items(self):
        raise ConnectionError("connection reset by peer")


@pytest.fixture
def service():
    catalog = InMemoryCatalog(
        items=[Item(id=1, category_id=1, brief_description="Test", price=500.0)],
        categories=[Category(id=1, name="Travel")],
    )
    users = UserDirectory([User(id=1, email="alice@example.com", display_name="alice")])
    item_service = ItemService(catalog, users=users)
    app.dependency_overrides[get_item_service] = lambda: item_service
    yield item_service
    app.dependency_overrides.clear()


@pytest.fixture
def broken_service():
    item_service = ItemService(BrokenCatalog())
    app.dependency_overrides[get_item_service] = lambda: item_service
    yield item_service
    app.dependency_overrides.clear()


def test_unknown_item_details_returns_404(service):
    response = client.get("/api/items/details/999")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "ItemNotFoundError"
    assert "999" in data["message"]
    assert data["details"] == {"item_id": 999}


def test_record_view_without_identity_returns_401(service):
    response = client.post("/api/items/view/post/1")

    assert response.status_code == 401
    assert response.json()["error"] == "UnauthorizedError"
    assert len(service.view_store) == 0


def test_record_view_blank_identity_returns_401(service):
    response = client.post("/api/items/view/post/1", headers={"X-User-Email": "  "})

    assert response.status_code == 401


def test_record_view_unknown_item_returns_404(service):
    response = client.post(
        "/api/items/view/post/999", headers={"X-User-Email": "alice@example.com"}
    )

    assert response.status_code == 404
    assert len(service.view_store) == 0


def test_record_view_unknown_user_returns_404(service):
    response = client.post(
        "/api/items/view/post/1", headers={"X-User-Email": "mallory@example.com"}
    )

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "UserNotFoundError"
    assert data["details"] == {"email": "mallory@example.com"}
    assert len(service.view_store) == 0


def test_invalid_item_id_type(service):
    """Test that a non-numeric item id returns 422 validation error."""
    response = client.get("/api/items/details/not_a_number")

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "ValidationError"
    assert "detail" in data


def test_non_numeric_weight_is_rejected(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": "lots"}, "limit": 5},
    )

    assert response.status_code == 422


def test_non_integer_limit_is_rejected(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 1.0}, "limit": "ten"},
    )

    assert response.status_code == 422


@pytest.mark.parametrize("limit", [0, -5])
def test_non_positive_limit_is_coerced(service, limit):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 1.0}, "limit": limit},
    )

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [1]


def test_catalog_failure_returns_503(broken_service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 1.0}, "limit": 5},
    )

    assert response.status_code == 503
    data = response.json()
    assert data["error"] == "CatalogUnavailableError"
    assert data["details"]["error_type"] == "ConnectionError"


def test_catalog_failure_on_listing_returns_503(broken_service):
    response = client.get("/api/items/all")

    assert response.status_code == 503


def test_errors_are_consistent(service):
    """Repeated failures of the same kind return the same structure."""
    responses = [client.get(f"/api/items/details/{item_id}") for item_id in [7, 8, 9]]

    assert {r.status_code for r in responses} == {404}
    for response in responses:
        assert set(response.json()) == {"error", "message", "details"}


def test_health_check_not_affected_by_catalog_errors(broken_service):
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
