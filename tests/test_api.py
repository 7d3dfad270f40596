"""Tests for the FastAPI application endpoints.

This module contains integration tests for the ListingRec API endpoints,
including health checks, item browsing, view recording and
recommendations.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from listingrec.api.dependencies import get_item_service
from listingrec.api.main import app
from listingrec.api.metrics import metrics_service
from listingrec.catalog.models import Category, Item, ItemImage, User
from listingrec.catalog.service import ItemService
from listingrec.catalog.store import InMemoryCatalog
from listingrec.catalog.users import UserDirectory

# Create test client
client = TestClient(app)


@pytest.fixture
def service():
    """Install an ItemService over a small catalog for the test."""
    items = [
        Item(
            id=1,
            category_id=1,
            brief_description="Test",
            full_description="Test item",
            price=500.0,
            seller_id=1,
            latitude=62.0,
            longitude=5.7,
            images=[
                ItemImage(image_url="https://img/1-b.jpg", position=1),
                ItemImage(image_url="https://img/1-a.jpg", position=0),
            ],
        ),
        Item(id=2, category_id=1, brief_description="Lambi Deluxe", price=200.0),
        Item(id=3, category_id=1, brief_description="Backpack", price=80.0),
        Item(id=4, category_id=2, brief_description="Kayak", price=1500.0),
    ]
    catalog = InMemoryCatalog(
        items=items,
        categories=[Category(id=1, name="Travel"), Category(id=2, name="Boat")],
    )
    users = UserDirectory([User(id=1, email="alice@example.com", display_name="alice")])
    item_service = ItemService(catalog, users=users)
    app.dependency_overrides[get_item_service] = lambda: item_service
    yield item_service
    app.dependency_overrides.clear()


def test_ping_endpoint():
    """Test that the /ping endpoint returns correct status and JSON."""
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_status_endpoint(service):
    """Test that /status reports catalog size."""
    response = client.get("/status")

    assert response.status_code == 200
    data = response.json()
    assert data["catalog_loaded"] is True
    assert data["num_items"] == 4
    assert data["num_categories"] == 2
    assert data["hard_cap"] == 1000


def test_request_id_header_is_set():
    response = client.get("/ping")

    assert response.headers.get("X-Request-ID")


def test_request_id_header_is_echoed():
    response = client.get("/ping", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


def test_get_all_items(service):
    response = client.get("/api/items/all")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 4
    first = next(item for item in data if item["id"] == 1)
    assert first == {
        "id": 1,
        "title": "Test",
        "price": 500.0,
        "imageUrl": "https://img/1-a.jpg",
        "latitude": 62.0,
        "longitude": 5.7,
    }


def test_get_item_details(service):
    response = client.get("/api/items/details/1")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Test"
    assert data["description"] == "Test item"
    assert data["category"] == "Travel"
    assert data["contact"] == "alice"
    assert data["imageUrls"] == ["https://img/1-a.jpg", "https://img/1-b.jpg"]


def test_get_items_by_category(service):
    response = client.get("/api/items/category/2")

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [4]


def test_get_items_by_unknown_category(service):
    response = client.get("/api/items/category/99")

    assert response.status_code == 200
    assert response.json() == []


def test_record_item_view(service):
    response = client.post(
        "/api/items/view/post/2", headers={"X-User-Email": "alice@example.com"}
    )

    assert response.status_code == 204
    assert service.view_store.count_for_item(2) == 1


def test_record_item_view_unknown_user(service):
    response = client.post(
        "/api/items/view/post/2", headers={"X-User-Email": "mallory@example.com"}
    )

    assert response.status_code == 404
    assert response.json()["error"] == "UserNotFoundError"
    assert service.view_store.count_for_item(2) == 0


def test_recommended_items_scenario(service):
    """Category 1 has three items, category 2 one: expect 2 + 1."""
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 0.5, "2": 0.5}, "limit": 4},
    )

    assert response.status_code == 200
    ids = [item["id"] for item in response.json()]
    assert len(ids) == 3
    assert len(set(ids)) == 3
    assert 4 in ids
    assert len(set(ids) & {1, 2, 3}) == 2


def test_recommended_items_null_limit_uses_cap(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 1.0, "2": 1.0}, "limit": None},
    )

    assert response.status_code == 200
    assert sorted(item["id"] for item in response.json()) == [1, 2, 3, 4]


def test_recommended_items_limit_omitted(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 1.0}},
    )

    assert response.status_code == 200
    assert len(response.json()) == 3


def test_recommended_items_respect_limit(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 2.0, "2": 2.0}, "limit": 2},
    )

    assert response.status_code == 200
    assert len(response.json()) == 2


def test_recommended_items_unknown_category(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"99": 1.0}, "limit": 5},
    )

    assert response.status_code == 200
    assert response.json() == []


def test_recommended_items_malformed_key(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"abc": 1.0}, "limit": 5},
    )

    assert response.status_code == 200
    assert response.json() == []


def test_recommended_items_empty_distribution(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {}, "limit": 5},
    )

    assert response.status_code == 200
    assert response.json() == []


def test_metrics_endpoint_counts_samples(service):
    metrics_service.reset()

    client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 1.0}, "limit": 2},
    )
    response = client.get("/metrics")

    assert response.status_code == 200
    data = response.json()
    assert data["sample_count"] == 1
    assert data["items_returned"] == 2
    assert data["average_latency_ms"] >= 0.0


def test_recommended_items_huge_weight(service):
    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 1e306, "2": -1e306}, "limit": 2},
    )

    assert response.status_code == 200
    ids = [item["id"] for item in response.json()]
    assert len(ids) == 2
    assert set(ids) <= {1, 2, 3}
