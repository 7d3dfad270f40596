"""End-to-end tests for the ListingRec API.

Generates a fake catalog on disk, lets the service build itself from
environment configuration, and checks the full request/response cycle.
"""

import logging
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from listingrec.api.dependencies import get_item_service, set_item_service
from listingrec.api.main import app
from listingrec.catalog.store import (
    load_catalog_from_csv,
    load_users_from_csv,
    save_catalog_snapshot,
)
from scripts.generate_fake_catalog import generate_fake_catalog

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)

# Create test client
client = TestClient(app)


@pytest.fixture(scope="module")
def catalog_dir(tmp_path_factory) -> Path:
    """Write a generated catalog to a temporary directory."""
    data_dir = tmp_path_factory.mktemp("e2e_catalog")
    categories, items, images, users = generate_fake_catalog(num_items=400, seed=7)
    categories.to_csv(data_dir / "categories.csv", index=False)
    items.to_csv(data_dir / "items.csv", index=False)
    images.to_csv(data_dir / "item_images.csv", index=False)
    users.to_csv(data_dir / "users.csv", index=False)
    return data_dir


@pytest.fixture
def configured_app(catalog_dir, tmp_path, monkeypatch) -> Generator[Path, None, None]:
    """Point the service at the generated CSV catalog."""
    monkeypatch.setenv("LISTINGREC_DATA_DIR", str(catalog_dir))
    monkeypatch.setenv("LISTINGREC_SNAPSHOT_DIR", str(tmp_path / "no_snapshot"))
    set_item_service(None)
    yield catalog_dir
    set_item_service(None)


def test_generated_catalog_shape():
    categories, items, images, users = generate_fake_catalog(num_items=50, seed=1)

    assert len(categories) == 12
    assert len(items) == 50
    assert set(items["category_id"]) <= set(categories["id"])
    assert set(images["item_id"]) <= set(items["id"])
    assert set(items["seller_id"]) <= set(users["id"])
    assert "alice@example.com" in set(users["email"])


def test_generate_fake_catalog_rejects_bad_input():
    with pytest.raises(ValueError):
        generate_fake_catalog(num_items=0)


def test_service_builds_from_csv(configured_app):
    response = client.get("/status")

    assert response.status_code == 200
    assert response.json()["num_items"] == 400


def test_browse_then_view_then_recommend(configured_app):
    catalog = load_catalog_from_csv(str(configured_app))

    listing = client.get("/api/items/all").json()
    assert len(listing) == 400

    item_id = listing[0]["id"]
    details = client.get(f"/api/items/details/{item_id}")
    assert details.status_code == 200
    users = load_users_from_csv(str(configured_app))
    seller = users.get_user(catalog.get_item(item_id).seller_id)
    assert details.json()["contact"] == seller.display_name

    viewed = client.post(
        f"/api/items/view/post/{item_id}",
        headers={"X-User-Email": "alice@example.com"},
    )
    assert viewed.status_code == 204

    stranger = client.post(
        f"/api/items/view/post/{item_id}",
        headers={"X-User-Email": "stranger@example.com"},
    )
    assert stranger.status_code == 404

    response = client.post(
        "/api/items/view/recommended_items",
        json={"distribution": {"1": 0.6, "2": 0.3, "bogus": 0.1}, "limit": 20},
    )
    assert response.status_code == 200
    recommended = response.json()

    assert len(recommended) <= 20
    ids = [item["id"] for item in recommended]
    assert len(ids) == len(set(ids))
    assert all(catalog.get_item(i).category_id in {1, 2} for i in ids)


def test_service_prefers_snapshot(catalog_dir, tmp_path, monkeypatch):
    catalog = load_catalog_from_csv(str(catalog_dir))
    catalog.get_item(1).brief_description = "From snapshot"
    save_catalog_snapshot(catalog, str(tmp_path), users=load_users_from_csv(str(catalog_dir)))

    monkeypatch.setenv("LISTINGREC_DATA_DIR", str(tmp_path / "missing"))
    monkeypatch.setenv("LISTINGREC_SNAPSHOT_DIR", str(tmp_path))
    set_item_service(None)
    try:
        details = get_item_service().get_item_details(1)
        assert details.title == "From snapshot"
        assert details.contact != ""
    finally:
        set_item_service(None)


def test_service_starts_empty_without_sources(tmp_path, monkeypatch):
    monkeypatch.setenv("LISTINGREC_DATA_DIR", str(tmp_path / "none"))
    monkeypatch.setenv("LISTINGREC_SNAPSHOT_DIR", str(tmp_path / "none"))
    set_item_service(None)
    try:
        response = client.post(
            "/api/items/view/recommended_items",
            json={"distribution": {"1": 1.0}},
        )
        assert response.status_code == 200
        assert response.json() == []
    finally:
        set_item_service(None)
