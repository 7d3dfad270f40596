"""Item catalog storage.

This module provides the read interface the rest of the service depends on,
an in-memory implementation, CSV loading and joblib snapshot persistence.
"""

import abc
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import joblib
import pandas as pd

from listingrec.api.exceptions import ItemNotFoundError
from listingrec.catalog.models import (
    ACTIVE_STATUS,
    Category,
    Item,
    ItemImage,
    ItemSummary,
    User,
    to_summary,
)
from listingrec.catalog.users import UserDirectory

# Configure module logger
logger = logging.getLogger(__name__)

# Catalog source filenames
CATEGORIES_FILENAME = "categories.csv"
ITEMS_FILENAME = "items.csv"
IMAGES_FILENAME = "item_images.csv"
USERS_FILENAME = "users.csv"
SNAPSHOT_FILENAME = "catalog_snapshot.joblib"

CATEGORY_COLUMNS = {"id", "name"}
ITEM_COLUMNS = {"id", "category_id", "brief_description", "price"}
IMAGE_COLUMNS = {"item_id", "image_url", "position"}
USER_COLUMNS = {"id", "email", "display_name"}


class ItemCatalog(abc.ABC):
    """Read interface over stored items and categories."""

    @abc.abstractmethod
    def list_by_category(self, category_id: int) -> List[ItemSummary]:
        """Return previews of all items in a category, whatever their status.

        Returns an empty list for unknown or empty categories, never None.
        """

    @abc.abstractmethod
    def get_item(self, item_id: int) -> Item:
        """Return one item or raise ItemNotFoundError."""

    @abc.abstractmethod
    def list_items(self) -> List[Item]:
        """Return every stored item."""

    @abc.abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Return a category, or None if it does not exist."""


class InMemoryCatalog(ItemCatalog):
    """Dictionary-backed catalog safe for concurrent readers."""

    def __init__(
        self,
        items: Optional[Iterable[Item]] = None,
        categories: Optional[Iterable[Category]] = None,
    ):
        self._lock = threading.RLock()
        self._items: Dict[int, Item] = {}
        self._categories: Dict[int, Category] = {}

        for category in categories or []:
            self.add_category(category)
        for item in items or []:
            self.add_item(item)

    def add_category(self, category: Category) -> None:
        with self._lock:
            self._categories[category.id] = category

    def add_item(self, item: Item) -> None:
        with self._lock:
            self._items[item.id] = item

    def list_by_category(self, category_id: int) -> List[ItemSummary]:
        with self._lock:
            return [
                to_summary(item)
                for item in self._items.values()
                if item.category_id == category_id
            ]

    def get_item(self, item_id: int) -> Item:
        with self._lock:
            item = self._items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def list_items(self) -> List[Item]:
        with self._lock:
            return list(self._items.values())

    def list_categories(self) -> List[Category]:
        with self._lock:
            return list(self._categories.values())

    def get_category(self, category_id: int) -> Optional[Category]:
        with self._lock:
            return self._categories.get(category_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def _optional_float(value) -> Optional[float]:
    if pd.isna(value):
        return None
    return float(value)


def _optional_int(value) -> Optional[int]:
    if pd.isna(value):
        return None
    return int(value)


def _read_csv(path: Path, required_columns: set) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    df = pd.read_csv(path)
    if not required_columns.issubset(df.columns):
        missing = required_columns - set(df.columns)
        raise ValueError(f"{path.name} missing required columns: {missing}")
    return df


def load_catalog_from_csv(data_dir: str) -> InMemoryCatalog:
    """Build a catalog from CSV files.

    Expects ``categories.csv`` (id, name[, description]) and ``items.csv``
    (id, category_id, brief_description, price and optional full_description,
    seller_id, status, latitude, longitude). An optional
    ``item_images.csv`` (item_id, image_url, position) attaches images.

    Args:
        data_dir: Directory containing the CSV files.

    Returns:
        Populated InMemoryCatalog.

    Raises:
        FileNotFoundError: If a required CSV file does not exist.
        ValueError: If a CSV is missing required columns.

    Example:
        >>> catalog = load_catalog_from_csv("data")
        >>> print(f"Loaded {len(catalog)} items")
    """
    data_path = Path(data_dir)
    logger.info(f"Loading catalog from {data_dir}")

    categories_df = _read_csv(data_path / CATEGORIES_FILENAME, CATEGORY_COLUMNS)
    items_df = _read_csv(data_path / ITEMS_FILENAME, ITEM_COLUMNS)

    images_by_item: Dict[int, List[ItemImage]] = {}
    images_path = data_path / IMAGES_FILENAME
    if images_path.exists():
        images_df = _read_csv(images_path, IMAGE_COLUMNS)
        for row in images_df.itertuples(index=False):
            images_by_item.setdefault(int(row.item_id), []).append(
                ItemImage(image_url=str(row.image_url), position=int(row.position))
            )
        logger.info(f"Loaded {len(images_df)} item images")

    categories = [
        Category(
            id=int(row["id"]),
            name=str(row["name"]),
            description=str(row.get("description", "") or ""),
        )
        for row in categories_df.fillna("").to_dict("records")
    ]

    items = []
    for row in items_df.to_dict("records"):
        item_id = int(row["id"])
        items.append(
            Item(
                id=item_id,
                category_id=_optional_int(row["category_id"]),
                brief_description=str(row["brief_description"]),
                price=float(row["price"]),
                full_description=(
                    "" if pd.isna(row.get("full_description"))
                    else str(row.get("full_description"))
                ),
                seller_id=_optional_int(row.get("seller_id")),
                status=(
                    ACTIVE_STATUS if pd.isna(row.get("status"))
                    else str(row.get("status"))
                ),
                latitude=_optional_float(row.get("latitude")),
                longitude=_optional_float(row.get("longitude")),
                images=images_by_item.get(item_id, []),
            )
        )

    logger.info(f"Loaded {len(categories)} categories and {len(items)} items")

    return InMemoryCatalog(items=items, categories=categories)


def load_users_from_csv(data_dir: str) -> UserDirectory:
    """Build the user directory from ``users.csv`` (id, email, display_name).

    The file is optional. Without it the directory starts empty and every
    view is rejected as coming from an unknown user.

    Raises:
        ValueError: If the CSV is missing required columns.
    """
    users_path = Path(data_dir) / USERS_FILENAME
    if not users_path.exists():
        logger.warning(f"No {USERS_FILENAME} in {data_dir}, starting without users")
        return UserDirectory()

    users_df = _read_csv(users_path, USER_COLUMNS)
    users = [
        User(
            id=int(row["id"]),
            email=str(row["email"]).strip(),
            display_name=str(row["display_name"]),
        )
        for row in users_df.fillna("").to_dict("records")
    ]
    logger.info(f"Loaded {len(users)} users")

    return UserDirectory(users)


def save_catalog_snapshot(
    catalog: InMemoryCatalog,
    output_dir: str,
    snapshot_filename: str = SNAPSHOT_FILENAME,
    users: Optional[UserDirectory] = None,
) -> Path:
    """Save catalog records, and optionally users, to a joblib snapshot.

    Creates the output directory if it doesn't exist.

    Returns:
        Path of the written snapshot.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    snapshot_path = output_path / snapshot_filename
    joblib.dump(
        {
            "categories": catalog.list_categories(),
            "items": catalog.list_items(),
            "users": users.list_users() if users is not None else [],
        },
        snapshot_path,
    )
    logger.info(f"Saved catalog snapshot to {snapshot_path}")

    return snapshot_path


def load_catalog_snapshot(
    snapshot_dir: str,
    snapshot_filename: str = SNAPSHOT_FILENAME,
) -> InMemoryCatalog:
    """Load a catalog from a joblib snapshot.

    Raises:
        FileNotFoundError: If the snapshot file is missing.
    """
    snapshot_path = Path(snapshot_dir) / snapshot_filename
    if not snapshot_path.exists():
        raise FileNotFoundError(f"Catalog snapshot not found: {snapshot_path}")

    data = joblib.load(snapshot_path)
    logger.info(f"Loaded catalog snapshot from {snapshot_path}")

    return InMemoryCatalog(items=data["items"], categories=data["categories"])


def check_snapshot_exists(
    snapshot_dir: str, snapshot_filename: str = SNAPSHOT_FILENAME
) -> bool:
    """Check if a catalog snapshot exists in the directory."""
    return (Path(snapshot_dir) / snapshot_filename).exists()


def load_users_snapshot(
    snapshot_dir: str,
    snapshot_filename: str = SNAPSHOT_FILENAME,
) -> UserDirectory:
    """Load the user directory stored alongside a catalog snapshot.

    Snapshots written without users give an empty directory.

    Raises:
        FileNotFoundError: If the snapshot file is missing.
    """
    snapshot_path = Path(snapshot_dir) / snapshot_filename
    if not snapshot_path.exists():
        raise FileNotFoundError(f"Catalog snapshot not found: {snapshot_path}")

    data = joblib.load(snapshot_path)
    return UserDirectory(data.get("users", []))
