"""Catalog records and their client-facing projections.

Items, categories, images and users are plain dataclasses held by the store.
ItemSummary and ItemDetails are the shapes handed to API callers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

ACTIVE_STATUS = "ACTIVE"


@dataclass(frozen=True)
class Category:
    """A classification bucket items belong to."""

    id: int
    name: str
    description: str = ""


@dataclass(frozen=True)
class User:
    """A registered marketplace user."""

    id: int
    email: str
    display_name: str


@dataclass(frozen=True)
class ItemImage:
    """An image attached to an item, ordered by position."""

    image_url: str
    position: int = 0


@dataclass
class Item:
    """A marketplace listing."""

    id: int
    category_id: Optional[int]
    brief_description: str
    price: float
    full_description: str = ""
    seller_id: Optional[int] = None
    status: str = ACTIVE_STATUS
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    images: List[ItemImage] = field(default_factory=list)


@dataclass(frozen=True)
class ItemSummary:
    """Lightweight preview of an item used in listings."""

    id: int
    title: str
    price: float
    image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class ItemDetails:
    """Full view of a single item."""

    id: int
    title: str
    description: str
    category: str
    price: float
    contact: str
    image_urls: List[str]


@dataclass(frozen=True)
class ItemView:
    """A record of a user viewing an item."""

    item_id: int
    user_email: str
    viewed_at: datetime


def first_image_url(item: Item) -> Optional[str]:
    """Return the URL of the lowest-position image, or None."""
    if not item.images:
        return None
    return min(item.images, key=lambda image: image.position).image_url


def to_summary(item: Item) -> ItemSummary:
    """Map an item to its preview."""
    return ItemSummary(
        id=item.id,
        title=item.brief_description,
        price=item.price,
        image_url=first_image_url(item),
        latitude=item.latitude,
        longitude=item.longitude,
    )


def to_details(
    item: Item,
    category: Optional[Category] = None,
    seller: Optional[User] = None,
) -> ItemDetails:
    """Map an item to its detailed view.

    Args:
        item: Item to map.
        category: The item's category, if known.
        seller: The user selling the item, if known.

    Returns:
        ItemDetails with image URLs ordered by position. Missing category
        and seller fall back to empty strings.
    """
    image_urls = [
        image.image_url
        for image in sorted(item.images, key=lambda image: image.position)
    ]
    return ItemDetails(
        id=item.id,
        title=item.brief_description,
        description=item.full_description,
        category=category.name if category is not None else "",
        price=item.price,
        contact=seller.display_name if seller is not None else "",
        image_urls=image_urls,
    )
