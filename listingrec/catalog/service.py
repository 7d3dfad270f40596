"""Business logic for marketplace items.

Wraps the catalog with preview/detail shaping, view recording and the
distribution-based recommendation flow.
"""

import logging
import time
from typing import List, Mapping, Optional

import numpy as np

from listingrec.api.exceptions import (
    CatalogUnavailableError,
    ListingRecException,
    UnauthorizedError,
)
from listingrec.api.metrics import metrics_service
from listingrec.catalog.models import (
    Category,
    Item,
    ItemDetails,
    ItemSummary,
    to_details,
    to_summary,
)
from listingrec.catalog.store import ItemCatalog
from listingrec.catalog.users import UserDirectory
from listingrec.catalog.views import ViewStore
from listingrec.recommender.sampler import DEFAULT_HARD_CAP, DistributionSampler

# Configure module logger
logger = logging.getLogger(__name__)


class GuardedCatalog(ItemCatalog):
    """Catalog wrapper that reports failed reads as CatalogUnavailableError.

    Service errors such as ItemNotFoundError pass through unchanged. Only
    exceptions raised by the wrapped catalog are translated, so errors in
    the caller's own logic keep their type.
    """

    def __init__(self, catalog: ItemCatalog):
        self.catalog = catalog

    def _read(self, operation: str, *args):
        try:
            return getattr(self.catalog, operation)(*args)
        except ListingRecException:
            raise
        except Exception as e:
            raise CatalogUnavailableError(operation, e) from e

    def list_by_category(self, category_id: int) -> List[ItemSummary]:
        return self._read("list_by_category", category_id)

    def get_item(self, item_id: int) -> Item:
        return self._read("get_item", item_id)

    def list_items(self) -> List[Item]:
        return self._read("list_items")

    def get_category(self, category_id: int) -> Optional[Category]:
        return self._read("get_category", category_id)


class ItemService:
    """Serves item previews, details, views and recommendations."""

    def __init__(
        self,
        catalog: ItemCatalog,
        view_store: Optional[ViewStore] = None,
        hard_cap: int = DEFAULT_HARD_CAP,
        users: Optional[UserDirectory] = None,
    ):
        self.catalog = catalog
        self.view_store = view_store if view_store is not None else ViewStore()
        self.users = users if users is not None else UserDirectory()
        self._reads = GuardedCatalog(catalog)
        self.sampler = DistributionSampler(self._reads, hard_cap=hard_cap)

    def get_all_previews(self) -> List[ItemSummary]:
        return [to_summary(item) for item in self._reads.list_items()]

    def get_item_details(self, item_id: int) -> ItemDetails:
        """Get the detailed view of one item.

        The contact shown is the display name of the item's seller.

        Raises:
            ItemNotFoundError: If the item does not exist.
            CatalogUnavailableError: If the catalog read fails.
        """
        item = self._reads.get_item(item_id)
        category = (
            self._reads.get_category(item.category_id)
            if item.category_id is not None
            else None
        )
        return to_details(item, category, seller=self.users.get_user(item.seller_id))

    def get_items_by_category(self, category_id: int) -> List[ItemSummary]:
        return self._reads.list_by_category(category_id)

    def record_view(self, item_id: int, user_email: Optional[str]) -> None:
        """Record that a user viewed an item.

        Args:
            item_id: The ID of the viewed item.
            user_email: The email of the user viewing the item.

        Raises:
            UnauthorizedError: If no user identity is given.
            ItemNotFoundError: If the item does not exist.
            UserNotFoundError: If the email does not belong to a known user.
        """
        if not user_email:
            raise UnauthorizedError()

        self._reads.get_item(item_id)
        user = self.users.find_by_email(user_email)

        self.view_store.record(item_id, user.email)
        logger.info("Recorded item view", extra={"item_id": item_id, "user_id": user.id})

    def get_items_by_distribution(
        self,
        distribution: Mapping[str, object],
        limit: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> List[ItemSummary]:
        """Get items randomly selected according to a category distribution.

        Args:
            distribution: Mapping of category ids (as strings) to weights.
            limit: Maximum number of items to return.
            seed: Optional seed for a reproducible draw.

        Returns:
            List of item previews.

        Raises:
            CatalogUnavailableError: If a catalog read fails.
        """
        start_time = time.time()
        rng = np.random.default_rng(seed)

        try:
            items = self.sampler.sample(distribution, limit=limit, rng=rng)
        except CatalogUnavailableError as e:
            logger.error(
                "Distribution sampling failed",
                extra={
                    "error": e.details.get("error"),
                    "error_type": e.details.get("error_type"),
                },
            )
            raise

        latency_ms = (time.time() - start_time) * 1000
        metrics_service.record_sample(latency_ms, len(items))

        logger.info(
            "Recommendations generated",
            extra={
                "num_categories": len(distribution),
                "limit": limit,
                "num_recommendations": len(items),
                "total_time_ms": round(latency_ms, 2),
            },
        )

        return items
