"""Recommendation endpoints for the ListingRec API.

Returns item previews sampled according to a caller-supplied category
distribution.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from listingrec.api.dependencies import get_current_user, get_item_service
from listingrec.api.schemas import (
    ItemPreviewResponse,
    RecommendedItemsRequest,
    to_previews,
)
from listingrec.catalog.service import ItemService

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/api/items",
    tags=["recommendations"],
)


@router.post("/view/recommended_items", response_model=List[ItemPreviewResponse])
def get_recommended_items(
    request: RecommendedItemsRequest,
    user_email: Optional[str] = Depends(get_current_user),
    service: ItemService = Depends(get_item_service),
) -> List[ItemPreviewResponse]:
    """Get items sampled according to a category distribution.

    Malformed category keys and empty categories are skipped, so the result
    may be shorter than the limit or empty.

    Example:
        POST /api/items/view/recommended_items
        {"distribution": {"1": 0.5, "2": 0.5}, "limit": 4}
    """
    logger.info(
        "Recommendation request",
        extra={
            "authenticated": user_email is not None,
            "num_categories": len(request.distribution),
            "limit": request.limit,
        },
    )

    items = service.get_items_by_distribution(request.distribution, request.limit)
    return to_previews(items)
