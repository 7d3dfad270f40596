"""Item endpoints for the ListingRec API.

Previews, details, per-category listings and view recording.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from listingrec.api.dependencies import get_current_user, get_item_service
from listingrec.api.schemas import (
    ItemDetailsResponse,
    ItemPreviewResponse,
    to_previews,
)
from listingrec.catalog.service import ItemService

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/api/items",
    tags=["items"],
)


@router.get("/all", response_model=List[ItemPreviewResponse])
def get_all_items(
    service: ItemService = Depends(get_item_service),
) -> List[ItemPreviewResponse]:
    """Get preview information (image, title, price) for all items."""
    return to_previews(service.get_all_previews())


@router.get("/details/{item_id}", response_model=ItemDetailsResponse)
def get_item_details(
    item_id: int,
    service: ItemService = Depends(get_item_service),
) -> ItemDetailsResponse:
    """Get the details of one item.

    Raises:
        ItemNotFoundError: Rendered as 404 if the item does not exist.
    """
    return ItemDetailsResponse.from_details(service.get_item_details(item_id))


@router.get("/category/{category_id}", response_model=List[ItemPreviewResponse])
def get_items_by_category(
    category_id: int,
    service: ItemService = Depends(get_item_service),
) -> List[ItemPreviewResponse]:
    """Get previews of the items in one category."""
    return to_previews(service.get_items_by_category(category_id))


@router.post("/view/post/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def record_item_view(
    item_id: int,
    user_email: Optional[str] = Depends(get_current_user),
    service: ItemService = Depends(get_item_service),
) -> Response:
    """Record that the current user viewed an item.

    Returns 401 without a user identity, 404 for unknown items and 404 for
    emails that do not belong to a registered user.
    """
    service.record_view(item_id, user_email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
