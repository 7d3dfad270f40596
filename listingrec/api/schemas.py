"""Request and response models for the ListingRec API."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from listingrec.catalog.models import ItemDetails, ItemSummary


class ItemPreviewResponse(BaseModel):
    """Preview information shown in item listings."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    price: float
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_summary(cls, summary: ItemSummary) -> "ItemPreviewResponse":
        return cls(
            id=summary.id,
            title=summary.title,
            price=summary.price,
            image_url=summary.image_url,
            latitude=summary.latitude,
            longitude=summary.longitude,
        )


class ItemDetailsResponse(BaseModel):
    """Full information for a single item."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str
    category: str
    price: float
    contact: str
    image_urls: List[str] = Field(default_factory=list, alias="imageUrls")

    @classmethod
    def from_details(cls, details: ItemDetails) -> "ItemDetailsResponse":
        return cls(
            id=details.id,
            title=details.title,
            description=details.description,
            category=details.category,
            price=details.price,
            contact=details.contact,
            image_urls=list(details.image_urls),
        )


class RecommendedItemsRequest(BaseModel):
    """Request body for distribution-based recommendations.

    Attributes:
        distribution: Category ids (as strings) mapped to sampling weights.
        limit: Maximum number of items; null or non-positive means the cap.
    """

    distribution: Dict[str, float] = Field(
        default_factory=dict, description="Category id to probability weight"
    )
    limit: Optional[int] = Field(
        default=None, description="Maximum number of items to return"
    )


def to_previews(summaries: List[ItemSummary]) -> List[ItemPreviewResponse]:
    return [ItemPreviewResponse.from_summary(summary) for summary in summaries]
