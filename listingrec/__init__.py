"""ListingRec: marketplace listings with distribution-based recommendations.

This package provides a backend service that stores items for sale, serves
previews and details, records item views and samples recommendation sets
from a category probability distribution.

Modules:
    api: FastAPI application and REST API endpoints
    catalog: Item storage, DTO mapping and view recording
    recommender: Distribution-weighted item sampling
"""

__version__ = "0.1.0"
