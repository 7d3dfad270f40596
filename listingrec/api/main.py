"""FastAPI application main module.

This module defines the main FastAPI application instance, wires the routers,
middleware and error handlers, and exposes the health, status and metrics
endpoints of the ListingRec service.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from listingrec import __version__
from listingrec.api.dependencies import get_item_service
from listingrec.api.exceptions import ListingRecException
from listingrec.api.logging_config import RequestLoggingMiddleware, setup_logging
from listingrec.api.metrics import metrics_service
from listingrec.api.routes import items, recommend
from listingrec.catalog.service import ItemService
from listingrec.config import ServiceConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging in the serving process before requests arrive.

    Runs in every worker, including the reloader child started by uvicorn.
    """
    config = ServiceConfig.from_env()
    setup_logging(config.log_level, json_logs=config.json_logs)
    logger.info("ListingRec API starting", extra={"version": __version__})
    yield


# Create FastAPI application instance
app = FastAPI(
    title="ListingRec API",
    description="Marketplace listings with distribution-based recommendations",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(items.router)
app.include_router(recommend.router)


@app.exception_handler(ListingRecException)
async def listingrec_exception_handler(
    request: Request, exc: ListingRecException
) -> JSONResponse:
    """Render service errors as a consistent JSON body."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        exc.message,
        extra={
            "path": str(request.url.path),
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures with an error key."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Invalid request",
            "detail": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception instances that json cannot encode
    return jsonable_encoder([
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ])


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Returns:
        Dictionary with status key set to "ok".

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/status")
def get_status(service: ItemService = Depends(get_item_service)) -> Dict[str, Any]:
    """Report catalog size and sampler settings."""
    items_list = service.catalog.list_items()
    category_ids = {item.category_id for item in items_list if item.category_id is not None}
    return {
        "catalog_loaded": True,
        "num_items": len(items_list),
        "num_categories": len(category_ids),
        "num_views": len(service.view_store),
        "hard_cap": service.sampler.hard_cap,
    }


@app.get("/metrics")
def get_metrics() -> Dict[str, Any]:
    """Return sampling call counts and latency statistics."""
    return metrics_service.get_metrics()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "listingrec.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
