"""FastAPI dependencies shared by the route modules.

Holds the process-wide ItemService, built lazily from configuration, and the
current-user lookup.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import Header

from listingrec.api.exceptions import CatalogLoadError
from listingrec.catalog.service import ItemService
from listingrec.catalog.store import (
    CATEGORIES_FILENAME,
    InMemoryCatalog,
    check_snapshot_exists,
    load_catalog_from_csv,
    load_catalog_snapshot,
    load_users_from_csv,
    load_users_snapshot,
)
from listingrec.config import ServiceConfig

# Configure module logger
logger = logging.getLogger(__name__)

USER_HEADER = "X-User-Email"

# Cache for the configured service
_service_cache: Optional[ItemService] = None


def build_item_service(config: ServiceConfig) -> ItemService:
    """Create an ItemService backed by the configured catalog source.

    A joblib snapshot in ``config.snapshot_dir`` wins over CSV files in
    ``config.data_dir``. With neither present the catalog starts empty. Users
    are read from the same source as the catalog.

    Raises:
        CatalogLoadError: If the catalog source exists but cannot be read.
    """
    if check_snapshot_exists(config.snapshot_dir):
        source = config.snapshot_dir
        loader = load_catalog_snapshot
        users_loader = load_users_snapshot
    elif (Path(config.data_dir) / CATEGORIES_FILENAME).exists():
        source = config.data_dir
        loader = load_catalog_from_csv
        users_loader = load_users_from_csv
    else:
        logger.warning(
            "No catalog source found, starting with an empty catalog",
            extra={"data_dir": config.data_dir, "snapshot_dir": config.snapshot_dir},
        )
        return ItemService(InMemoryCatalog(), hard_cap=config.hard_cap)

    try:
        catalog = loader(source)
        users = users_loader(source)
    except Exception as e:
        logger.error(f"Failed to load catalog: {e}", exc_info=True)
        raise CatalogLoadError(source, e) from e

    return ItemService(catalog, hard_cap=config.hard_cap, users=users)


def get_item_service() -> ItemService:
    """Return the shared ItemService, building it on first use."""
    global _service_cache

    if _service_cache is None:
        _service_cache = build_item_service(ServiceConfig.from_env())
        logger.info("Item service initialized")
    return _service_cache


def set_item_service(service: Optional[ItemService]) -> None:
    """Replace the shared service. Passing None forces a rebuild on next use."""
    global _service_cache
    _service_cache = service


def get_current_user(
    x_user_email: Optional[str] = Header(default=None, alias=USER_HEADER),
) -> Optional[str]:
    """Return the caller's email from the identity header, if any."""
    if x_user_email is None:
        return None
    return x_user_email.strip() or None
