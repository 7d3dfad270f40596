"""In-memory store for item view events."""

import threading
from datetime import datetime, timezone
from typing import List

from listingrec.catalog.models import ItemView


class ViewStore:
    """Append-only record of which users viewed which items.

    Thread-safe so route handlers running in the threadpool can share it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._views: List[ItemView] = []

    def record(self, item_id: int, user_email: str) -> ItemView:
        """Store a view event stamped with the current UTC time."""
        view = ItemView(
            item_id=item_id,
            user_email=user_email,
            viewed_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._views.append(view)
        return view

    def views_for_user(self, user_email: str) -> List[ItemView]:
        with self._lock:
            return [view for view in self._views if view.user_email == user_email]

    def count_for_item(self, item_id: int) -> int:
        with self._lock:
            return sum(1 for view in self._views if view.item_id == item_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._views)
