"""Registry of marketplace users."""

import threading
from typing import Dict, Iterable, List, Optional

from listingrec.api.exceptions import UserNotFoundError
from listingrec.catalog.models import User


class UserDirectory:
    """Users indexed by id and by email, safe for concurrent readers.

    Emails are matched case-insensitively.
    """

    def __init__(self, users: Optional[Iterable[User]] = None):
        self._lock = threading.RLock()
        self._by_id: Dict[int, User] = {}
        self._by_email: Dict[str, User] = {}

        for user in users or []:
            self.add_user(user)

    def add_user(self, user: User) -> None:
        with self._lock:
            previous = self._by_id.get(user.id)
            if previous is not None:
                self._by_email.pop(previous.email.lower(), None)
            self._by_id[user.id] = user
            self._by_email[user.email.lower()] = user

    def get_user(self, user_id: Optional[int]) -> Optional[User]:
        """Return the user with this id, or None."""
        if user_id is None:
            return None
        with self._lock:
            return self._by_id.get(user_id)

    def find_by_email(self, email: str) -> User:
        """Return the user registered under an email.

        Raises:
            UserNotFoundError: If no user has this email.
        """
        with self._lock:
            user = self._by_email.get(email.lower())
        if user is None:
            raise UserNotFoundError(email)
        return user

    def list_users(self) -> List[User]:
        with self._lock:
            return list(self._by_id.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
