from __future__ import annotations

import threading

from loguru import logger

from src.accounts.core.storage.errors import DuplicateError, NotFoundError
from src.accounts.core.storage.user_store import UserStore
from src.accounts.entities.core._base import utcnow
from src.accounts.entities.core.user.record import UserRecord


class InMemoryUserStore(UserStore[UserRecord]):
    """In-memory user store.

    Records are copied on the way in and out, so callers never share state
    with the store. ``list`` returns users in insertion order.
    """

    def __init__(self):
        self._data: dict[str, UserRecord] = {}
        self._lock = threading.RLock()

    def add(self, record: UserRecord) -> None:
        with self._lock:
            if record.id in self._data:
                raise DuplicateError(record.id)
            self._data[record.id] = record.model_copy(deep=True)
        logger.debug("Added user {} to scope '{}'", record.id, record.scope_id)

    def update(self, record: UserRecord) -> None:
        with self._lock:
            stored = self._data.get(record.id)
            if stored is None:
                raise NotFoundError(record.id)
            self._data[record.id] = record.model_copy(
                update={"created_at": stored.created_at, "updated_at": utcnow()},
                deep=True,
            )
        logger.debug("Updated user {}", record.id)

    def remove(self, user_id: str) -> UserRecord:
        with self._lock:
            try:
                removed = self._data.pop(user_id)
            except KeyError:
                raise NotFoundError(user_id) from None
        logger.debug("Removed user {}", user_id)
        return removed

    def fetch(self, user_id: str) -> UserRecord:
        with self._lock:
            stored = self._data.get(user_id)
            if stored is None:
                raise NotFoundError(user_id)
            return stored.model_copy(deep=True)

    def list(self, scope_id: str) -> list[UserRecord]:
        with self._lock:
            return [
                record.model_copy(deep=True)
                for record in self._data.values()
                if record.scope_id == scope_id
            ]

    def exists(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._data

    def clear(self) -> None:
        """Drop every stored user."""
        with self._lock:
            self._data.clear()
