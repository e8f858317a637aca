"""User store interface.

Defines CRUD, fetch and list operations over users without committing to a
storage strategy. Each backend implements ``UserStore`` once for its native
record type, and callers depend only on this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class UserStore(ABC, Generic[T]):
    """Abstract interface for user storage backends.

    Records of type ``T`` carry at least an ``id`` and a ``scope_id``.
    Every operation may block on the backend. Failures are reported with
    the exceptions in ``errors``; backend-native exceptions never escape.
    """

    @abstractmethod
    def add(self, record: T) -> None:
        """Add a user to the underlying storage.

        Args:
            record: The user to be added

        Raises:
            DuplicateError: A user with the same id is already stored
            StorageError: The backend failed
        """

    @abstractmethod
    def update(self, record: T) -> None:
        """Replace the stored user that has the same id as ``record``.

        This is a full-record replace, not a partial update.

        Args:
            record: The user with the updated information

        Raises:
            NotFoundError: No user is stored under ``record.id``
            StorageError: The backend failed
        """

    @abstractmethod
    def remove(self, user_id: str) -> T:
        """Remove a user and return the record that was stored.

        Args:
            user_id: The unique id of the user to be removed

        Raises:
            NotFoundError: No user is stored under ``user_id``
            StorageError: The backend failed
        """

    @abstractmethod
    def fetch(self, user_id: str) -> T:
        """Fetch a user from the underlying storage.

        Args:
            user_id: The unique id of the user to be returned

        Raises:
            NotFoundError: No user is stored under ``user_id``
            StorageError: The backend failed
        """

    @abstractmethod
    def list(self, scope_id: str) -> list[T]:
        """List the users belonging to a scope.

        An empty scope yields an empty list. Ordering is documented by each
        implementation.

        Args:
            scope_id: Tenant or account key the users are grouped under

        Raises:
            StorageError: The backend failed
        """

    @abstractmethod
    def exists(self, user_id: str) -> bool:
        """Check whether a user with the given id is stored.

        Args:
            user_id: The unique id of the user

        Raises:
            StorageError: The backend failed
        """

    def close(self) -> None:
        """Release backend resources held by the store.

        Backends holding no external resources leave this as a no-op.
        """

    def __enter__(self) -> UserStore[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
