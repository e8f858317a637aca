"""Error taxonomy shared by every user store backend.

Callers match on the exception class: ``StorageError`` may be retried,
``NotFoundError`` may be treated as absence, the rest are surfaced.
"""


class UserStoreError(Exception):
    """Base class for all user store errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateError(UserStoreError):
    """A record with the same identifier is already stored."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User '{user_id}' already exists")
        self.user_id = user_id


class NotFoundError(UserStoreError):
    """No record is stored under the requested identifier."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User '{user_id}' not found")
        self.user_id = user_id


class StorageError(UserStoreError):
    """The backend failed to perform the operation.

    Raised ``from`` the backend-native exception, which remains available on
    ``__cause__``.
    """


class ConversionError(UserStoreError):
    """A persisted record could not be mapped into a valid entity."""
