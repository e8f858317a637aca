"""User store contract and error taxonomy.

Backends live in their own modules (``memory_store``, ``sql_store``,
``redis_store``); ``factory.build_user_store`` picks one from configuration.
"""

from .errors import (
    ConversionError,
    DuplicateError,
    NotFoundError,
    StorageError,
    UserStoreError,
)
from .user_store import UserStore

__all__ = [
    "ConversionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "UserStore",
    "UserStoreError",
]
