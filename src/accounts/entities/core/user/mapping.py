"""Conversions between the User entity and backend records.

Both directions are pure. ``user_to_record`` never fails; ``user_from_record``
raises ``ConversionError`` when a persisted record carries no usable id.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from src.accounts.core.storage.errors import ConversionError
from src.accounts.entities.core._base import Record, RecordTable
from src.accounts.entities.core.user.entity import User
from src.accounts.entities.core.user.record import UserRecord

R = TypeVar("R", bound=Record | RecordTable)


def user_to_record(user: User, record_type: type[R] = UserRecord, **fields: Any) -> R:
    """Build a ``record_type`` carrying the user's id.

    Record fields outside the entity (scope, profile data) come from
    ``fields`` or fall back to the record's defaults.
    """
    return record_type(**{**fields, "id": user.id})


def user_from_record(record: Any) -> User:
    """Map a persisted record, or a mapping of its columns, back to a User."""
    if isinstance(record, Mapping):
        user_id = record.get("id")
    else:
        user_id = getattr(record, "id", None)

    if user_id is None:
        raise ConversionError(f"Record {type(record).__name__} has no identifier")
    if not isinstance(user_id, str):
        raise ConversionError(
            f"Record identifier must be a string, got {type(user_id).__name__}"
        )
    if not user_id:
        raise ConversionError("Record identifier is empty")

    return User(id=user_id)
