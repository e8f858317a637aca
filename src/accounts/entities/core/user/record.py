"""User record for non-relational backends."""

from typing import Any

from pydantic import Field

from src.accounts.entities.core._base import Record


class UserRecord(Record):
    """Persisted shape of a user in the in-memory and Redis stores.

    ``scope_id`` groups users by tenant or account; it is the key
    ``UserStore.list`` filters on. Records are mutable and therefore
    unhashable; hash the ``User`` entity instead.
    """

    scope_id: str = Field(default="", description="Tenant or account scope")
    display_name: str | None = Field(default=None, description="Name shown to other users")
    email: str | None = Field(default=None, description="User's email address")

    def __eq__(self, other: Any) -> bool:
        """Compare records by business attributes, ignoring timestamps."""
        if not isinstance(other, UserRecord):
            return False

        return (
            self.id == other.id
            and self.scope_id == other.scope_id
            and self.display_name == other.display_name
            and self.email == other.email
        )
