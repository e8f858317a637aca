"""User database table model."""

from typing import Any

from sqlmodel import Field

from src.accounts.entities.core._base import RecordTable


class UserTable(RecordTable, table=True):
    """Database persistence model for users.

    This is the native record of the SQL store. It is kept apart from the
    User entity so schema changes stay out of domain code.
    """

    __tablename__ = "users"

    scope_id: str = Field(default="", index=True)
    display_name: str | None = None
    email: str | None = None

    def __eq__(self, other: Any) -> bool:
        """Compare rows by business attributes, ignoring timestamps."""
        if not isinstance(other, UserTable):
            return False

        return (
            self.id == other.id
            and self.scope_id == other.scope_id
            and self.display_name == other.display_name
            and self.email == other.email
        )

    # Identity hash: rows are mutable and the ORM tracks them per instance
    __hash__ = object.__hash__
