"""User domain entity."""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A user of the application, identified by a caller-assigned id.

    The entity is immutable: to change identity, construct a new one.
    Uniqueness of ``id`` is enforced by the store at persistence time, not
    here, and an empty id is accepted (validation is a caller concern).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier for the user")

    @classmethod
    def new(cls, user_id: str) -> "User":
        """Create a user from its identifier."""
        return cls(id=user_id)

    def __str__(self) -> str:
        return self.id
