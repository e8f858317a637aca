"""User entity module.

This module contains all User-related classes organized by responsibility:
- User: Domain entity
- UserRecord: Record shape for the in-memory and Redis stores
- UserTable: Database persistence model
- user_to_record / user_from_record: Entity <-> record conversion
"""

from .entity import User
from .mapping import user_from_record, user_to_record
from .record import UserRecord
from .table import UserTable

__all__ = ["User", "UserRecord", "UserTable", "user_from_record", "user_to_record"]
