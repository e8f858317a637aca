"""Entities module with entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model
- record.py / table.py: Persisted shapes
- mapping.py: Conversion between the two
"""

from .core.user import User, UserRecord, UserTable, user_from_record, user_to_record

__all__ = [
    "User",
    "UserRecord",
    "UserTable",
    "user_from_record",
    "user_to_record",
]
