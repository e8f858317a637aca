"""User accounts core.

A user entity, a storage-agnostic user store contract, and in-memory, SQL
and Redis implementations of it.
"""

__version__ = "0.1.0"
