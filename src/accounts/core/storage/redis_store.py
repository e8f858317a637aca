from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from pydantic import ValidationError
from redis import Redis
from redis.exceptions import RedisError

from src.accounts.core.storage.errors import (
    ConversionError,
    DuplicateError,
    NotFoundError,
    StorageError,
)
from src.accounts.core.storage.user_store import UserStore
from src.accounts.entities.core._base import utcnow
from src.accounts.entities.core.user.record import UserRecord


class RedisUserStore(UserStore[UserRecord]):
    """Redis-based user store with JSON serialization.

    Each user is a JSON string under ``<prefix>user:<id>``; every scope keeps
    a set of member ids under ``<prefix>scope:<scope_id>``. Writes to the
    user key are single atomic commands (``SET NX``, ``SET XX``, ``GETDEL``),
    so concurrent writers cannot both win. An add whose index write fails is
    rolled back, and an update changes payload and index in one MULTI/EXEC.
    ``list`` returns users sorted by id.
    """

    def __init__(self, redis_client: Redis, key_prefix: str = "accounts:"):
        self._redis = redis_client
        self._prefix = key_prefix

    def _user_key(self, user_id: str) -> str:
        return f"{self._prefix}user:{user_id}"

    def _scope_key(self, scope_id: str) -> str:
        return f"{self._prefix}scope:{scope_id}"

    def _decode(self, user_id: str, data: str | bytes) -> UserRecord:
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return UserRecord.model_validate_json(data)
        except (ValidationError, UnicodeDecodeError) as e:
            raise ConversionError(f"Stored user '{user_id}' is malformed: {e}") from e

    @contextmanager
    def _command(self, operation: str) -> Iterator[None]:
        try:
            yield
        except UnicodeDecodeError as e:
            raise ConversionError(f"Undecodable reply during {operation}: {e}") from e
        except RedisError as e:
            logger.error(
                "User store operation failed",
                operation=operation,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise StorageError(f"Redis error during {operation}: {e}") from e

    def _discard(self, key: str) -> None:
        """Best-effort removal of a key written by a half-finished add."""
        try:
            self._redis.delete(key)
        except RedisError as e:
            logger.error(
                "Could not roll back partial add",
                key=key,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    def add(self, record: UserRecord) -> None:
        key = self._user_key(record.id)
        with self._command("add"):
            if not self._redis.set(key, record.model_dump_json(), nx=True):
                raise DuplicateError(record.id)
            try:
                self._redis.sadd(self._scope_key(record.scope_id), record.id)
            except RedisError:
                # An unindexed user would be invisible to list but block re-adds
                self._discard(key)
                raise
        logger.debug("Added user {} to scope '{}'", record.id, record.scope_id)

    def update(self, record: UserRecord) -> None:
        key = self._user_key(record.id)
        with self._command("update"):
            data = self._redis.get(key)
            if data is None:
                raise NotFoundError(record.id)
            stored = self._decode(record.id, data)
            replacement = record.model_copy(
                update={"created_at": stored.created_at, "updated_at": utcnow()}
            )
            new_scope = self._scope_key(record.scope_id)
            moved = stored.scope_id != record.scope_id

            # Payload and index entry change in one MULTI/EXEC
            pipe = self._redis.pipeline(transaction=True)
            pipe.set(key, replacement.model_dump_json(), xx=True)
            if moved:
                pipe.srem(self._scope_key(stored.scope_id), record.id)
                pipe.sadd(new_scope, record.id)
            written = pipe.execute()[0]

            if not written:
                # Removed between the read and the write
                if moved:
                    self._redis.srem(new_scope, record.id)
                raise NotFoundError(record.id)
        logger.debug("Updated user {}", record.id)

    def remove(self, user_id: str) -> UserRecord:
        with self._command("remove"):
            data = self._redis.getdel(self._user_key(user_id))
            if data is None:
                raise NotFoundError(user_id)
            removed = self._decode(user_id, data)
            self._redis.srem(self._scope_key(removed.scope_id), user_id)
        logger.debug("Removed user {}", user_id)
        return removed

    def fetch(self, user_id: str) -> UserRecord:
        with self._command("fetch"):
            data = self._redis.get(self._user_key(user_id))
        if data is None:
            raise NotFoundError(user_id)
        return self._decode(user_id, data)

    def list(self, scope_id: str) -> list[UserRecord]:
        with self._command("list"):
            members = self._redis.smembers(self._scope_key(scope_id))
            user_ids = sorted(
                m.decode("utf-8") if isinstance(m, bytes) else m for m in members
            )
            if not user_ids:
                return []
            payloads = self._redis.mget([self._user_key(user_id) for user_id in user_ids])

        records = []
        for user_id, data in zip(user_ids, payloads):
            # Index entries can briefly outlive a removed user
            if data is None:
                continue
            record = self._decode(user_id, data)
            if record.scope_id == scope_id:
                records.append(record)
        return records

    def exists(self, user_id: str) -> bool:
        with self._command("exists"):
            return bool(self._redis.exists(self._user_key(user_id)))

    def ping(self) -> bool:
        """Test Redis connection health."""
        try:
            return bool(self._redis.ping())
        except RedisError:
            return False

    def close(self) -> None:
        """Release the Redis connection pool."""
        try:
            logger.info("Closing Redis connection")
            self._redis.close()
        except RedisError as e:
            logger.error(
                "Error closing Redis connection",
                error_type=type(e).__name__,
                error_message=str(e),
            )
