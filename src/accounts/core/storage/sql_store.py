from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from src.accounts.core.services.database.db_session import DbSessionService
from src.accounts.core.storage.errors import DuplicateError, NotFoundError, StorageError
from src.accounts.core.storage.user_store import UserStore
from src.accounts.entities.core._base import utcnow
from src.accounts.entities.core.user.table import UserTable


def _detached_copy(row: UserTable) -> UserTable:
    return UserTable(**row.model_dump())


class SqlUserStore(UserStore[UserTable]):
    """Relational user store on top of SQLModel.

    Each operation runs in its own transaction. ``list`` orders users by
    creation time, then id.
    """

    def __init__(self, db: DbSessionService):
        self._db = db

    @contextmanager
    def _transaction(
        self, operation: str, inserting: str | None = None
    ) -> Iterator[Session]:
        """Open a session scope and translate SQLAlchemy failures.

        ``inserting`` names the id being inserted. An integrity violation on
        commit is a duplicate only if that id is now stored; any other
        constraint failure is a storage error.
        """
        try:
            with self._db.session_scope() as session:
                yield session
        except SQLAlchemyError as e:
            if (
                inserting is not None
                and isinstance(e, IntegrityError)
                and self._committed_by_other_writer(inserting)
            ):
                raise DuplicateError(inserting) from e
            logger.error(
                "User store operation failed",
                operation=operation,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise StorageError(f"Database error during {operation}: {e}") from e

    def _committed_by_other_writer(self, user_id: str) -> bool:
        try:
            with self._db.session_scope() as session:
                return session.get(UserTable, user_id) is not None
        except SQLAlchemyError as e:
            logger.warning(
                "Could not confirm duplicate insert",
                user_id=user_id,
                error_type=type(e).__name__,
            )
            return False

    def add(self, record: UserTable) -> None:
        with self._transaction("add", inserting=record.id) as session:
            if session.get(UserTable, record.id) is not None:
                raise DuplicateError(record.id)
            session.add(_detached_copy(record))
        logger.debug("Added user {} to scope '{}'", record.id, record.scope_id)

    def update(self, record: UserTable) -> None:
        with self._transaction("update") as session:
            stored = session.get(UserTable, record.id)
            if stored is None:
                raise NotFoundError(record.id)
            stored.scope_id = record.scope_id
            stored.display_name = record.display_name
            stored.email = record.email
            stored.updated_at = utcnow()
            session.add(stored)
        logger.debug("Updated user {}", record.id)

    def remove(self, user_id: str) -> UserTable:
        with self._transaction("remove") as session:
            stored = session.get(UserTable, user_id, with_for_update=True)
            if stored is None:
                raise NotFoundError(user_id)
            removed = _detached_copy(stored)
            session.delete(stored)
        logger.debug("Removed user {}", user_id)
        return removed

    def fetch(self, user_id: str) -> UserTable:
        with self._transaction("fetch") as session:
            stored = session.get(UserTable, user_id)
            if stored is None:
                raise NotFoundError(user_id)
            return _detached_copy(stored)

    def list(self, scope_id: str) -> list[UserTable]:
        with self._transaction("list") as session:
            statement = (
                select(UserTable)
                .where(UserTable.scope_id == scope_id)
                .order_by(UserTable.created_at, UserTable.id)
            )
            return [_detached_copy(row) for row in session.exec(statement).all()]

    def exists(self, user_id: str) -> bool:
        with self._transaction("exists") as session:
            return session.get(UserTable, user_id) is not None

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        self._db.dispose()
