"""Database engine and session factory used by the SQL user store."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import text
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.accounts.runtime.config.config_data import ConfigData
from src.accounts.runtime.context import get_config


class DbSessionService:
    def __init__(self, config: ConfigData | None = None):
        """Initialize the database engine and session factory."""

        logger.info("Setting up database engine and session factory")
        main_config = config or get_config()
        self._db_config = db_config = main_config.database
        self._environment = main_config.app.environment

        engine_kwargs: dict[str, Any] = {
            "echo": db_config.echo,
            "connect_args": self._get_connect_args(),
            **self._get_pool_args(),
        }

        logger.info("Initializing database engine for environment: {}", self._environment)
        self._engine = create_engine(db_config.connection_string, **engine_kwargs)

    def _get_pool_args(self) -> dict[str, Any]:
        """Pool settings appropriate for the configured database."""
        db_config = self._db_config

        if db_config.is_in_memory:
            # One shared connection, otherwise every checkout sees an empty database
            return {"poolclass": StaticPool}

        if db_config.is_sqlite:
            return {"pool_pre_ping": True}

        return {
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,  # Validate connections before use
        }

    def _get_connect_args(self) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if self._db_config.url.startswith("postgresql"):
            connect_args.update(
                {
                    "application_name": f"{self._environment}_accounts",
                    "connect_timeout": 30,
                }
            )

        elif self._db_config.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,
                    "timeout": 20,  # Lock timeout
                }
            )

            if self._environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    @property
    def engine(self):
        return self._engine

    def create_all(self) -> None:
        """Create all database tables."""
        from src.accounts.entities.core.user.table import UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Rows stay readable after the session closes
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Run the enclosed block in one transaction.

        Commits on success, rolls back on any exception, always closes.
        """
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.debug(
                "Database transaction rolled back",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def dispose(self) -> None:
        """Release every pooled connection."""
        self._engine.dispose()
