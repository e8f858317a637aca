"""Build the configured user store backend."""

from __future__ import annotations

from loguru import logger
from redis import Redis

from src.accounts.core.services.database.db_session import DbSessionService
from src.accounts.core.storage.memory_store import InMemoryUserStore
from src.accounts.core.storage.redis_store import RedisUserStore
from src.accounts.core.storage.sql_store import SqlUserStore
from src.accounts.core.storage.user_store import UserStore
from src.accounts.runtime.config.config_data import ConfigData
from src.accounts.runtime.context import get_config


def build_user_store(config: ConfigData | None = None) -> UserStore:
    """Create the backend selected by ``config.user_store.backend``.

    Args:
        config: Configuration to use; defaults to the active context config

    Returns:
        A ready-to-use store. The SQL backend has its tables created when
        ``user_store.create_tables`` is set. The caller owns the store and
        releases it with ``close()`` or a ``with`` block.
    """
    config = config or get_config()
    backend = config.user_store.backend

    if backend == "memory":
        logger.info("User store: in-memory")
        return InMemoryUserStore()

    if backend == "sql":
        db = DbSessionService(config)
        if config.user_store.create_tables:
            db.create_all()
        logger.info("User store: SQL")
        return SqlUserStore(db)

    if backend == "redis":
        redis_config = config.redis
        logger.info(
            "User store: Redis at {}", redis_config.sanitized_connection_string
        )
        client = Redis.from_url(
            redis_config.connection_string,
            decode_responses=True,
            socket_timeout=redis_config.socket_timeout,
            socket_connect_timeout=redis_config.socket_connect_timeout,
        )
        return RedisUserStore(client, key_prefix=redis_config.key_prefix)

    raise ValueError(f"Unknown user store backend: {backend}")
