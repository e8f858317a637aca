from unittest.mock import patch

import pytest

from src.accounts.core.storage.factory import build_user_store
from src.accounts.core.storage.memory_store import InMemoryUserStore
from src.accounts.core.storage.redis_store import RedisUserStore
from src.accounts.core.storage.sql_store import SqlUserStore
from src.accounts.entities.core.user import UserRecord, UserTable
from src.accounts.runtime.config.config_data import (
    ConfigData,
    DatabaseConfig,
    RedisConfig,
    UserStoreConfig,
)
from src.accounts.runtime.context import with_context
from tests.utils import FakeRedis


class TestBuildUserStore:
    def test_memory_backend(self):
        config = ConfigData(user_store=UserStoreConfig(backend="memory"))

        assert isinstance(build_user_store(config), InMemoryUserStore)

    def test_sql_backend_creates_tables(self):
        config = ConfigData(
            user_store=UserStoreConfig(backend="sql"),
            database=DatabaseConfig(url="sqlite:///:memory:"),
        )

        store = build_user_store(config)

        assert isinstance(store, SqlUserStore)
        store.add(UserTable(id="alice"))
        assert store.exists("alice")

    def test_redis_backend_uses_configured_connection(self):
        config = ConfigData(
            user_store=UserStoreConfig(backend="redis"),
            redis=RedisConfig(url="redis://cache:6379/2", password="s3cret", key_prefix="app:"),
        )
        fake = FakeRedis()

        with patch("src.accounts.core.storage.factory.Redis.from_url", return_value=fake) as from_url:
            store = build_user_store(config)

        assert isinstance(store, RedisUserStore)
        assert from_url.call_args.args[0] == "redis://:s3cret@cache:6379/2"
        assert from_url.call_args.kwargs["decode_responses"] is True

        store.add(UserRecord(id="alice"))
        assert "app:user:alice" in fake.strings

    def test_defaults_to_active_context(self):
        override = ConfigData()
        override.user_store.backend = "memory"

        with with_context(override):
            assert isinstance(build_user_store(), InMemoryUserStore)

    def test_unknown_backend_rejected(self):
        config = ConfigData()
        # Bypass validation to simulate a corrupted config object
        config.user_store.backend = "cassandra"

        with pytest.raises(ValueError, match="cassandra"):
            build_user_store(config)


    def test_redis_store_releases_client_on_exit(self):
        config = ConfigData(user_store=UserStoreConfig(backend="redis"))
        fake = FakeRedis()

        with patch("src.accounts.core.storage.factory.Redis.from_url", return_value=fake):
            with build_user_store(config) as store:
                store.add(UserRecord(id="alice"))

        assert fake.closed

    def test_sql_store_disposes_engine_on_exit(self):
        config = ConfigData(
            user_store=UserStoreConfig(backend="sql"),
            database=DatabaseConfig(url="sqlite:///:memory:"),
        )

        with patch(
            "src.accounts.core.storage.sql_store.DbSessionService.dispose", autospec=True
        ) as dispose:
            with build_user_store(config) as store:
                store.add(UserTable(id="alice"))

        dispose.assert_called_once()

    def test_memory_store_close_is_noop(self):
        with build_user_store(ConfigData()) as store:
            store.add(UserRecord(id="alice"))

        assert store.exists("alice")
