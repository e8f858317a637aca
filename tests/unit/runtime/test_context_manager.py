"""Unit tests for the configuration context."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from src.accounts.runtime.config.config_data import ConfigData, RedisConfig
from src.accounts.runtime.context import (
    AppContext,
    get_config,
    get_context,
    merge_configs,
    set_config,
    set_context,
    with_context,
)


class TestContextManager:
    """Test the context manager functionality."""

    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert isinstance(get_config(), ConfigData)
        assert context.config is get_config()

    def test_with_context_override_single_field(self):
        original_config = get_config()
        original_level = original_config.logging.level

        override = ConfigData()
        override.user_store.backend = "redis"

        with with_context(override):
            active = get_config()
            assert active.user_store.backend == "redis"
            # Fields not set on the override are inherited
            assert active.logging.level == original_level
            assert active is not original_config

        assert get_config() is original_config

    def test_with_context_nested_overrides(self):
        outer = ConfigData()
        outer.user_store.backend = "sql"
        outer.database.url = "sqlite:///:memory:"

        inner = ConfigData()
        inner.database.url = "sqlite:///./inner.db"

        with with_context(outer):
            with with_context(inner):
                active = get_config()
                assert active.user_store.backend == "sql"
                assert active.database.url == "sqlite:///./inner.db"

            assert get_config().database.url == "sqlite:///:memory:"

    def test_with_context_none_is_noop(self):
        original = get_config()

        with with_context(None):
            assert get_config() is original

    def test_with_context_rejects_other_types(self):
        with pytest.raises(ValueError, match="config_override must be ConfigData"):
            with with_context({"user_store": {"backend": "sql"}}):
                pass

    def test_context_restored_after_exception(self):
        original = get_config()
        override = ConfigData()
        override.user_store.backend = "sql"

        with pytest.raises(RuntimeError):
            with with_context(override):
                raise RuntimeError("boom")

        assert get_config() is original

    def test_set_config_replaces_configuration(self):
        original_context = get_context()
        replacement = ConfigData()
        replacement.user_store.backend = "redis"

        try:
            set_config(replacement)
            assert get_config() is replacement
        finally:
            set_context(original_context)

    def test_overrides_are_isolated_per_thread(self):
        override = ConfigData()
        override.user_store.backend = "redis"

        def backend_in_thread() -> str:
            return get_config().user_store.backend

        with with_context(override):
            with ThreadPoolExecutor(max_workers=1) as pool:
                in_thread = pool.submit(backend_in_thread).result()

        assert in_thread == get_context().config.user_store.backend


class TestMergeConfigs:
    def test_whole_section_assignment_is_merged(self):
        base = ConfigData()
        override = ConfigData()
        override.redis = RedisConfig(key_prefix="other:")

        merged = merge_configs(base, override)

        assert merged.redis.key_prefix == "other:"

    def test_unset_override_keeps_base(self):
        base = ConfigData()
        base.logging.level = "DEBUG"

        merged = merge_configs(base, ConfigData())

        assert merged.logging.level == "DEBUG"
