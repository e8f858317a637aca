"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path (disabled if unset)")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of rotated log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Relational database configuration for the SQL user store."""

    url: str = Field(
        default="sqlite:///./users.db", description="SQLAlchemy database URL"
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable holding the database password",
    )

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the database password from the configured environment variable."""
        if self.password_env_var:
            return os.getenv(self.password_env_var)
        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with password if provided."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)

        if base_url.password:
            if self.password and self.password != base_url.password:
                logger.warning(
                    "Database password from environment variable does not match the one in the URL. Using password from environment variable."
                )
                base_url = base_url.set(password=self.password)
            return base_url.render_as_string(hide_password=False)

        if self.password:
            base_url = base_url.set(password=self.password)

        return base_url.render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_in_memory(self) -> bool:
        return self.is_sqlite and (":memory:" in self.url or self.url in ("sqlite://", "sqlite:///"))


class RedisConfig(BaseModel):
    """Redis configuration model for the remote user store."""

    url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    password: str | None = Field(
        default=None, description="Password for Redis authentication"
    )
    key_prefix: str = Field(
        default="accounts:", description="Prefix applied to every key the store writes"
    )
    socket_timeout: float = Field(default=5.0, description="Socket timeout in seconds")
    socket_connect_timeout: float = Field(
        default=5.0, description="Socket connect timeout in seconds"
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the Redis connection string with password if provided."""
        if self.password:
            if "@" in self.url:
                # URL already has auth info
                return self.url
            parts = self.url.split("://", 1)
            if len(parts) == 2:
                scheme, rest = parts
                return f"{scheme}://:{self.password}@{rest}"
        return self.url

    @property
    def sanitized_connection_string(self) -> str:
        """Connection string safe to write to logs."""
        if self.password:
            return self.connection_string.replace(self.password, "***")
        return self.connection_string


class UserStoreConfig(BaseModel):
    """Selects which backend implements the user store."""

    backend: Literal["memory", "sql", "redis"] = Field(
        default="memory", description="User store backend"
    )
    create_tables: bool = Field(
        default=True, description="Create missing tables when the SQL backend starts"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    name: str = Field(default="accounts", description="Application name")
    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig, description="Redis configuration"
    )
    user_store: UserStoreConfig = Field(
        default_factory=UserStoreConfig, description="User store configuration"
    )
