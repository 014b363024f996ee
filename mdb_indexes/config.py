"""
Configuration management for MDB_INDEXES.

Settings are a frozen Pydantic model. They can be built directly, or from
environment variables with `IndexSettings.from_env()`:

    MONGO_URI                              MongoDB connection URI
    DB_NAME                                Database name
    MDB_INDEXES_BACKEND                    auto (default), legacy or modern
    MDB_INDEXES_MIN_COMMAND_WIRE_VERSION   Wire version enabling index commands (3)
    MONGO_SERVER_SELECTION_TIMEOUT_MS      Server selection timeout (5000)
    MONGO_MAX_POOL_SIZE                    Maximum connection pool size (10)
    MONGO_MIN_POOL_SIZE                    Minimum connection pool size (1)
"""

import os
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .constants import (
    BACKEND_AUTO,
    COMMAND_INDEXES_MIN_WIRE_VERSION,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
)
from .exceptions import ConfigurationError

# Environment variable -> settings field
ENV_VARS: dict[str, str] = {
    "MONGO_URI": "mongo_uri",
    "DB_NAME": "db_name",
    "MDB_INDEXES_BACKEND": "backend",
    "MDB_INDEXES_MIN_COMMAND_WIRE_VERSION": "command_indexes_min_wire_version",
    "MONGO_SERVER_SELECTION_TIMEOUT_MS": "server_selection_timeout_ms",
    "MONGO_MAX_POOL_SIZE": "max_pool_size",
    "MONGO_MIN_POOL_SIZE": "min_pool_size",
}


class IndexSettings(BaseModel):
    """
    Index management configuration.

    Example:
        # Using environment variables
        settings = IndexSettings.from_env()

        # Or using direct parameters
        settings = IndexSettings.create(
            mongo_uri="mongodb://localhost:27017",
            db_name="my_db",
            backend="modern",
        )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mongo_uri: str = Field("", description="MongoDB connection URI")
    db_name: str = Field("", description="Database name")
    backend: Literal["auto", "legacy", "modern"] = Field(
        BACKEND_AUTO,
        description="Index backend; 'auto' picks it from the server wire version",
    )
    command_indexes_min_wire_version: int = Field(
        COMMAND_INDEXES_MIN_WIRE_VERSION,
        ge=0,
        description="Lowest wire version served by the command based backend",
    )
    server_selection_timeout_ms: int = Field(
        DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
        ge=1000,
        description="Server selection timeout in milliseconds",
    )
    max_pool_size: int = Field(
        DEFAULT_MAX_POOL_SIZE, ge=1, description="Maximum connection pool size"
    )
    min_pool_size: int = Field(
        DEFAULT_MIN_POOL_SIZE, ge=1, description="Minimum connection pool size"
    )

    @model_validator(mode="after")
    def _check_pool_sizes(self) -> "IndexSettings":
        if self.min_pool_size > self.max_pool_size:
            raise ValueError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})"
            )
        return self

    @classmethod
    def create(cls, **values: Any) -> "IndexSettings":
        """
        Build settings, reporting invalid values as ConfigurationError.

        Raises:
            ConfigurationError: If any value is invalid
        """
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            config_key = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ConfigurationError(
                f"Invalid index settings: {first.get('msg')}",
                config_key=config_key,
                config_value=first.get("input") if config_key else None,
                context={"error_count": e.error_count()},
            ) from e

    @classmethod
    def from_env(cls, **overrides: Any) -> "IndexSettings":
        """
        Build settings from environment variables; overrides win.

        Raises:
            ConfigurationError: If any value is invalid
        """
        values: dict[str, Any] = {}
        for env_var, field_name in ENV_VARS.items():
            value = os.getenv(env_var)
            if value:
                values[field_name] = value.lower() if field_name == "backend" else value
        values.update(overrides)
        return cls.create(**values)

    def require_connection(self) -> None:
        """
        Check that connection settings are present.

        Raises:
            ConfigurationError: If mongo_uri or db_name is missing
        """
        if not self.mongo_uri:
            raise ConfigurationError(
                "mongo_uri is required (set MONGO_URI environment variable or pass directly)",
                config_key="mongo_uri",
            )
        if not self.db_name:
            raise ConfigurationError(
                "db_name is required (set DB_NAME environment variable or pass directly)",
                config_key="db_name",
            )
