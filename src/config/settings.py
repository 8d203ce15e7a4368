"""Environment configuration and validation.

This module defines strongly-typed settings loaded from environment variables (optionally via a
local `.env` file): the AI function to call, its JSON arguments, and the Snowflake connection
parameters.

The connection parameters are turned into an immutable `ConnectionConfig` once, at the process
boundary, and passed explicitly to the query executor.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.aisql.dispatcher import LogLevel, normalize_log_level


@dataclass(frozen=True)
class ConnectionConfig:
    """Snowflake connection parameters handed to the query executor."""

    account: str | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    private_key_path: str | None = None
    role: str | None = None
    warehouse: str | None = None
    database: str | None = None
    schema: str | None = None
    log_level: LogLevel = LogLevel.minimal


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    ai_function: str = Field(default="AI_COMPLETE", alias="AI_FUNCTION")
    ai_args: str | None = Field(default=None, alias="AI_ARGS")

    account: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SNOWFLAKE_ACCOUNT", "SNOWFLAKE_ACCOUNT_URL"),
    )
    user: str | None = Field(default=None, alias="SNOWFLAKE_USER")
    password: str | None = Field(default=None, alias="SNOWFLAKE_PASSWORD", repr=False)
    private_key_path: str | None = Field(default=None, alias="SNOWFLAKE_PRIVATE_KEY_PATH")
    role: str | None = Field(default=None, alias="SNOWFLAKE_ROLE")
    warehouse: str | None = Field(default=None, alias="SNOWFLAKE_WAREHOUSE")
    database: str | None = Field(default=None, alias="SNOWFLAKE_DATABASE")
    snowflake_schema: str | None = Field(default=None, alias="SNOWFLAKE_SCHEMA")

    log_level: LogLevel = Field(default=LogLevel.minimal, alias="SNOWFLAKE_LOG_LEVEL")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: object) -> LogLevel:
        """Accept any spelling; only `VERBOSE` (case-insensitive) enables verbose output."""

        return normalize_log_level(value if isinstance(value, str) else None)

    def connection_config(self) -> ConnectionConfig:
        """Build the immutable connection configuration for the executor."""

        return ConnectionConfig(
            account=self.account,
            username=self.user,
            password=self.password,
            private_key_path=self.private_key_path,
            role=self.role,
            warehouse=self.warehouse,
            database=self.database,
            schema=self.snowflake_schema,
            log_level=self.log_level,
        )


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
