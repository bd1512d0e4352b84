"""
Character API - Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and exposes a `settings` object.
Who:   Imported by main.py (app factory, entry point) and database.py.
When:  Loaded once at module import time; no hot reload.

Environment variables:
    DB_HOST / DB_PORT / DB_USER / DB_PASSWORD / DB_NAME
        Store connection parameters. The MYSQL_* spellings
        (MYSQL_HOST, MYSQL_USER, MYSQL_PASSWORD, MYSQL_DATABASE, MYSQL_PORT)
        are accepted as well.
    DATABASE_URL
        Full SQLAlchemy URL; when set it replaces the individual parts.
    PORT
        Listen port (default 8080).
"""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for a local MySQL instance.
    Attributes are grouped by concern.
    """

    # ── Database ──────────────────────────────────────────────────────────
    db_host: str = Field(
        default="localhost",
        validation_alias=AliasChoices("DB_HOST", "MYSQL_HOST"),
    )
    db_port: int = Field(
        default=3306, ge=1, le=65535,
        validation_alias=AliasChoices("DB_PORT", "MYSQL_PORT"),
    )
    db_user: str = Field(
        default="root",
        validation_alias=AliasChoices("DB_USER", "MYSQL_USER"),
    )
    db_password: str = Field(
        default="",
        validation_alias=AliasChoices("DB_PASSWORD", "MYSQL_PASSWORD"),
    )
    db_name: str = Field(
        default="characters",
        validation_alias=AliasChoices("DB_NAME", "MYSQL_DATABASE"),
    )

    # What: SQLAlchemy dialect+driver used to build the URL from the parts above
    # Format: <dialect>+<async driver>, e.g. mysql+aiomysql
    db_driver: str = Field(default="mysql+aiomysql")

    # What: Complete async SQLAlchemy URL; takes precedence over the parts
    database_url: Optional[str] = Field(
        default=None,
        description="Async SQLAlchemy connection URL (overrides DB_* parts)",
    )

    # What: Connection ceiling. The pool never opens more than this many
    # connections (no overflow); excess callers queue.
    db_pool_size: int = Field(default=10, ge=1, le=100)

    # What: Seconds a caller may wait for a free connection.
    # None waits indefinitely, i.e. the queue of waiting callers is unbounded.
    db_pool_timeout: Optional[float] = Field(default=None, gt=0)

    # What: Validates connections before use with a lightweight query
    db_pool_pre_ping: bool = Field(default=True)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def sqlalchemy_url(self) -> URL | str:
        """
        What: The URL handed to create_async_engine().
        How:  DATABASE_URL verbatim when set; otherwise URL.create() from the
              DB_* parts, which escapes special characters in the password.
        """
        if self.database_url:
            return self.database_url
        return URL.create(
            drivername=self.db_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }


settings = Settings()
