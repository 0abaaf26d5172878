"""
Configuration data models for todosync.

These models define the structure of .todosync.json and
~/.config/todosync/config.json files, with validation via Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from todosync.core.exceptions import TodoValidationError
from todosync.core.remote.fetcher import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


class DatabaseConfig(BaseModel):
    """Location of the local sqlite database."""

    path: str = Field(
        default="todos.db",
        min_length=1,
        description="Database file; relative paths resolve against the working directory",
    )


class FetchConfig(BaseModel):
    """
    Remote API settings and retry backoff.

    Transient failures are retried with delays of base_delay * multiplier**n,
    capped at max_delay.
    """

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=1,
        description="Base URL of the todo API",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Per-request timeout in seconds",
    )
    base_delay: float = Field(
        default=0.1,
        gt=0,
        description="Delay before the first retry in seconds",
    )
    multiplier: float = Field(
        default=2.0,
        ge=1.0,
        description="Factor applied to the delay after each retry",
    )
    max_delay: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound for any single retry delay in seconds",
    )
    max_retries: Optional[int] = Field(
        default=None,
        ge=0,
        description="Retries per request; None keeps retrying transient failures",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class SyncConfig(BaseModel):
    """Defaults for the sync command."""

    default_concurrency: str = Field(
        default="1",
        description="Concurrency token used when --concurrency is not given",
    )

    @field_validator("default_concurrency")
    @classmethod
    def validate_concurrency(cls, v: str) -> str:
        """Reject tokens the --concurrency option would reject."""
        from todosync.core.sync.models import ConcurrencyPolicy

        try:
            ConcurrencyPolicy.parse(v)
        except TodoValidationError as e:
            raise ValueError(e.message) from e
        return v


class TodoSyncConfig(BaseModel):
    """
    Complete todosync configuration.

    Merged from defaults, user config, project config and environment
    variables, in that order of increasing precedence.

    Example:
        >>> config = TodoSyncConfig()
        >>> config.database.path
        'todos.db'
        >>> config.fetch.max_delay
        5.0
    """

    model_config = ConfigDict(extra="ignore")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
