"""
Data models for the sync orchestrator.

Defines the concurrency policy parsed from ``--concurrency`` and the
Pydantic models describing the outcome of one sync run.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from todosync.core.exceptions import ErrorKind, TodoValidationError

UNBOUNDED_TOKEN = "unbounded"

_POSITIVE_INT = re.compile(r"[0-9]+")


class ConcurrencyKind(str, Enum):
    """How many items a sync may have in flight at once."""

    SEQUENTIAL = "sequential"
    BOUNDED = "bounded"
    UNBOUNDED = "unbounded"


class ConcurrencyPolicy(BaseModel):
    """
    Concurrency policy for one sync invocation.

    Use the constructors rather than building instances directly:

    Example:
        >>> ConcurrencyPolicy.parse("1").kind
        <ConcurrencyKind.SEQUENTIAL: 'sequential'>
        >>> ConcurrencyPolicy.parse("4").degree(10)
        4
        >>> ConcurrencyPolicy.parse("unbounded").degree(10)
        10
    """

    model_config = ConfigDict(frozen=True)

    kind: ConcurrencyKind
    limit: int | None = Field(default=None, ge=1)

    @classmethod
    def sequential(cls) -> ConcurrencyPolicy:
        return cls(kind=ConcurrencyKind.SEQUENTIAL, limit=1)

    @classmethod
    def bounded(cls, limit: int) -> ConcurrencyPolicy:
        """Policy allowing ``limit`` items in flight; a limit of 1 is sequential."""
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise TodoValidationError(
                f"Concurrency must be a positive integer (got {limit!r})", field="concurrency"
            )
        if limit == 1:
            return cls.sequential()
        return cls(kind=ConcurrencyKind.BOUNDED, limit=limit)

    @classmethod
    def unbounded(cls) -> ConcurrencyPolicy:
        return cls(kind=ConcurrencyKind.UNBOUNDED, limit=None)

    @classmethod
    def parse(cls, token: object) -> ConcurrencyPolicy:
        """
        Parse a concurrency token.

        Accepts the literal ``"unbounded"`` or a string of decimal digits
        denoting a positive integer. Zero, negative numbers, decimals,
        empty or whitespace strings, other words and non-string values are
        rejected.

        Raises:
            TodoValidationError: If the token is not valid
        """
        if not isinstance(token, str):
            raise TodoValidationError(
                f"Concurrency must be a string (got {type(token).__name__})",
                field="concurrency",
            )
        if token == UNBOUNDED_TOKEN:
            return cls.unbounded()
        if not _POSITIVE_INT.fullmatch(token) or int(token) < 1:
            raise TodoValidationError(
                f"Invalid concurrency '{token}': expected a positive integer or "
                f"'{UNBOUNDED_TOKEN}'",
                field="concurrency",
            )
        return cls.bounded(int(token))

    def degree(self, item_count: int) -> int:
        """Number of workers to run for ``item_count`` items (at least 1)."""
        if self.kind is ConcurrencyKind.UNBOUNDED:
            return max(1, item_count)
        return self.limit or 1

    def describe(self) -> str:
        """Human-readable mode: sequential, parallel (n) or unbounded."""
        if self.kind is ConcurrencyKind.SEQUENTIAL:
            return "sequential"
        if self.kind is ConcurrencyKind.UNBOUNDED:
            return UNBOUNDED_TOKEN
        return f"parallel ({self.limit})"


class SyncProgress(BaseModel):
    """Completion counter owned by the orchestrator's progress consumer."""

    model_config = ConfigDict(frozen=False)

    completed: int = Field(default=0, ge=0)
    total: int = Field(gt=0)

    def increment(self) -> int:
        """Count one finished item and return the new value."""
        self.completed += 1
        return self.completed

    @property
    def done(self) -> bool:
        return self.completed >= self.total


class SyncFailure(BaseModel):
    """One todo that could not be synced."""

    todo_id: int = Field(description="Id of the todo that failed")
    kind: ErrorKind = Field(description="Which kind of error stopped it")
    message: str = Field(description="Human-readable failure reason")


class SyncOutcome(BaseModel):
    """
    Result of one sync invocation.

    ``attempted`` counts ids that were started; ids never started because the
    run was cancelled are listed in ``skipped``.
    """

    attempted: int = Field(default=0, ge=0, description="Ids that were processed")
    succeeded: int = Field(default=0, ge=0, description="Ids fetched and saved")
    failures: list[SyncFailure] = Field(default_factory=list)
    skipped: list[int] = Field(
        default_factory=list,
        description="Ids not started because the run was cancelled",
    )
    cancelled: bool = Field(default=False)

    started_at: datetime | None = Field(default=None)
    completed_at: datetime | None = Field(default=None)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def success(self) -> bool:
        return not self.failures and not self.cancelled

    @property
    def duration_seconds(self) -> float | None:
        """Calculate run duration in seconds."""
        if self.started_at and self.completed_at:
            delta = self.completed_at - self.started_at
            return delta.total_seconds()
        return None

    def summary(self) -> str:
        """Generate a human-readable summary of the outcome."""
        if self.attempted == 0 and not self.skipped:
            return "nothing to sync"

        parts = [f"{self.succeeded}/{self.attempted} todos synced"]

        if self.failures:
            parts.append(f"{self.failed} failed")

        if self.cancelled:
            parts.append(f"cancelled with {len(self.skipped)} not started")

        return ", ".join(parts)


__all__ = [
    "UNBOUNDED_TOKEN",
    "ConcurrencyKind",
    "ConcurrencyPolicy",
    "SyncProgress",
    "SyncFailure",
    "SyncOutcome",
]
