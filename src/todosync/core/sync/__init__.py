"""
Concurrent synchronization of remote todos into the local store.

Example:
    >>> from todosync.core.sync import ConcurrencyPolicy, SyncOrchestrator
    >>> policy = ConcurrencyPolicy.parse("4")
    >>> orchestrator = SyncOrchestrator(store, fetcher, reporter)
    >>> outcome = await orchestrator.sync([1, 2, 3], policy)
    >>> if outcome.failures:
    ...     print(f"{outcome.failed} todos failed")
"""

from todosync.core.sync.models import (
    ConcurrencyKind,
    ConcurrencyPolicy,
    SyncFailure,
    SyncOutcome,
    SyncProgress,
)
from todosync.core.sync.service import SyncOrchestrator, run_sync

__all__ = [
    "SyncOrchestrator",
    "run_sync",
    "ConcurrencyKind",
    "ConcurrencyPolicy",
    "SyncFailure",
    "SyncOutcome",
    "SyncProgress",
]
