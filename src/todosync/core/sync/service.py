"""
Batch synchronization of todos from the remote API into the local store.

The orchestrator fans out fetch-then-save pipelines over a fixed pool of
asyncio workers pulling ids from a shared queue. Workers never touch the
progress counter themselves: each finished item is put on a completion
queue, and a single consumer task increments the counter and redraws the
progress bar, so updates are serialized without a lock.

One item's failure never stops its siblings. Failures are recorded in the
outcome and the remaining ids are still processed.

Example:
    >>> store = TodoStore(Path("todos.db"))
    >>> async with HttpTodoFetcher() as fetcher:
    ...     orchestrator = SyncOrchestrator(store, fetcher, TerminalProgressReporter())
    ...     outcome = await orchestrator.sync([1, 2, 3], ConcurrencyPolicy.parse("2"))
    >>> outcome.summary()
    '3/3 todos synced'
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from todosync.core.config.models import FetchConfig
from todosync.core.exceptions import ErrorKind, TodoSyncError
from todosync.core.progress import NullProgressReporter, ProgressReporter
from todosync.core.remote.fetcher import HttpTodoFetcher, TodoFetcher
from todosync.core.remote.retry import RetryPolicy
from todosync.core.sync.models import ConcurrencyPolicy, SyncFailure, SyncOutcome, SyncProgress
from todosync.core.todos.models import Todo, validate_positive_id

logger = logging.getLogger(__name__)


class TodoRepository(Protocol):
    """The part of the store the orchestrator writes to."""

    def upsert(self, todo: Todo) -> Todo:
        ...


@dataclass
class _ItemResult:
    """Completion event sent from a worker to the progress consumer."""

    todo_id: int
    failure: SyncFailure | None = None


class SyncOrchestrator:
    """
    Drives a batch sync under a concurrency policy.

    Collaborators are passed in explicitly: the store the todos are written
    to, the fetcher they are read from, and the reporter that shows progress.
    """

    def __init__(
        self,
        store: TodoRepository,
        fetcher: TodoFetcher,
        reporter: ProgressReporter | None = None,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.reporter = reporter or NullProgressReporter()

    async def sync(
        self,
        ids: Sequence[int],
        policy: ConcurrencyPolicy,
        *,
        cancel: asyncio.Event | None = None,
    ) -> SyncOutcome:
        """
        Fetch every id and upsert it into the store.

        Duplicate ids are processed independently (last writer wins). At most
        ``policy.degree(len(ids))`` items are in flight at any moment; they
        may complete in any order.

        Args:
            ids: Todo ids to sync
            policy: Concurrency policy
            cancel: Optional event; once set, no new ids are started while
                items already in flight are allowed to finish

        Returns:
            SyncOutcome with per-item failures and skipped ids

        Raises:
            TodoValidationError: If any id is not a positive integer (raised
                before any fetch or write)
        """
        ids = list(ids)
        started_at = datetime.now(timezone.utc)

        if not ids:
            logger.debug("Sync called with no ids, nothing to do")
            return SyncOutcome(started_at=started_at, completed_at=datetime.now(timezone.utc))

        for todo_id in ids:
            validate_positive_id(todo_id)

        total = len(ids)
        worker_count = min(policy.degree(total), total)
        logger.info(
            f"Syncing {total} todo(s) with {worker_count} worker(s) ({policy.describe()})"
        )

        pending: asyncio.Queue[int] = asyncio.Queue()
        for todo_id in ids:
            pending.put_nowait(todo_id)
        events: asyncio.Queue[_ItemResult | None] = asyncio.Queue()

        progress = SyncProgress(total=total)
        self.reporter.initialize(total)
        consumer = asyncio.create_task(self._consume(events, progress))

        workers = [
            asyncio.create_task(self._worker(pending, events, cancel))
            for _ in range(worker_count)
        ]
        try:
            await asyncio.gather(*workers)
        finally:
            await events.put(None)
            results = await consumer
            if not progress.done:
                self.reporter.finish()

        skipped: list[int] = []
        while not pending.empty():
            skipped.append(pending.get_nowait())

        failures = [result.failure for result in results if result.failure is not None]
        outcome = SyncOutcome(
            attempted=len(results),
            succeeded=len(results) - len(failures),
            failures=failures,
            skipped=skipped,
            cancelled=bool(skipped),
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )
        logger.info(f"Sync finished: {outcome.summary()}")
        return outcome

    async def _worker(
        self,
        pending: asyncio.Queue[int],
        events: asyncio.Queue[_ItemResult | None],
        cancel: asyncio.Event | None,
    ) -> None:
        while cancel is None or not cancel.is_set():
            try:
                todo_id = pending.get_nowait()
            except asyncio.QueueEmpty:
                return
            result = await self._sync_one(todo_id)
            await events.put(result)

    async def _sync_one(self, todo_id: int) -> _ItemResult:
        """Fetch one todo and save it, turning any error into a failure record."""
        try:
            todo = await self.fetcher.fetch_by_id(todo_id)
        except TodoSyncError as e:
            logger.warning(f"Todo {todo_id}: {e}")
            return _ItemResult(todo_id, SyncFailure(todo_id=todo_id, kind=e.kind, message=str(e)))
        except Exception as e:
            logger.exception(f"Unexpected error fetching todo {todo_id}")
            return _ItemResult(
                todo_id,
                SyncFailure(todo_id=todo_id, kind=ErrorKind.FETCH, message=f"Unexpected error: {e}"),
            )

        try:
            await asyncio.to_thread(self.store.upsert, todo)
        except TodoSyncError as e:
            logger.warning(f"Todo {todo_id}: {e}")
            return _ItemResult(todo_id, SyncFailure(todo_id=todo_id, kind=e.kind, message=str(e)))
        except Exception as e:
            logger.exception(f"Unexpected error saving todo {todo_id}")
            return _ItemResult(
                todo_id,
                SyncFailure(todo_id=todo_id, kind=ErrorKind.STORE, message=f"Unexpected error: {e}"),
            )

        logger.debug(f"Synced todo {todo_id}")
        return _ItemResult(todo_id)

    async def _consume(
        self,
        events: asyncio.Queue[_ItemResult | None],
        progress: SyncProgress,
    ) -> list[_ItemResult]:
        """Single owner of the progress counter: one increment and redraw per event."""
        results: list[_ItemResult] = []
        while True:
            event = await events.get()
            if event is None:
                return results
            results.append(event)
            progress.increment()
            self.reporter.update(progress.completed, progress.total)


def build_fetcher(config: FetchConfig) -> HttpTodoFetcher:
    """Create an HTTP fetcher from configuration."""
    return HttpTodoFetcher(
        config.base_url,
        timeout=config.timeout,
        retry=RetryPolicy(
            base_delay=config.base_delay,
            multiplier=config.multiplier,
            max_delay=config.max_delay,
            max_retries=config.max_retries,
        ),
    )


def run_sync(
    ids: Sequence[int],
    policy: ConcurrencyPolicy,
    *,
    store: TodoRepository,
    fetch_config: FetchConfig | None = None,
    fetcher: TodoFetcher | None = None,
    reporter: ProgressReporter | None = None,
) -> SyncOutcome:
    """
    Run a sync to completion from synchronous code.

    Builds an ``HttpTodoFetcher`` from ``fetch_config`` unless a fetcher is
    supplied. Where the platform allows it, SIGINT stops scheduling new ids
    and lets in-flight ones finish instead of aborting the run.
    """

    async def _run() -> SyncOutcome:
        cancel = asyncio.Event()
        loop = asyncio.get_running_loop()
        handler_installed = False
        try:
            loop.add_signal_handler(signal.SIGINT, cancel.set)
            handler_installed = True
        except (NotImplementedError, RuntimeError, ValueError):
            logger.debug("SIGINT handler not available, Ctrl+C will abort the sync")

        try:
            if fetcher is not None:
                orchestrator = SyncOrchestrator(store, fetcher, reporter)
                return await orchestrator.sync(ids, policy, cancel=cancel)

            async with build_fetcher(fetch_config or FetchConfig()) as http_fetcher:
                orchestrator = SyncOrchestrator(store, http_fetcher, reporter)
                return await orchestrator.sync(ids, policy, cancel=cancel)
        finally:
            if handler_installed:
                loop.remove_signal_handler(signal.SIGINT)

    return asyncio.run(_run())


__all__ = [
    "TodoRepository",
    "SyncOrchestrator",
    "build_fetcher",
    "run_sync",
]
