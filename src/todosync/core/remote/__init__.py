"""
Remote todo retrieval with retry and exponential backoff.

Example:
    >>> from todosync.core.remote import HttpTodoFetcher, RetryPolicy
    >>> fetcher = HttpTodoFetcher(retry=RetryPolicy(max_retries=5))
"""

from todosync.core.remote.fetcher import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    HttpTodoFetcher,
    TodoFetcher,
)
from todosync.core.remote.retry import RetryPolicy, is_transient_error, retry_async

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "HttpTodoFetcher",
    "TodoFetcher",
    "RetryPolicy",
    "is_transient_error",
    "retry_async",
]
