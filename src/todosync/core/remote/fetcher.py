"""
Remote todo fetcher.

Retrieves single todos from a JSONPlaceholder-compatible HTTP API and decodes
them into ``Todo`` models.

API Endpoints:
- Get Todo: GET {base_url}/todos/{id}

Response Format:
{
  "userId": 1,
  "id": 1,
  "title": "delectus aut autem",
  "completed": false
}

Example:
    >>> async with HttpTodoFetcher() as fetcher:
    ...     todo = await fetcher.fetch_by_id(1)
    >>> todo.user_id
    1
"""

import asyncio
import logging
from types import TracebackType
from typing import Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from todosync.core.exceptions import FetchError
from todosync.core.remote.retry import RetryPolicy, SleepFunc, retry_async
from todosync.core.todos.models import Todo, describe_validation_error, validate_positive_id

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://jsonplaceholder.typicode.com"
DEFAULT_TIMEOUT = 30.0


@runtime_checkable
class TodoFetcher(Protocol):
    """
    Protocol for remote todo sources.

    Implementations retrieve one todo by id and raise ``FetchError`` for
    every failure.
    """

    async def fetch_by_id(self, todo_id: int) -> Todo:
        """
        Fetch a single todo.

        Raises:
            FetchError: If the todo cannot be retrieved or decoded
        """
        ...


class HttpTodoFetcher:
    """
    Todo fetcher for the remote HTTP API.

    Only 2xx responses count as success. Server errors and transport failures
    are retried according to the retry policy; client errors and payloads that
    don't validate as a Todo fail immediately. All failures are wrapped in
    ``FetchError``.

    The fetcher owns its ``httpx.AsyncClient`` unless one is passed in, in
    which case the caller is responsible for closing it.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry: RetryPolicy | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            base_url: API root, without the ``/todos`` path
            client: Optional pre-built client (not closed by the fetcher)
            timeout: Per-request timeout in seconds for the owned client
            retry: Backoff policy for transient failures
            sleep: Coroutine used to wait between retries
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry = retry or RetryPolicy()
        self._sleep = sleep
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "HttpTodoFetcher":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if the fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    def url_for(self, todo_id: int) -> str:
        return f"{self.base_url}/todos/{todo_id}"

    async def _get(self, url: str) -> httpx.Response:
        response = await self._client.get(url)
        response.raise_for_status()
        return response

    async def fetch_by_id(self, todo_id: int) -> Todo:
        """
        Fetch a todo from the remote API.

        Args:
            todo_id: Id of the todo (positive integer)

        Returns:
            The decoded Todo

        Raises:
            TodoValidationError: If todo_id is not a positive integer
            FetchError: If the request fails after retries, returns a
                non-2xx status, or the payload is not a valid todo
        """
        validate_positive_id(todo_id)
        url = self.url_for(todo_id)

        try:
            response = await retry_async(
                lambda: self._get(url),
                self.retry,
                description=f"GET {url}",
                sleep=self._sleep,
            )
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise FetchError(todo_id, f"HTTP {status_code}", url=url, status_code=status_code) from e
        except httpx.TimeoutException as e:
            raise FetchError(todo_id, f"Request timed out: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise FetchError(todo_id, f"Network error: {e}", url=url) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(todo_id, f"Invalid JSON in response: {e}", url=url) from e

        try:
            todo = Todo.model_validate(payload)
        except ValidationError as e:
            raise FetchError(
                todo_id, f"Invalid todo payload: {describe_validation_error(e)}", url=url
            ) from e

        logger.debug("Fetched todo %d from %s", todo_id, url)
        return todo


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "TodoFetcher",
    "HttpTodoFetcher",
]
