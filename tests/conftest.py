"""
Pytest configuration and shared fixtures.

Provides fixtures for temporary databases, sample todos, an isolated
configuration environment and a recording sleep for retry tests.
"""

from pathlib import Path

import pytest

from todosync.core.config import clear_cache
from todosync.core.todos import Todo, TodoStore

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """
    Keep every test away from the real user config and environment.

    Points XDG_CONFIG_HOME at an empty directory, removes TODOSYNC_* variables
    and resets the config cache before and after the test.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in (
        "TODOSYNC_DB_PATH",
        "TODOSYNC_API_URL",
        "TODOSYNC_TIMEOUT",
        "TODOSYNC_MAX_RETRIES",
        "TODOSYNC_CONCURRENCY",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Provide an empty project directory and make it the working directory."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def user_config_dir(tmp_path):
    """Provide the XDG_CONFIG_HOME/todosync directory used by isolated_config."""
    config_dir = tmp_path / "xdg" / "todosync"
    config_dir.mkdir(parents=True)
    return config_dir


# ==============================================================================
# Store Fixtures
# ==============================================================================


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Path to a database file that does not exist yet."""
    return tmp_path / "data" / "todos.db"


@pytest.fixture
def store(db_path) -> TodoStore:
    """An empty store with the schema in place."""
    store = TodoStore(db_path)
    store.clear()
    return store


@pytest.fixture
def seeded_store(db_path) -> TodoStore:
    """A store holding the five sample todos."""
    store = TodoStore(db_path)
    store.initialize()
    return store


# ==============================================================================
# Sample Data Fixtures
# ==============================================================================


@pytest.fixture
def sample_todo() -> Todo:
    """A todo shaped like the remote API's todo 1."""
    return Todo(user_id=1, id=1, title="delectus aut autem", completed=False)


@pytest.fixture
def sample_payload() -> dict:
    """Raw JSON payload for todo 1 as the remote API returns it."""
    return {"userId": 1, "id": 1, "title": "delectus aut autem", "completed": False}


# ==============================================================================
# Retry Helpers
# ==============================================================================


class RecordingSleep:
    """Async sleep replacement that records requested delays and returns at once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()
