"""
Tests for the todosync CLI.

Tests cover:
- init, get, list, create and clear against a temporary database
- sync with a mocked remote API
- Validation errors and exit codes
- Global options and configuration
"""

from __future__ import annotations

import json

import httpx
import pytest
from typer.testing import CliRunner

from todosync import __version__
from todosync.cli import app
from todosync.cli.errors import ExitCode
from todosync.cli.todos import parse_completed
from todosync.core.exceptions import TodoValidationError
from todosync.core.remote import HttpTodoFetcher
from todosync.core.todos import Todo, TodoStore

runner = CliRunner()


@pytest.fixture
def cli_db(project_dir):
    """Database path inside the temporary project directory."""
    return project_dir / "cli.db"


def invoke(cli_db, *args: str):
    return runner.invoke(app, ["--db", str(cli_db), *args])


@pytest.fixture
def mock_api(monkeypatch):
    """
    Route sync requests to an in-memory API.

    Ids listed in ``missing`` answer 404; every other id returns a todo.
    """
    state = {"missing": set(), "requested": []}

    def handler(request: httpx.Request) -> httpx.Response:
        todo_id = int(request.url.path.rsplit("/", 1)[-1])
        state["requested"].append(todo_id)
        if todo_id in state["missing"]:
            return httpx.Response(404)
        return httpx.Response(
            200,
            json={"userId": 3, "id": todo_id, "title": f"remote {todo_id}", "completed": False},
        )

    def build_fetcher(config):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpTodoFetcher(config.base_url, client=client)

    monkeypatch.setattr("todosync.core.sync.service.build_fetcher", build_fetcher)
    return state


# ==============================================================================
# Global options
# ==============================================================================


class TestGlobalOptions:
    """Test suite for root callback options."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"todosync version {__version__}" in result.output

    def test_db_path_from_environment(self, project_dir, monkeypatch) -> None:
        env_db = project_dir / "env.db"
        monkeypatch.setenv("TODOSYNC_DB_PATH", str(env_db))

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert env_db.exists()

    def test_invalid_config_exits_with_user_error(self, project_dir) -> None:
        (project_dir / ".todosync.json").write_text(
            json.dumps({"sync": {"default_concurrency": "zero"}})
        )

        result = runner.invoke(app, ["list"])

        assert result.exit_code == ExitCode.USER_ERROR
        assert "Invalid configuration" in result.output


# ==============================================================================
# Local commands
# ==============================================================================


class TestInit:
    """Test suite for the init command."""

    def test_init_seeds_database(self, cli_db) -> None:
        result = invoke(cli_db, "init")

        assert result.exit_code == 0
        assert "Database initialized successfully!" in result.output
        assert TodoStore(cli_db).count() == 5

    def test_init_twice_does_not_duplicate(self, cli_db) -> None:
        invoke(cli_db, "init")
        result = invoke(cli_db, "init")

        assert result.exit_code == 0
        assert TodoStore(cli_db).count() == 5


class TestGet:
    """Test suite for the get command."""

    def test_get_existing(self, cli_db) -> None:
        invoke(cli_db, "init")

        result = invoke(cli_db, "get", "1")

        assert result.exit_code == 0
        assert "From Local Database:" in result.output
        assert '"id": 1' in result.output
        assert "Learn Python" in result.output

    def test_get_verbose_shows_timestamps(self, cli_db) -> None:
        invoke(cli_db, "init")

        result = invoke(cli_db, "get", "2", "--verbose")

        assert result.exit_code == 0
        assert "Created:" in result.output
        assert "Updated:" in result.output

    def test_get_missing(self, cli_db) -> None:
        invoke(cli_db, "init")

        result = invoke(cli_db, "get", "99")

        assert result.exit_code == 0
        assert "Todo 99 not found in local database" in result.output


class TestList:
    """Test suite for the list command."""

    def test_list_all(self, cli_db) -> None:
        invoke(cli_db, "init")

        result = invoke(cli_db, "list")

        assert result.exit_code == 0
        assert "All Todos from Local Database:" in result.output
        assert result.output.count("---") == 5
        assert "Write documentation" in result.output

    def test_list_empty(self, cli_db) -> None:
        result = invoke(cli_db, "list")

        assert result.exit_code == 0
        assert "No todos in local database" in result.output


class TestCreate:
    """Test suite for the create command."""

    def test_create(self, cli_db) -> None:
        result = invoke(cli_db, "create", "1", "Buy milk")

        assert result.exit_code == 0
        assert "Created new todo:" in result.output
        assert '"title": "Buy milk"' in result.output
        assert '"completed": "pending"' in result.output
        assert [t.title for t in TodoStore(cli_db).list_all()] == ["Buy milk"]

    def test_create_completed(self, cli_db) -> None:
        result = invoke(cli_db, "create", "2", "Ship it", "completed")

        assert result.exit_code == 0
        assert TodoStore(cli_db).list_all()[0].completed is True

    def test_create_title_with_brackets(self, cli_db) -> None:
        result = invoke(cli_db, "create", "1", "[urgent] call back")

        assert result.exit_code == 0
        assert "[urgent] call back" in result.output

    def test_title_too_long(self, cli_db) -> None:
        result = invoke(cli_db, "create", "1", "x" * 256)

        assert result.exit_code == ExitCode.USER_ERROR
        assert "Error:" in result.output
        assert TodoStore(cli_db).count() == 0

    def test_invalid_user_id(self, cli_db) -> None:
        result = invoke(cli_db, "create", "0", "Title")

        assert result.exit_code == ExitCode.USER_ERROR

    def test_invalid_completed_word(self, cli_db) -> None:
        result = invoke(cli_db, "create", "1", "Title", "maybe")

        assert result.exit_code == ExitCode.USER_ERROR


class TestParseCompleted:
    """Test suite for the COMPLETED argument parser."""

    @pytest.mark.parametrize("word", ["true", "TRUE", "completed", "yes", "1"])
    def test_true_words(self, word) -> None:
        assert parse_completed(word) is True

    @pytest.mark.parametrize("word", [None, "false", "pending", "no", "0"])
    def test_false_words(self, word) -> None:
        assert parse_completed(word) is False

    def test_unknown_word(self) -> None:
        with pytest.raises(TodoValidationError):
            parse_completed("later")


class TestClear:
    """Test suite for the clear command."""

    def test_clear(self, cli_db) -> None:
        invoke(cli_db, "init")

        result = invoke(cli_db, "clear")

        assert result.exit_code == 0
        assert "Cleared all todos (5 removed)" in result.output
        assert TodoStore(cli_db).count() == 0


# ==============================================================================
# Sync
# ==============================================================================


class TestSync:
    """Test suite for the sync command."""

    def test_sync_sequential(self, cli_db, mock_api) -> None:
        result = invoke(cli_db, "sync", "1", "2", "3")

        assert result.exit_code == 0
        assert "Syncing 3 todo(s) from API (sequential)" in result.output
        assert "3/3 (100%)" in result.output
        assert "Successfully synced 3 todo(s) to local database!" in result.output
        assert mock_api["requested"] == [1, 2, 3]
        assert TodoStore(cli_db).get_by_id(2) == Todo(user_id=3, id=2, title="remote 2")

    def test_sync_parallel(self, cli_db, mock_api) -> None:
        result = invoke(cli_db, "sync", "1", "2", "3", "4", "--concurrency", "2")

        assert result.exit_code == 0
        assert "(parallel (2))" in result.output
        assert sorted(mock_api["requested"]) == [1, 2, 3, 4]

    def test_sync_unbounded_short_option(self, cli_db, mock_api) -> None:
        result = invoke(cli_db, "sync", "5", "6", "-c", "unbounded")

        assert result.exit_code == 0
        assert "(unbounded)" in result.output

    def test_sync_updates_existing_todo(self, cli_db, mock_api) -> None:
        invoke(cli_db, "init")

        result = invoke(cli_db, "sync", "1")

        assert result.exit_code == 0
        store = TodoStore(cli_db)
        assert store.count() == 5
        assert store.get_by_id(1).title == "remote 1"

    def test_failed_item_exits_with_error(self, cli_db, mock_api) -> None:
        mock_api["missing"].add(404)

        result = invoke(cli_db, "sync", "1", "404", "2", "-c", "3")

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "Successfully synced 2 todo(s)" in result.output
        assert "Failed (1)" in result.output
        assert "HTTP 404" in result.output
        assert TodoStore(cli_db).count() == 2

    @pytest.mark.parametrize("token", ["0", "abc", "1.5", "-1", "none"])
    def test_invalid_concurrency_processes_nothing(self, cli_db, mock_api, token) -> None:
        result = invoke(cli_db, "sync", "1", "2", "--concurrency", token)

        assert result.exit_code == ExitCode.USER_ERROR
        assert mock_api["requested"] == []

    def test_invalid_id_processes_nothing(self, cli_db, mock_api) -> None:
        result = invoke(cli_db, "sync", "1", "0")

        assert result.exit_code == ExitCode.USER_ERROR
        assert mock_api["requested"] == []

    def test_no_ids(self, cli_db, mock_api) -> None:
        result = invoke(cli_db, "sync")

        assert result.exit_code == 0
        assert "Please provide at least one todo ID to sync" in result.output

    def test_default_concurrency_from_environment(self, cli_db, mock_api, monkeypatch) -> None:
        monkeypatch.setenv("TODOSYNC_CONCURRENCY", "unbounded")

        result = invoke(cli_db, "sync", "1", "2")

        assert result.exit_code == 0
        assert "(unbounded)" in result.output
