"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from rednext import __version__
from rednext.cli import cli


@pytest.fixture
def run(tmp_path):
    """Invoke the CLI against a fresh sqlite data directory."""
    runner = CliRunner()
    data_dir = tmp_path / "data"

    def _run(*args, input=None):
        return runner.invoke(
            cli,
            ["--backend", "sqlite", "--data-dir", str(data_dir), *args],
            input=input,
        )

    return _run


@pytest.fixture
def todo(run):
    result = run("new", "todo", "title:Text", "priority:number", "urgent:Boolean", "due:datetime")
    assert result.exit_code == 0, result.output
    return run


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_empty(run):
    result = run("list")

    assert result.exit_code == 0
    assert result.output == ""


def test_new_and_list(todo):
    todo("new", "books", "name:Text")

    result = todo("list")

    assert result.exit_code == 0
    assert result.output.splitlines() == ["1. books", "2. todo"]


def test_new_bad_field_spec(run):
    result = run("new", "todo", "title")

    assert result.exit_code == 2
    assert "FIELD:TYPE" in result.output


def test_new_unknown_type(run):
    result = run("new", "todo", "title:Float")

    assert result.exit_code == 2
    assert "unknown type" in result.output


def test_new_invalid_schema(run):
    result = run("new", "todo", "id:Number")

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "reserved" in result.output


def test_new_existing(todo):
    result = todo("new", "todo", "title:Text")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_schema(todo):
    result = todo("schema", "todo")

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "title: Text",
        "priority: Number",
        "urgent: Boolean",
        "due: DateTime",
    ]


def test_add_and_items(todo):
    result = todo("add", "todo", "title=buy milk", "priority=2", "urgent=no", "due=2024-05-01")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "Added item 1"

    result = todo("items", "todo")

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "1. title: buy milk, priority: 2, urgent: false, due: 2024-05-01T00:00:00"
    ]


def test_add_invalid_values(todo):
    result = todo("add", "todo", "title=x", "priority=high", "urgent=yes")

    assert result.exit_code == 1
    assert "Invalid Number value" in result.output
    assert "Field 'due' is required" in result.output
    assert todo("items", "todo").output == ""


def test_add_bad_assignment(todo):
    result = todo("add", "todo", "title")

    assert result.exit_code == 2


def test_done_undone_and_filters(todo):
    todo("add", "todo", "title=a", "priority=1", "urgent=no", "due=2024-05-01")
    todo("add", "todo", "title=b", "priority=2", "urgent=yes", "due=2024-05-02")

    result = todo("done", "todo", "1", "--at", "2024-06-01T10:00:00")
    assert result.exit_code == 0, result.output

    done = todo("items", "todo", "--done").output.splitlines()
    assert len(done) == 1
    assert done[0].startswith("1. title: a")
    assert done[0].endswith("(done 2024-06-01T10:00:00)")
    assert todo("items", "todo", "--undone").output.splitlines()[0].startswith("2. ")

    assert todo("undone", "todo", "1").exit_code == 0
    assert todo("items", "todo", "--done").output == ""


def test_done_defaults_to_now(todo):
    todo("add", "todo", "title=a", "priority=1", "urgent=no", "due=2024-05-01")

    assert todo("done", "todo", "1").exit_code == 0
    assert "(done " in todo("items", "todo", "--done").output


def test_done_missing_item(todo):
    result = todo("done", "todo", "42")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_undone_missing_item(todo):
    result = todo("undone", "todo", "42")

    assert result.exit_code == 1


def test_remove(todo):
    todo("add", "todo", "title=a", "priority=1", "urgent=no", "due=2024-05-01")

    result = todo("remove", "todo", "1")

    assert result.exit_code == 0
    assert todo("items", "todo").output == ""
    assert todo("remove", "todo", "1").exit_code == 0


def test_random(todo):
    result = todo("random", "todo")
    assert result.exit_code == 0
    assert result.output.strip() == "No pending items"

    todo("add", "todo", "title=only", "priority=1", "urgent=no", "due=2024-05-01")

    assert todo("random", "todo").output.startswith("1. title: only")


def test_find(todo):
    todo("add", "todo", "title=buy milk", "priority=1", "urgent=no", "due=2024-05-01")
    todo("add", "todo", "title=walk", "priority=2", "urgent=no", "due=2024-05-01")

    result = todo("find", "todo", "MILK")

    assert result.exit_code == 0
    assert [line.split(".")[0] for line in result.output.splitlines()] == ["1"]


def test_missing_collection(run):
    result = run("items", "missing")

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "not found" in result.output


def test_delete_confirmed(todo):
    result = todo("delete", "todo", input="y\n")

    assert result.exit_code == 0
    assert "Deleted collection 'todo'" in result.output
    assert todo("list").output == ""


def test_delete_declined(todo):
    result = todo("delete", "todo", input="n\n")

    assert result.exit_code == 1
    assert "Aborted" in result.output
    assert todo("list").output.strip() == "1. todo"


def test_delete_yes(todo):
    assert todo("delete", "todo", "--yes").exit_code == 0


def test_delete_missing(run):
    result = run("delete", "missing", "--yes")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_http_backend_requires_url(monkeypatch):
    monkeypatch.delenv("REDNEXT_REMOTE_URL", raising=False)

    result = CliRunner().invoke(cli, ["--backend", "http", "list"])

    assert result.exit_code == 2
    assert "remote URL" in result.output


def test_http_backend(monkeypatch, http_catalog):
    monkeypatch.setattr("rednext.cli.open_catalog", lambda settings: http_catalog)
    runner = CliRunner()
    base = ["--backend", "http", "--url", "http://testserver"]

    assert runner.invoke(cli, [*base, "new", "todo", "txt:Text", "n:Number"]).exit_code == 0
    assert runner.invoke(cli, [*base, "add", "todo", "txt=buy milk", "n=2"]).exit_code == 0

    result = runner.invoke(cli, [*base, "items", "todo"])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["1. txt: buy milk, n: 2"]
