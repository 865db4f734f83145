"""Tests for the CLI and the shared workflow wiring."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from devlog.adapters.memory_store import InMemoryStore
from devlog.adapters.sqlite_store import SqliteStore
from devlog.cli import main
from devlog.config import Config
from devlog.core.errors import NotFoundError, ValidationError
from devlog.workflows import Devlog, open_devlog


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.setattr("devlog.config.CONFIG_FILE", tmp_path / "missing.conf")
    monkeypatch.setenv("DEVLOG_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("DEVLOG_DB_PATH", raising=False)
    return tmp_path / "data"


@pytest.fixture
def runner(env):
    return CliRunner()


@pytest.fixture
def with_sprint(runner):
    result = runner.invoke(
        main, ["sprint", "new", "--start", "2024-01-01", "--days", "14", "--name", "Launch"]
    )
    assert result.exit_code == 0, result.output
    return result


class TestOpenDevlog:
    def test_seeds_configured_categories(self, tmp_path):
        devlog = open_devlog(Config(data_dir=str(tmp_path), default_categories=["Bugs"]))
        assert [c.name for c in devlog.categories.list_categories()] == ["Bugs"]
        assert (tmp_path / "daily-updates.sqlite").exists()
        assert (tmp_path / "reports").is_dir()
        devlog.close()


class TestResolve:
    @pytest.fixture
    def devlog(self):
        devlog = Devlog.from_store(InMemoryStore())
        devlog.categories.create_category("Tasks")
        devlog.categories.create_category("Meeting")
        return devlog

    def test_no_sprints(self, devlog):
        with pytest.raises(NotFoundError):
            devlog.resolve_sprint(None)

    def test_by_code_number_and_id(self, devlog):
        sprint = devlog.sprints.create_sprint("2024-01-01")
        assert devlog.resolve_sprint("SPRINT-1").id == sprint.id
        assert devlog.resolve_sprint("1").id == sprint.id
        assert devlog.resolve_sprint(sprint.id).id == sprint.id
        with pytest.raises(NotFoundError):
            devlog.resolve_sprint("sprint-9")

    def test_category_by_name_or_default(self, devlog):
        categories = devlog.categories.list_categories()
        meeting = next(c for c in categories if c.name == "Meeting")
        assert devlog.resolve_category("meeting") == meeting.id
        assert devlog.resolve_category(None) == categories[0].id
        with pytest.raises(NotFoundError):
            devlog.resolve_category("Nope")

    def test_category_required(self):
        with pytest.raises(ValidationError):
            Devlog.from_store(InMemoryStore()).resolve_category(None)


class TestCli:
    def test_default_categories_listed(self, runner):
        result = runner.invoke(main, ["category", "list"])
        assert result.exit_code == 0
        assert "PR-Reviews" in result.output
        assert "Meeting" in result.output

    def test_create_sprint(self, with_sprint):
        assert "Created sprint-1 - Launch (2024-01-01 to 2024-01-14)" in with_sprint.output

    def test_bad_duration(self, runner):
        result = runner.invoke(main, ["sprint", "new", "--start", "2024-01-01", "--days", "10"])
        assert result.exit_code == 1
        assert "Error: duration_days must be 7 or 14" in result.output

    def test_add_and_report(self, runner, with_sprint, env):
        result = runner.invoke(
            main,
            ["add", "Fix login", "--details", "null check", "--category", "tasks",
             "--date", "2024-01-02", "--sprint", "1"],
        )
        assert result.exit_code == 0, result.output
        assert "Added to sprint-1 - Launch on 2024-01-02" in result.output

        runner.invoke(main, ["add", "Standup", "-c", "Meeting", "-d", "2024-01-02", "--sprint", "1"])

        result = runner.invoke(main, ["report", "--sprint", "sprint-1", "-c", "Tasks", "--print"])
        assert result.exit_code == 0, result.output
        assert "Included items: 1" in result.output
        assert "1. Fix login - null check" in result.output
        assert "Standup" not in result.output
        reports = list((env / "reports").glob("report-launch-*.md"))
        assert len(reports) == 1

    def test_timeline_json(self, runner, with_sprint):
        runner.invoke(main, ["add", "Fix login", "-c", "Tasks", "-d", "2024-01-02", "--sprint", "1"])
        result = runner.invoke(main, ["timeline", "--sprint", "1", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data[0]["date"] == "2024-01-02"
        assert data[0]["categories"][0]["items"] == ["Fix login"]

    def test_day_view(self, runner, with_sprint):
        runner.invoke(main, ["add", "Fix login", "-c", "Tasks", "-d", "2024-01-02", "--sprint", "1"])
        result = runner.invoke(main, ["day", "2024-01-02", "--sprint", "1"])
        assert result.output == "2024-01-02\n\nTasks\n- Fix login\n"

        result = runner.invoke(main, ["day", "2024-01-05", "--sprint", "1"])
        assert "No entries for this date." in result.output

    def test_summary(self, runner, with_sprint):
        runner.invoke(main, ["add", "One", "-d", "2024-01-02", "--sprint", "1"])
        runner.invoke(main, ["add", "Two", "-d", "2024-01-02", "--sprint", "1"])
        result = runner.invoke(main, ["summary", "--sprint", "1"])
        assert "Total items: 2" in result.output
        assert "- 2024-01-02: 2 items" in result.output

    def test_only_sprint_cannot_be_deleted(self, runner, with_sprint):
        # A lone sprint is always the active one
        result = runner.invoke(main, ["sprint", "delete", "1", "--yes"])
        assert result.exit_code == 1
        assert "cannot delete the active sprint" in result.output

    def test_category_delete_requires_replacement(self, runner):
        result = runner.invoke(main, ["category", "delete", "Tasks"])
        assert result.exit_code == 1
        assert "replacement category is required" in result.output

        result = runner.invoke(main, ["category", "delete", "Tasks", "-r", "Meeting"])
        assert result.exit_code == 0
        assert "Tasks" not in runner.invoke(main, ["category", "list"]).output

    def test_bad_report_date(self, runner, with_sprint):
        result = runner.invoke(main, ["report", "--from", "yesterday"])
        assert result.exit_code == 1
        assert "from_date must be in YYYY-MM-DD format" in result.output

    @pytest.mark.parametrize("args", [["category", "list"], ["sprint", "delete", "9", "--yes"]])
    def test_store_closed_after_command(self, runner, monkeypatch, args):
        closed = []
        original = SqliteStore.close

        def tracking_close(store):
            closed.append(store)
            original(store)

        monkeypatch.setattr(SqliteStore, "close", tracking_close)
        runner.invoke(main, args)
        assert len(closed) == 1

    def test_path(self, runner, env):
        result = runner.invoke(main, ["path"])
        assert Path(result.output.strip()) == env / "daily-updates.sqlite"
