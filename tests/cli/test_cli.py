"""Unit tests for CLI commands.

Tests CLI behavior using Click's CliRunner against daily files under tmp_path.
Daily files are dated 2020 so they belong to a past month under the real clock.
Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from seclog import __version__
from seclog.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def config_path(tmp_path: Path, log_root: Path) -> Path:
    """Write a config file pointing at the temp log root."""
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "storage": {"log_root": str(log_root)},
                "logging": {"log_dir": str(tmp_path / "system")},
            }
        )
    )
    return path


@pytest.fixture
def old_logs(write_daily, make_line) -> None:
    write_daily(
        "2020-01-15",
        [
            make_line("2020-01-15 08:00:00", "login failed", level="WARNING", context={"ip": "10.0.0.1"}),
            make_line("2020-01-15 08:01:00", "login ok"),
        ],
    )
    write_daily("2020-01-16", [make_line("2020-01-16 09:00:00", "role changed", level="NOTICE")])


def _invoke(runner: CliRunner, config_path: Path, *args: str, **kwargs):
    return runner.invoke(cli, ["--config", str(config_path), *args], **kwargs)


# =============================================================================
# Root Group
# =============================================================================


class TestRoot:
    """Tests for --version and help."""

    def test_version_flag(self, runner):
        # Act
        result = runner.invoke(cli, ["--version"])

        # Assert
        assert result.exit_code == 0
        assert result.output.strip() == f"seclog {__version__}"

    def test_no_command_shows_help(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Quick Start" in result.output
        assert "archive" in result.output

    def test_invalid_config_file(self, runner, tmp_path):
        """Given an unparseable config, commands fail with a clear message."""
        # Arrange
        path = tmp_path / "broken.json"
        path.write_text("{nope")

        # Act
        result = _invoke(runner, path, "logs", "show")

        # Assert
        assert result.exit_code == 1
        assert "Failed to load configuration" in result.output


# =============================================================================
# logs
# =============================================================================


class TestLogs:
    """Tests for logs show / stats."""

    def test_show_newest_first(self, runner, config_path, old_logs):
        # Act
        result = _invoke(runner, config_path, "logs", "show")

        # Assert
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == "[2020-01-16 09:00:00] production.NOTICE: role changed"
        assert lines[2] == '[2020-01-15 08:00:00] production.WARNING: login failed {"ip": "10.0.0.1"}'
        assert "Page 1 of 1 (3 records)" in result.output

    def test_show_empty(self, runner, config_path):
        result = _invoke(runner, config_path, "logs", "show")
        assert result.exit_code == 0
        assert "No log entries." in result.output

    def test_show_json_paging(self, runner, config_path, old_logs):
        # Act
        result = _invoke(runner, config_path, "logs", "show", "--per-page", "2", "--page", "2", "--json")

        # Assert
        data = json.loads(result.stdout)
        assert data["total"] == 3
        assert data["last_page"] == 2
        assert [r["message"] for r in data["data"]] == ["login failed"]

    def test_show_rejects_zero_per_page(self, runner, config_path):
        result = _invoke(runner, config_path, "logs", "show", "-n", "0")
        assert result.exit_code == 2

    def test_stats_json(self, runner, config_path, old_logs):
        result = _invoke(runner, config_path, "logs", "stats", "--json")
        data = json.loads(result.stdout)
        assert data["active_count"] == 3
        assert data["archived_count"] == 0
        assert data["level_distribution"] == {"WARNING": 1, "INFO": 1, "NOTICE": 1}

    def test_stats_text(self, runner, config_path, old_logs):
        result = _invoke(runner, config_path, "logs", "stats")
        assert result.exit_code == 0
        assert "Active records: 3" in result.output


# =============================================================================
# archive
# =============================================================================


class TestArchive:
    """Tests for archive run / list / show / prune."""

    def test_run_then_nothing_left(self, runner, config_path, old_logs, log_root):
        """Given past-month files, run archives them and a second run is a no-op."""
        # Act
        first = _invoke(runner, config_path, "archive", "run")
        second = _invoke(runner, config_path, "archive", "run")

        # Assert
        assert first.exit_code == 0
        assert "security-2020-01-15.log → security-logs-2020-01.zip" in first.output
        assert "Archived 2 file(s)" in first.output
        assert (log_root / "archived" / "security-logs-2020-01.zip").exists()
        assert not list(log_root.glob("security-*.log"))
        assert second.stdout.strip() == "No logs to archive"

    def test_run_json(self, runner, config_path, old_logs):
        result = _invoke(runner, config_path, "archive", "run", "--json")
        data = json.loads(result.stdout)
        assert [item["from"] for item in data["archived"]] == [
            "security-2020-01-15.log",
            "security-2020-01-16.log",
        ]
        assert data["errors"] == []

    def test_run_reports_errors_but_exits_zero(self, runner, config_path, old_logs, archive_dir):
        # Arrange
        archive_dir.mkdir()
        (archive_dir / "security-logs-2020-01.zip").write_bytes(b"not a zip")

        # Act
        result = _invoke(runner, config_path, "archive", "run")

        # Assert
        assert result.exit_code == 0
        assert "2 file(s) could not be archived" in result.output

    def test_list_and_show(self, runner, config_path, old_logs):
        # Arrange
        _invoke(runner, config_path, "archive", "run")

        # Act
        listed = _invoke(runner, config_path, "archive", "list", "--json")
        shown = _invoke(runner, config_path, "archive", "show", "security-logs-2020-01.zip")

        # Assert
        assert [a["name"] for a in json.loads(listed.stdout)] == ["security-logs-2020-01.zip"]
        assert shown.exit_code == 0
        assert shown.stdout.splitlines()[0] == "[2020-01-16 09:00:00] production.NOTICE: role changed"
        assert "security-logs-2020-01.zip: page 1 of 1 (3 records)" in shown.output

    def test_list_empty(self, runner, config_path):
        result = _invoke(runner, config_path, "archive", "list")
        assert "No archives." in result.output

    @pytest.mark.parametrize(
        ("archive_id", "message"),
        [
            ("../config.json", "Invalid archive identifier"),
            ("security-logs-2019-05.zip", "Archive not found"),
        ],
    )
    def test_show_errors(self, runner, config_path, archive_id, message):
        # Act
        result = _invoke(runner, config_path, "archive", "show", archive_id)

        # Assert
        assert result.exit_code == 1
        assert message in result.output

    def test_prune_with_months(self, runner, config_path, old_logs):
        """Given a 2020 archive, pruning with one month of retention deletes it."""
        # Arrange
        _invoke(runner, config_path, "archive", "run")

        # Act
        result = _invoke(runner, config_path, "archive", "prune", "--months", "1", "--yes")

        # Assert
        assert result.exit_code == 0
        assert "pruned security-logs-2020-01.zip" in result.output
        assert "Pruned 1 archive(s)" in result.output
        assert json.loads(_invoke(runner, config_path, "archive", "list", "--json").stdout) == []

    def test_prune_requires_retention(self, runner, config_path):
        result = _invoke(runner, config_path, "archive", "prune", "--yes")
        assert result.exit_code == 1
        assert "No retention configured" in result.output

    def test_prune_confirmation_declined(self, runner, config_path, old_logs):
        # Arrange
        _invoke(runner, config_path, "archive", "run")

        # Act
        result = _invoke(runner, config_path, "archive", "prune", "-m", "1", input="n\n")

        # Assert
        assert result.exit_code == 1
        assert len(json.loads(_invoke(runner, config_path, "archive", "list", "--json").stdout)) == 1

    def test_prune_nothing(self, runner, config_path):
        result = _invoke(runner, config_path, "archive", "prune", "-m", "1", "-y")
        assert "No archives to prune." in result.output


# =============================================================================
# config
# =============================================================================


class TestConfigCommands:
    """Tests for config init / path / show."""

    def test_init_writes_file(self, runner, tmp_path):
        # Arrange
        path = tmp_path / "new" / "config.json"

        # Act
        result = _invoke(runner, path, "config", "init", "--log-root", "/srv/logs", "--format", "gz")

        # Assert
        assert result.exit_code == 0
        assert "Configuration written to" in result.output
        saved = json.loads(path.read_text())
        assert saved["storage"]["log_root"] == "/srv/logs"
        assert saved["archive"]["format"] == "gz"

    def test_init_refuses_overwrite(self, runner, config_path):
        result = _invoke(runner, config_path, "config", "init")
        assert result.exit_code == 1
        assert "Config already exists" in result.output

    def test_init_force(self, runner, config_path):
        result = _invoke(runner, config_path, "config", "init", "--force")
        assert result.exit_code == 0
        assert json.loads(config_path.read_text())["archive"]["format"] == "zip"

    def test_path(self, runner, config_path):
        result = _invoke(runner, config_path, "config", "path")
        assert result.stdout.strip() == str(config_path)

    def test_path_from_env(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("SECLOG_CONFIG", str(tmp_path / "env.json"))
        result = runner.invoke(cli, ["config", "path"])
        assert str(tmp_path / "env.json") in result.output
        assert "does not exist" in result.output

    def test_show_marks_defaults(self, runner, config_path, log_root):
        # Act
        result = _invoke(runner, config_path, "config", "show")

        # Assert
        assert result.exit_code == 0
        assert f"log_root: {log_root}" in result.output
        assert "format: zip (default)" in result.output

    def test_show_json(self, runner, config_path, log_root):
        data = json.loads(_invoke(runner, config_path, "config", "show", "--json").stdout)
        assert data["storage"]["log_root"] == str(log_root)
        assert data["_computed"]["archive_dir"] == str(log_root / "archived")
