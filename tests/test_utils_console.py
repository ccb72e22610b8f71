"""
Tests for utils.console module.

Tests cover:
- OutputMode initialization, predicates and JSON buffering
- success/error/warning/info in human, agent and quiet modes
- spinner() staying silent outside human mode
- print_banner, print_status_table and print_run_summary
"""

import json
from unittest.mock import patch

import pytest

from dbmigrate.utils.console import (
    OutputMode,
    error,
    info,
    output_mode,
    print_banner,
    print_run_summary,
    print_status_table,
    spinner,
    success,
    warning,
)

# ========================================================================
# Fixtures
# ========================================================================


@pytest.fixture
def reset_output_mode():
    """Reset global output_mode to default state after each test."""
    original_format = output_mode.format
    original_quiet = output_mode.quiet
    output_mode._json_buffer.clear()

    yield

    output_mode.format = original_format
    output_mode.quiet = original_quiet
    output_mode._json_buffer.clear()


@pytest.fixture
def sample_statuses():
    """Status rows as produced by asdict(MigrationStatus)."""
    return [
        {"ordinal": 1, "name": "Migration_1", "description": "Create users.", "applied": True},
        {"ordinal": 2, "name": "Migration_2$PostgreSQL", "description": "", "applied": False},
    ]


# ========================================================================
# Test OutputMode Class
# ========================================================================


class TestOutputMode:
    """Test OutputMode initialization, predicates and buffering."""

    def test_default_initialization(self):
        mode = OutputMode()
        assert mode.format == "text"
        assert mode.quiet is False
        assert mode._json_buffer == {}

    def test_invalid_format_raises_error(self):
        with pytest.raises(ValueError, match="Invalid format"):
            OutputMode(format_type="xml")

    def test_predicates(self):
        assert OutputMode("text").is_human()
        assert not OutputMode("text").is_agent()
        assert OutputMode("json").is_agent()
        assert OutputMode("json", quiet=True).is_agent()

    def test_add_json_overwrites_existing_key(self):
        mode = OutputMode("json")
        mode.add_json("status", "success")
        mode.add_json("status", "error")
        assert mode._json_buffer == {"status": "error"}

    def test_flush_json_outputs_and_clears_buffer(self, capsys):
        mode = OutputMode("json")
        mode.add_json("current_version", 3)

        mode.flush_json()

        assert json.loads(capsys.readouterr().out) == {"current_version": 3}
        assert mode._json_buffer == {}

    def test_flush_json_no_op_in_human_mode(self, capsys):
        mode = OutputMode("text")
        mode.add_json("current_version", 3)

        mode.flush_json()

        assert capsys.readouterr().out == ""

    def test_flush_json_empty_buffer(self, capsys):
        OutputMode("json").flush_json()
        assert capsys.readouterr().out == ""


# ========================================================================
# Test Output Functions
# ========================================================================


class TestMessages:
    """Test success/error/warning/info."""

    @patch("dbmigrate.utils.console.console")
    def test_success_human_mode(self, mock_console, reset_output_mode):
        output_mode.format = "text"

        success("Connected to SQLite")

        call_args = mock_console.print.call_args[0][0]
        assert "[green]" in call_args
        assert "Connected to SQLite" in call_args

    def test_success_agent_mode_buffers(self, reset_output_mode):
        output_mode.format = "json"

        success("Done")

        assert output_mode._json_buffer == {"status": "success", "message": "Done"}

    @patch("dbmigrate.utils.console.console_err")
    def test_error_human_mode_goes_to_stderr(self, mock_console_err, reset_output_mode):
        output_mode.format = "text"

        error("Migration Migration_3 failed")

        call_args = mock_console_err.print.call_args[0][0]
        assert "[red]" in call_args
        assert "Migration_3" in call_args

    def test_error_agent_mode_buffers(self, reset_output_mode):
        output_mode.format = "json"

        error("Database error")

        assert output_mode._json_buffer["status"] == "error"
        assert output_mode._json_buffer["error"] == "Database error"

    def test_warning_agent_mode_buffers(self, reset_output_mode):
        output_mode.format = "json"

        warning("Version table is empty")

        assert output_mode._json_buffer["warning"] == "Version table is empty"

    @patch("dbmigrate.utils.console.console")
    def test_info_quiet_mode_silent(self, mock_console, reset_output_mode):
        output_mode.format = "text"
        output_mode.quiet = True

        info("Applied Migration_1")

        mock_console.print.assert_not_called()

    def test_info_agent_mode_silent(self, reset_output_mode):
        output_mode.format = "json"

        info("Applied Migration_1")

        assert output_mode._json_buffer == {}


class TestSpinner:
    """Test spinner() context manager."""

    @patch("dbmigrate.utils.console.console")
    def test_human_mode_shows_status(self, mock_console, reset_output_mode):
        output_mode.format = "text"
        output_mode.quiet = False

        with spinner("Migrating..."):
            pass

        mock_console.status.assert_called_once()

    def test_agent_mode_yields_none(self, reset_output_mode):
        output_mode.format = "json"

        with spinner("Migrating...") as status:
            assert status is None


# ========================================================================
# Test Display Functions
# ========================================================================


class TestPrintBanner:
    """Test print_banner()."""

    @patch("dbmigrate.utils.console.console")
    def test_human_mode(self, mock_console, reset_output_mode):
        output_mode.format = "text"
        output_mode.quiet = False

        print_banner("0.1.0")

        assert "0.1.0" in mock_console.print.call_args[0][0]

    @patch("dbmigrate.utils.console.console")
    def test_silent_in_agent_mode(self, mock_console, reset_output_mode):
        output_mode.format = "json"

        print_banner("0.1.0")

        mock_console.print.assert_not_called()


class TestPrintStatusTable:
    """Test print_status_table()."""

    def test_agent_mode_buffers(self, sample_statuses, reset_output_mode):
        output_mode.format = "json"

        print_status_table(1, sample_statuses)

        assert output_mode._json_buffer["current_version"] == 1
        assert output_mode._json_buffer["migrations"] == sample_statuses

    def test_quiet_mode_one_line_per_migration(self, sample_statuses, capsys, reset_output_mode):
        output_mode.format = "text"
        output_mode.quiet = True

        print_status_table(1, sample_statuses)

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        assert lines[0].split() == ["1", "Migration_1", "applied"]
        assert lines[1].split() == ["2", "Migration_2$PostgreSQL", "pending"]

    def test_human_mode_table(self, sample_statuses, capsys, reset_output_mode):
        output_mode.format = "text"
        output_mode.quiet = False

        print_status_table(1, sample_statuses)

        out = capsys.readouterr().out
        assert "Schema version 1" in out
        assert "Create users." in out
        assert "pending" in out


class TestPrintRunSummary:
    """Test print_run_summary()."""

    def test_agent_mode_buffers_all_fields(self, reset_output_mode):
        output_mode.format = "json"
        result = {
            "start_version": 3,
            "end_version": 1,
            "target_version": 1,
            "direction": "down",
            "executed": ["Migration_3", "Migration_2"],
        }

        print_run_summary(result)

        assert output_mode._json_buffer == result

    def test_human_mode_lists_rolled_back_units(self, capsys, reset_output_mode):
        output_mode.format = "text"
        output_mode.quiet = False

        print_run_summary(
            {
                "start_version": 3,
                "end_version": 1,
                "target_version": 1,
                "direction": "down",
                "executed": ["Migration_3", "Migration_2"],
            }
        )

        out = capsys.readouterr().out
        assert "Rolled back Migration_3" in out
        assert "Migrated from version 3 to version 1" in out

    def test_human_mode_nothing_to_do(self, capsys, reset_output_mode):
        output_mode.format = "text"
        output_mode.quiet = False

        print_run_summary(
            {
                "start_version": 2,
                "end_version": 2,
                "target_version": 2,
                "direction": None,
                "executed": [],
            }
        )

        assert "nothing to do" in capsys.readouterr().out
