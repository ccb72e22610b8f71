"""
Rich console utilities for dual-mode CLI output.

Provides terminal output for humans and structured JSON for automation.
All output functions adapt based on the global output_mode setting.

This module provides:
- OutputMode: Class to manage output format (text/json/quiet)
- Context manager: spinner()
- Output functions: success(), error(), warning(), info()
- Display functions: print_banner(), print_status_table(), print_run_summary()

Human Mode (--format text):
    - Rich spinners and colored tables
    - ANSI colors and Unicode symbols

Agent Mode (--format json):
    - Structured JSON output to stdout
    - No ANSI codes or spinners

Examples:
    >>> from dbmigrate.utils.console import output_mode, spinner, success
    >>> output_mode.format = "text"
    >>> with spinner("Reading schema version..."):
    ...     version = engine.current_version()
    >>> success(f"Schema is at version {version}")
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table


class OutputMode:
    """
    Output mode configuration for dual-mode CLI.

    Attributes:
        format: Output format - "text" (human) or "json" (agent)
        quiet: If True, suppress non-essential output
        _json_buffer: Internal buffer for JSON output in agent mode
    """

    def __init__(self, format_type: str = "text", quiet: bool = False):
        """
        Initialize output mode.

        Args:
            format_type: Output format - "text" for human, "json" for agent
            quiet: If True, suppress non-essential output

        Raises:
            ValueError: If format_type is not "text" or "json"
        """
        if format_type not in ["text", "json"]:
            raise ValueError(f"Invalid format: {format_type}. Must be 'text' or 'json'")

        self.format = format_type
        self.quiet = quiet
        self._json_buffer: dict[str, Any] = {}

    def is_human(self) -> bool:
        """Return True if format is "text"."""
        return self.format == "text"

    def is_agent(self) -> bool:
        """Return True if format is "json"."""
        return self.format == "json"

    def add_json(self, key: str, value: Any) -> None:
        """
        Add key-value pair to JSON buffer.

        Used in agent mode to accumulate structured data
        before final output via flush_json().

        Args:
            key: JSON key
            value: JSON-serializable value
        """
        self._json_buffer[key] = value

    def flush_json(self) -> None:
        """
        Output buffered JSON to stdout and clear buffer.

        Only outputs in agent mode. In human mode, this is a no-op.
        """
        if self.is_agent() and self._json_buffer:
            json.dump(self._json_buffer, sys.stdout, indent=2)
            sys.stdout.write("\n")
            sys.stdout.flush()
            self._json_buffer.clear()


# Global output mode instance (set by CLI flags)
output_mode = OutputMode()

console = Console()  # stdout
console_err = Console(stderr=True)  # stderr


@contextmanager
def spinner(message: str):
    """
    Context manager for showing a spinner during operations.

    Displays a Rich spinner with message in human mode.
    Silent in agent/quiet modes.

    Args:
        message: Status message to display
    """
    if output_mode.is_human() and not output_mode.quiet:
        with console.status(f"[bold blue]{message}", spinner="dots") as status:
            yield status
    else:
        yield None


def success(message: str) -> None:
    """
    Print a success message.

    Human mode: Green checkmark with message
    Agent mode: Buffer to JSON
    """
    if output_mode.is_human():
        console.print(f"[green]✓[/green] {message}")
    elif output_mode.is_agent():
        output_mode.add_json("status", "success")
        output_mode.add_json("message", message)


def error(message: str) -> None:
    """
    Print an error message.

    Human mode: Red X with message to stderr
    Agent mode: Buffer to JSON
    """
    if output_mode.is_human():
        console_err.print(f"[red]✗[/red] {message}", style="red")
    elif output_mode.is_agent():
        output_mode.add_json("status", "error")
        output_mode.add_json("error", message)


def warning(message: str) -> None:
    """
    Print a warning message.

    Human mode: Yellow warning symbol with message
    Agent mode: Buffer to JSON
    """
    if output_mode.is_human():
        console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")
    elif output_mode.is_agent():
        output_mode.add_json("warning", message)


def info(message: str) -> None:
    """
    Print an info message.

    Human mode: Blue info symbol with message
    Agent/Quiet mode: Silent
    """
    if output_mode.is_human() and not output_mode.quiet:
        console.print(f"[blue]ℹ[/blue] {message}")


def print_banner(version: str) -> None:
    """
    Print the startup banner in human mode.

    Args:
        version: Version string (e.g., "0.1.0")
    """
    if not output_mode.is_human() or output_mode.quiet:
        return

    banner = f"""
[bold cyan]╔{"═" * 39}╗
║   dbmigrate v{version:<24} ║
║   Numbered schema migrations          ║
╚{"═" * 39}╝[/bold cyan]
"""

    console.print(banner)


def print_status_table(current_version: int, migrations: list[dict]) -> None:
    """
    Print the discovered migrations and whether each one is applied.

    Human mode: Rich table with one row per migration
    Agent mode: Buffers {"current_version": ..., "migrations": [...]}

    Args:
        current_version: Version read from the bookkeeping table
        migrations: Dicts with keys ordinal, name, description, applied
    """
    if output_mode.is_agent():
        output_mode.add_json("current_version", current_version)
        output_mode.add_json("migrations", migrations)
        return

    if output_mode.quiet:
        for item in migrations:
            marker = "applied" if item["applied"] else "pending"
            console.print(f"{item['ordinal']}\t{item['name']}\t{marker}")
        return

    table = Table(
        title=f"Schema version {current_version}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", justify="right")
    table.add_column("Migration", style="bold")
    table.add_column("Description")
    table.add_column("Status", justify="center")

    for item in migrations:
        status = "[green]applied[/green]" if item["applied"] else "[yellow]pending[/yellow]"
        table.add_row(
            str(item["ordinal"]), item["name"], item.get("description") or "", status
        )

    console.print(table)


def print_run_summary(result: dict) -> None:
    """
    Print the outcome of a migration run.

    Args:
        result: Dict with start_version, end_version, direction, executed
    """
    if output_mode.is_agent():
        for key, value in result.items():
            output_mode.add_json(key, value)
        return

    if result["direction"] is None:
        info(f"Schema already at version {result['end_version']}, nothing to do")
        return

    verb = "Applied" if result["direction"] == "up" else "Rolled back"
    for name in result["executed"]:
        info(f"{verb} {name}")
    success(
        f"Migrated from version {result['start_version']} "
        f"to version {result['end_version']}"
    )
