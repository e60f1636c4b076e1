"""Output formatting for the hashsync CLI."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from .utils import format_size


class OutputFormatter:
    """Writes user-facing messages, honouring quiet and JSON modes.

    Informational messages go to stdout and are suppressed in quiet or JSON
    mode. Warnings and errors always go to stderr.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize the formatter.

        Args:
            json_output: Emit machine-readable JSON instead of text
            quiet: Suppress non-essential output
            console: Console for regular output (defaults to stdout)
            err_console: Console for warnings and errors (defaults to stderr)
        """
        self.json_output = json_output
        self.quiet = quiet or json_output
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def print(self, message: str = "") -> None:
        if not self.quiet:
            self.console.print(message, markup=False)

    def info(self, message: str) -> None:
        if not self.quiet:
            self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        if not self.quiet:
            self.console.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]Warning: {escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]Error: {escape(message)}[/red]")

    def output_json(self, data: Any) -> None:
        """Print data as JSON on stdout regardless of quiet mode."""
        self.console.print_json(json.dumps(data))

    @staticmethod
    def format_size(size_bytes: int) -> str:
        return format_size(size_bytes)
