"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich library for spinners, colored output and the publish summary.
Supports verbosity levels and --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner
from rich.table import Table

from src.publisher.models import PublishResult


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Publishing..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a long operation runs.

        Args:
            message: Message to display with spinner
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_summary(self, result: PublishResult) -> None:
        """Display what the publish run changed.

        Args:
            result: Result of the publish run
        """
        table = Table(title="Publish Summary", show_header=True, header_style="bold")
        table.add_column("Item")
        table.add_column("Created", justify="right")
        table.add_column("Updated", justify="right")
        table.add_column("Unchanged", justify="right")
        table.add_column("Deleted", justify="right")
        table.add_row(
            "Pages",
            str(result.pages_created),
            str(result.pages_updated),
            str(result.pages_unchanged),
            str(result.pages_deleted),
        )
        table.add_row(
            "Attachments",
            str(result.attachments_added),
            str(result.attachments_updated),
            str(result.attachments_unchanged),
            str(result.attachments_deleted),
        )
        table.add_row(
            "Labels",
            str(result.labels_added),
            "-",
            "-",
            str(result.labels_removed),
        )
        self.console.print(table)

        if result.failures:
            self.console.print(
                f"\n[red]Publish completed with {len(result.failures)} failed page tree(s)[/red]"
            )
        elif result.pages_created or result.pages_updated or result.pages_deleted:
            self.console.print("\n[green]Publish completed successfully[/green]")
        else:
            self.console.print("\n[green]Already up to date. No changes published.[/green]")
