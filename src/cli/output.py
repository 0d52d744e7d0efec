"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status messages, a spinner for the publish run and the final
publish summary. Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner

from src.publisher.models import PublishOutcome


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> with handler.spinner("Publishing..."):
        ...     outcome = publisher.do_publish()
        >>> handler.print_publish_summary(outcome)
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
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(escape(message))

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a long operation runs.

        Example:
            >>> with handler.spinner("Publishing pages..."):
            ...     # Do work
            ...     pass
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_publish_summary(self, outcome: PublishOutcome) -> None:
        """Display publish summary with color coding.

        Args:
            outcome: Result of the publish run
        """
        self.console.print("\n[bold]Publish Summary:[/bold]")
        self.console.print(f"  [green]↑[/green] Published: {outcome.successful_uploads} page(s)")

        if outcome.failed_files:
            self.console.print(f"  [red]✗[/red] Failed: {len(outcome.failed_files)} page(s)")
            for failure in outcome.failed_files:
                self.console.print(f"    • {escape(failure.file_name)}: {escape(failure.reason)}")

        total = outcome.successful_uploads + len(outcome.failed_files)
        if total == 0:
            self.console.print("\n[yellow]No pages to publish[/yellow]")
        elif outcome.failed_files:
            self.console.print("\n[red]Publish completed with failures[/red]")
        else:
            self.console.print("\n[green]Publish completed successfully[/green]")
