"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner

from src.pipeline.models import BatchSummary, DocumentOutcome


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Uploading..."):
        ...     # Do work
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
        """Display warning message in yellow.

        Also used as the notice sink of pipeline operations.
        """
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Args:
            message: Message to display with spinner

        Yields:
            None
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_document_summary(self, outcome: DocumentOutcome, verb: str) -> None:
        """Display the result of a single-document operation.

        Args:
            outcome: Outcome of the operation
            verb: Past tense of the operation ("Uploaded", "Downloaded")
        """
        self.console.print(f"\n[bold]{outcome.document_path}:[/bold]")
        self.console.print(f"  [green]✓[/green] {verb}: {outcome.succeeded}/{outcome.images} image(s)")

        if outcome.unresolved > 0:
            self.console.print(f"  [yellow]?[/yellow] Not found in vault: {outcome.unresolved} image(s)")

        if outcome.trashed > 0:
            self.console.print(f"  [dim]─[/dim] Moved to trash: {outcome.trashed} file(s)")

    def print_batch_summary(self, summary: BatchSummary, verb: str) -> None:
        """Display batch summary with color coding.

        Args:
            summary: Counters accumulated by the batch
            verb: Past tense of the operation ("Uploaded", "Downloaded")
        """
        self.console.print("\n[bold]Batch Summary:[/bold]")
        self.console.print(
            f"  [blue]≡[/blue] Documents: {summary.processed}/{summary.total_documents} processed"
        )
        self.console.print(f"  [green]✓[/green] {verb}: {summary.succeeded}/{summary.total_images} image(s)")

        if summary.failed_documents:
            self.console.print(f"  [red]✗[/red] Failed: {len(summary.failed_documents)} document(s)")
            for document in summary.failed_documents:
                self.console.print(f"    • {document}")

        if summary.total_documents == 0:
            self.console.print("\n[yellow]No documents to process[/yellow]")
        elif summary.failed_documents:
            self.console.print("\n[red]Batch completed with failures[/red]")
        else:
            self.console.print("\n[green]Batch completed successfully[/green]")
