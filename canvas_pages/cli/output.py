"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status messages, spinners for remote calls and a tree view of a
page canvas.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner
from rich.tree import Tree

from canvas_pages.canvas.controls import CanvasControl, ClientSideText, ClientSideWebpart
from canvas_pages.canvas.page import ClientSidePage

TEXT_PREVIEW_LENGTH = 60


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Page saved")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        self.verbosity = verbosity
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a remote call runs.

        Example:
            >>> with handler.spinner("Fetching page..."):
            ...     content = store.fetch_page_content(page_ref)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_page_tree(self, page: ClientSidePage, title: str = "Page") -> None:
        """Display the sections, columns and controls of a page as a tree."""
        # reindex so the displayed orders are the ones a save would write
        page.render()

        root = Tree(f"[bold]{escape(title)}[/bold]")
        for section in page.sections:
            section_node = root.add(f"Section {section.order}")
            for column in section.columns:
                column_node = section_node.add(
                    f"Column {column.order} [dim](factor {column.factor})[/dim]"
                )
                if not column.controls:
                    column_node.add("[dim]empty[/dim]")
                for control in column.controls:
                    column_node.add(self._describe_control(control))

        self.console.print(root)

    def _describe_control(self, control: CanvasControl) -> str:
        if isinstance(control, ClientSideText):
            text = control.plain_text
            if len(text) > TEXT_PREVIEW_LENGTH:
                text = text[:TEXT_PREVIEW_LENGTH - 1] + "…"
            return f"{control.order}. Text: {escape(text)}"
        if isinstance(control, ClientSideWebpart):
            return (
                f"{control.order}. Web part: {escape(control.title)} "
                f"[dim]({escape(control.webpart_id)})[/dim]"
            )
        return f"{control.order}. {escape(type(control).__name__)}"
