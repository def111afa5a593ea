"""Shared console helpers for the Unity Qdrant Indexer.

Provides the Rich console used across the package and a handful of printers
for success/warning/error lines and tabular output.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from unity_indexer.gemini_client import SuggestionRecord

console = Console()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_suggestions(
    suggestions: Iterable[SuggestionRecord],
    title: str = "Optimization Suggestions",
) -> None:
    """Print advisor suggestions as a numbered table."""
    table = Table(title=title, show_header=True, header_style="bold magenta", show_lines=True)
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Reasoning")

    for idx, suggestion in enumerate(suggestions, start=1):
        table.add_row(str(idx), escape(suggestion.title), escape(suggestion.reasoning))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
