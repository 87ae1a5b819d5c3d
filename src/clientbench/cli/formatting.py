"""
CLI Output Formatting

Rich formatting utilities for benchmark output: per-repetition lines,
error listings and summary tables.
"""

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from clientbench.benchmark.stats import ActionSummary, StatsRecord

console = Console()


def format_summary_table(summaries: Sequence[ActionSummary]) -> Table:
    """Build the end-of-run summary table."""
    table = Table(title="Benchmark Summary", show_header=True, header_style="bold blue")
    table.add_column("Action", style="cyan")
    table.add_column("Category")
    table.add_column("Environment")
    table.add_column("Repetitions", justify="right")
    table.add_column("Success", justify="right", style="green")
    table.add_column("Failure", justify="right", style="red")
    table.add_column("Success Rate", justify="right")
    table.add_column("Status")

    for summary in summaries:
        if summary.aborted:
            status = "[red]setup failed[/red]"
        elif summary.errors:
            status = f"[yellow]{summary.errors} error(s)[/yellow]"
        else:
            status = "[green]ok[/green]"
        table.add_row(
            summary.action,
            summary.category or "-",
            summary.environment,
            str(summary.repetitions),
            str(summary.successes),
            str(summary.failures),
            f"{summary.success_rate:.1f}%",
            status,
        )

    return table


def print_stats(action: str, stats: Sequence[StatsRecord]) -> None:
    """Print one line per measured repetition."""
    for stat in stats:
        console.print(f"{action}: {stat.duration_ns}ns", markup=False, highlight=False, soft_wrap=True)


def print_errors(message: str) -> None:
    """Print accumulated error messages."""
    console.print(f"[red]{escape(message)}[/red]", highlight=False, soft_wrap=True)


def display_error(message: str, error_type: str = "Error") -> None:
    """Display a formatted error message."""
    error_panel = Panel(
        f"[red]{escape(message)}[/red]",
        title=error_type,
        border_style="red"
    )
    console.print(error_panel)
