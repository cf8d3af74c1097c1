"""
Rich rendering for CLI output.

Kept apart from the command handlers so the handlers stay one call into
the runner plus one call here.
"""

from __future__ import annotations

from collections.abc import Mapping

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from exercise_runner.core.models import BenchmarkStats, Category, RunSummary
from exercise_runner.progress.store import ProgressReport
from exercise_runner.runner.session import SessionReport

# Categories at or below this size list every exercise
LIST_DETAIL_LIMIT = 10


def render_summary(console: Console, summary: RunSummary, title: str = "Summary") -> None:
    total = summary.total_exercises
    style = "green" if summary.failed == 0 else "red"
    lines = [
        f"Completed: {summary.completed}/{total}",
        f"Failed: {summary.failed}/{total}",
    ]
    if total:
        lines.append(f"Success Rate: {summary.success_rate:.1f}%")
    if summary.aborted:
        lines.append("[yellow]Stopped on first error[/]")
    console.print(Panel.fit("\n".join(lines), title=f"{title}: {escape(summary.label)}", border_style=style))


def render_catalog(console: Console, catalog: Mapping[str, Category]) -> None:
    if not catalog:
        console.print("[yellow]No exercises found[/]")
        return

    console.print("\n[bold]Available Exercises[/]\n")
    for key, category in catalog.items():
        console.print(f"[bold cyan]{escape(category.display_name)}[/] ({escape(key)}):")
        console.print(f"   {category.count} exercises")
        if category.count <= LIST_DETAIL_LIMIT:
            for exercise in category.exercises:
                console.print(f"   {exercise.label}. {escape(exercise.file_name)}")
        else:
            first, last = category.exercises[0], category.exercises[-1]
            console.print(f"   {first.label}-{last.label} ({category.count} total)")
        console.print("")


def render_benchmark(console: Console, label: str, stats: BenchmarkStats) -> None:
    if not stats.has_data:
        console.print(f"[red]No successful runs for benchmarking {label}[/]")
        return

    table = Table(title=f"Benchmark: {label}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Runs", f"{stats.successful_runs}/{stats.iterations}")
    table.add_row("Min", f"{stats.min_ms:.2f}ms")
    table.add_row("Max", f"{stats.max_ms:.2f}ms")
    table.add_row("Average", f"{stats.average_ms:.2f}ms")
    table.add_row("Median", f"{stats.median_ms:.2f}ms")
    console.print(table)


def render_session_report(console: Console, report: SessionReport) -> None:
    if report.is_empty:
        console.print("No exercises have been run yet")
        return

    total = report.total_run
    console.print("\n[bold]Exercise Report[/]")
    console.print(f"   Total Exercises Run: {total}")
    console.print(f"   Successful: {report.successful} ({report.successful / total * 100:.1f}%)")
    console.print(f"   Failed: {report.failed} ({report.failed / total * 100:.1f}%)")
    if report.average_time_ms:
        console.print(f"   Average Execution Time: {report.average_time_ms:.2f}ms")

    table = Table(title="By Category")
    table.add_column("Category", style="cyan")
    table.add_column("Passed", justify="right")
    table.add_column("Rate", justify="right")
    for key, tally in report.categories.items():
        table.add_row(key, f"{tally.successful}/{tally.total}", f"{tally.success_rate:.1f}%")
    console.print(table)


def render_progress(console: Console, report: ProgressReport) -> None:
    console.print(Panel.fit(
        f"Total: {report.completed}/{report.total} ({report.percentage:.2f}%)\n"
        f"Started: {report.start_date.isoformat()}\n"
        f"Last Updated: {report.last_updated.isoformat()}",
        title="Progress Report",
        border_style="cyan",
    ))

    table = Table()
    table.add_column("Category", style="cyan")
    table.add_column("Completed", justify="right")
    table.add_column("%", justify="right")
    for line in report.categories:
        table.add_row(line.key, f"{line.completed}/{line.total}", f"{line.percentage:.1f}")
    console.print(table)
