"""
Typer CLI for exercise-runner.

Commands:
    exercises run 01-basic 1             - Run one exercise, test it, record progress
    exercises category 01-basic          - Run every exercise in a category
    exercises batch "01-basic:1-10"      - Run every exercise matching a pattern
    exercises list [filter]              - List available exercises
    exercises benchmark 01-basic 1 20    - Time repeated runs of one exercise
    exercises report                     - Summarise this process's runs
    exercises progress                   - Show persisted completion progress
    exercises complete 01-basic 1        - Mark an exercise complete by hand

Usage:
    exercises --help
    exercises category functions --from 5 --to 10 --stop-on-error
    exercises batch 1-5 --no-tests
"""

from __future__ import annotations

import asyncio
import sys
from typing import Annotated, NoReturn

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from exercise_runner.cli import display
from exercise_runner.config import Settings, get_settings
from exercise_runner.core.catalog import scan_catalog
from exercise_runner.core.errors import ExerciseRunnerError
from exercise_runner.execution.engine import ExecutionEngine
from exercise_runner.execution.test_runner import TestRunner
from exercise_runner.progress.store import ProgressStore
from exercise_runner.runner.orchestrator import ExerciseRunner, RunOptions
from exercise_runner.runner.session import RunSession

app = typer.Typer(
    name="exercises",
    help="Run, test, benchmark and track progress across numbered exercises",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


# ========================================
# Context Builder (Dependency Injection)
# ========================================


class CLIContext:
    """
    Dependency container for CLI commands.

    Builds each collaborator from settings on first use.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.session = RunSession()
        self._progress: ProgressStore | None = None
        self._runner: ExerciseRunner | None = None

    @property
    def progress(self) -> ProgressStore:
        if self._progress is None:
            self._progress = ProgressStore(self.settings.resolved_progress_file())
        return self._progress

    @property
    def runner(self) -> ExerciseRunner:
        if self._runner is None:
            settings = self.settings
            catalog = scan_catalog(settings.resolved_exercises_dir(), settings.extension_list())
            self._runner = ExerciseRunner(
                catalog=catalog,
                engine=ExecutionEngine(settings.interpreter_map(), settings.execution_timeout_ms),
                progress=self.progress,
                test_runner=TestRunner(
                    settings.test_command_args(),
                    project_root=settings.project_root,
                    timeout_ms=settings.test_timeout_ms,
                ),
                session=self.session,
                console=console,
            )
        return self._runner


_context: CLIContext | None = None


def _ctx() -> CLIContext:
    global _context
    if _context is None:
        _context = CLIContext()
    return _context


def _fail(error: Exception) -> NoReturn:
    err_console.print(f"[bold red]Error:[/] {escape(str(error))}")
    raise typer.Exit(code=1)


def _options(tests: bool, progress: bool, **extra) -> RunOptions:
    return RunOptions(run_tests=tests, update_progress=progress, **extra)


def _maybe_report(show: bool) -> None:
    if show:
        display.render_session_report(console, _ctx().session.report())


# ========================================
# RUN COMMANDS
# ========================================

TestsOpt = Annotated[bool, typer.Option("--tests/--no-tests", help="Run the paired test file")]
ProgressOpt = Annotated[bool, typer.Option("--progress/--no-progress", help="Record completions")]
StopOpt = Annotated[bool, typer.Option("--stop-on-error", help="Abort on the first failure")]
ReportOpt = Annotated[bool, typer.Option("--report", help="Print the session report afterwards")]
TimeoutOpt = Annotated[int | None, typer.Option("--timeout", min=1, help="Timeout in milliseconds")]


@app.command("run")
def run_command(
    category: Annotated[str, typer.Argument(help="Category key, e.g. 01-basic")],
    number: Annotated[int, typer.Argument(help="Exercise number")],
    tests: TestsOpt = True,
    progress: ProgressOpt = True,
    timeout: TimeoutOpt = None,
    report: ReportOpt = False,
) -> None:
    """Run a specific exercise."""
    try:
        asyncio.run(_ctx().runner.run_exercise(category, number, _options(tests, progress, timeout_ms=timeout)))
        _maybe_report(report)
    except ExerciseRunnerError as e:
        _fail(e)


@app.command("category")
def category_command(
    name: Annotated[str, typer.Argument(help="Category key")],
    start_from: Annotated[int, typer.Option("--from", min=1, help="First exercise number")] = 1,
    end_at: Annotated[int | None, typer.Option("--to", min=1, help="Last exercise number")] = None,
    stop_on_error: StopOpt = False,
    tests: TestsOpt = True,
    progress: ProgressOpt = True,
    timeout: TimeoutOpt = None,
    report: ReportOpt = False,
) -> None:
    """Run all exercises in a category."""
    try:
        options = _options(
            tests,
            progress,
            start_from=start_from,
            end_at=end_at,
            stop_on_error=stop_on_error,
            timeout_ms=timeout,
        )
        summary = asyncio.run(_ctx().runner.run_category(name, options))
        display.render_summary(console, summary, title="Category Summary")
        _maybe_report(report)
    except ExerciseRunnerError as e:
        _fail(e)


@app.command("batch")
def batch_command(
    pattern: Annotated[str, typer.Argument(help='Pattern, e.g. "01-basic:1-10", "functions", "1-5"')],
    stop_on_error: StopOpt = False,
    tests: TestsOpt = True,
    progress: ProgressOpt = True,
    timeout: TimeoutOpt = None,
    report: ReportOpt = False,
) -> None:
    """Run exercises matching a pattern."""
    try:
        options = _options(tests, progress, stop_on_error=stop_on_error, timeout_ms=timeout)
        summary = asyncio.run(_ctx().runner.run_batch(pattern, options))
        if summary.total_exercises:
            display.render_summary(console, summary, title="Batch Summary")
        _maybe_report(report)
    except ExerciseRunnerError as e:
        _fail(e)


@app.command("benchmark")
def benchmark_command(
    category: Annotated[str, typer.Argument(help="Category key")],
    number: Annotated[int, typer.Argument(help="Exercise number")],
    iterations: Annotated[int, typer.Argument(min=1, help="Number of runs")] = 10,
) -> None:
    """Benchmark an exercise."""
    try:
        console.print(f"\n[bold cyan]Benchmarking {escape(category)}/exercise-{number:03d} ({iterations} iterations)[/]")
        stats = asyncio.run(_ctx().runner.benchmark(category, number, iterations))
        display.render_benchmark(console, f"{category}/exercise-{number:03d}", stats)
    except ExerciseRunnerError as e:
        _fail(e)


# ========================================
# READ-ONLY COMMANDS
# ========================================


@app.command("list")
def list_command(
    category_filter: Annotated[str | None, typer.Argument(help="Only categories containing this text")] = None,
) -> None:
    """List available exercises."""
    try:
        display.render_catalog(console, _ctx().runner.list_exercises(category_filter))
    except ExerciseRunnerError as e:
        _fail(e)


@app.command("report")
def report_command() -> None:
    """Show the execution report for this process."""
    display.render_session_report(console, _ctx().session.report())


# ========================================
# PROGRESS COMMANDS
# ========================================


@app.command("progress")
def progress_command(
    reset: Annotated[bool, typer.Option("--reset", help="Discard all recorded completions")] = False,
) -> None:
    """Show persisted completion progress."""
    store = _ctx().progress
    if reset:
        if not typer.confirm("Reset all recorded progress?"):
            raise typer.Exit(code=0)
        try:
            store.reset()
        except ExerciseRunnerError as e:
            _fail(e)
    display.render_progress(console, store.report())


@app.command("complete")
def complete_command(
    category: Annotated[str, typer.Argument(help="Category key")],
    number: Annotated[int, typer.Argument(min=1, help="Exercise number")],
) -> None:
    """Mark an exercise complete without running it."""
    try:
        changed = _ctx().progress.mark_complete(category, number)
    except ExerciseRunnerError as e:
        _fail(e)
    if changed:
        console.print(f"[green]Completed {category}/exercise-{number:03d}[/]")
    else:
        console.print(f"[yellow]Nothing recorded for {category}/exercise-{number:03d} (unknown category or already complete)[/]")


# ========================================
# Entry Point
# ========================================


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=3)


def run() -> None:
    """CLI entry point."""
    try:
        configure_logging(get_settings())
    except ValueError as e:
        # pydantic ValidationError from malformed environment settings
        err_console.print(f"[bold red]Invalid configuration:[/] {e}")
        sys.exit(1)
    app()


if __name__ == "__main__":
    run()
