"""
Exercise Runner: compose catalog, engine, tests and progress into run modes.

Run modes:
- run_exercise  one exercise, optionally tested and recorded
- run_category  every exercise in a category, optionally within a number window
- run_batch     every exercise matched by a pattern
- benchmark     repeat one exercise and report timing statistics

Exercises always run one at a time, in catalog order, so output and timings
are attributable to a single exercise.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace

from loguru import logger
from rich.console import Console
from rich.markup import escape

from exercise_runner.core.catalog import filter_catalog
from exercise_runner.core.errors import (
    ExecutionError,
    ExecutionTimeout,
    NotFound,
    ProgressWriteError,
    TestRunError,
)
from exercise_runner.core.models import (
    BenchmarkStats,
    Category,
    ExecutionResult,
    Exercise,
    ExerciseMatch,
    RunSummary,
)
from exercise_runner.core.patterns import resolve_pattern
from exercise_runner.execution.engine import ExecutionEngine
from exercise_runner.execution.test_runner import TestRunner, find_test_file
from exercise_runner.progress.store import ProgressBackend
from exercise_runner.runner.session import RunSession, SessionReport


@dataclass(frozen=True)
class RunOptions:
    """Options shared by every run mode."""

    show_output: bool = True
    measure_time: bool = True
    run_tests: bool = False
    update_progress: bool = False
    timeout_ms: int | None = None
    stop_on_error: bool = False
    start_from: int = 1
    end_at: int | None = None


class ExerciseRunner:
    """
    Orchestrates exercise runs.

    Args:
        catalog: category key -> Category, from scan_catalog()
        engine: runs exercise files
        progress: completion store (only touched when update_progress is set)
        test_runner: runs paired test files (None disables tests)
        session: results log (a fresh one if omitted)
        console: where live output goes
        clock: monotonic seconds, used to time each run
    """

    def __init__(
        self,
        catalog: Mapping[str, Category],
        engine: ExecutionEngine,
        progress: ProgressBackend | None = None,
        test_runner: TestRunner | None = None,
        session: RunSession | None = None,
        console: Console | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.catalog = dict(catalog)
        self.engine = engine
        self.progress = progress
        self.test_runner = test_runner
        self.session = session if session is not None else RunSession()
        self.console = console or Console()
        self.clock = clock

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_category(self, key: str) -> Category:
        category = self.catalog.get(key)
        if category is None:
            raise NotFound(f"Category '{key}' not found")
        return category

    def get_exercise(self, key: str, number: int) -> tuple[Category, Exercise]:
        category = self.get_category(key)
        exercise = category.get(number)
        if exercise is None:
            raise NotFound(f"Exercise {number} not found in category '{key}'")
        return category, exercise

    def list_exercises(self, category_filter: str | None = None) -> dict[str, Category]:
        return filter_catalog(self.catalog, category_filter)

    def find_exercises(self, pattern: str) -> list[ExerciseMatch]:
        return resolve_pattern(self.catalog, pattern)

    # =========================================================================
    # Single Exercise
    # =========================================================================

    async def run_exercise(
        self,
        category: str,
        exercise_number: int,
        options: RunOptions | None = None,
    ) -> ExecutionResult:
        """
        Run one exercise.

        Raises:
            NotFound: unknown category or exercise number

        Every other failure is reported through the returned result. A progress
        file that cannot be written is logged as a warning.
        """
        options = options or RunOptions()
        cat, exercise = self.get_exercise(category, exercise_number)

        if options.show_output:
            self.console.print(f"\n[bold cyan]Running {category}/exercise-{exercise.label}[/]")

        output: str | None = None
        error: str | None = None
        elapsed: float | None = None
        tests_passed: bool | None = None
        success = False

        start = self.clock()
        try:
            outcome = await self.engine.execute(exercise.path, options.timeout_ms)
            if options.measure_time:
                elapsed = (self.clock() - start) * 1000
            output = outcome.stdout
            success = True
        except (ExecutionError, ExecutionTimeout) as e:
            error = str(e)

        if success and options.run_tests:
            try:
                tests_passed = await self._run_tests(cat, exercise)
            except TestRunError as e:
                success = False
                error = f"Test run failed: {e}"

        result = ExecutionResult(
            category=category,
            exercise_number=exercise_number,
            success=success,
            output=output,
            error=error,
            execution_time_ms=elapsed,
            tests_passed=tests_passed,
        )

        if options.show_output:
            self._print_result(result, options)

        if (
            options.update_progress
            and self.progress is not None
            and result.success
            and (not options.run_tests or result.tests_passed)
        ):
            try:
                self.progress.mark_complete(category, exercise_number)
            except ProgressWriteError as e:
                logger.warning(f"Progress not recorded for {result.label}: {e}")
                if options.show_output:
                    self.console.print(f"[yellow]Progress not recorded:[/] {escape(str(e))}")

        if error:
            logger.debug(f"{result.label} failed: {error}")

        self.session.record(result)
        return result

    async def _run_tests(self, category: Category, exercise: Exercise) -> bool | None:
        if self.test_runner is None:
            return None
        test_file = find_test_file(category.path, exercise.number)
        if test_file is None:
            return None
        outcome = await self.test_runner.run(test_file)
        return outcome.passed

    def _print_result(self, result: ExecutionResult, options: RunOptions) -> None:
        if not result.success:
            self.console.print(f"[bold red]Error:[/] {escape(result.error or '')}")
            return

        self.console.print("[bold]Output:[/]")
        self.console.print(result.output or "", markup=False, highlight=False)
        if result.execution_time_ms is not None:
            self.console.print(f"[dim]Execution time: {result.execution_time_ms:.2f}ms[/]")
        if options.run_tests:
            if result.tests_passed is None:
                self.console.print("[yellow]Tests: no test file[/]")
            elif result.tests_passed:
                self.console.print("[green]Tests: PASSED[/]")
            else:
                self.console.print("[red]Tests: FAILED[/]")

    # =========================================================================
    # Sequences
    # =========================================================================

    async def _run_sequence(
        self,
        label: str,
        targets: list[tuple[str, int]],
        options: RunOptions,
    ) -> RunSummary:
        summary = RunSummary(label=label, total_exercises=len(targets))
        quiet = replace(options, show_output=False)

        for index, (category, number) in enumerate(targets, start=1):
            result = await self.run_exercise(category, number, quiet)
            summary.add(result)

            if result.success:
                self.console.print(f"[dim][{index}/{len(targets)}][/] [green]PASSED[/] {result.label}")
            else:
                self.console.print(
                    f"[dim][{index}/{len(targets)}][/] [red]FAILED[/] {result.label} - {escape(result.error or '')}"
                )
                if options.stop_on_error:
                    summary.aborted = True
                    logger.info(f"Stopping {label} after failure of {result.label}")
                    break

        logger.info(f"{label}: {summary.completed} completed, {summary.failed} failed")
        return summary

    async def run_category(self, category: str, options: RunOptions | None = None) -> RunSummary:
        """
        Run every exercise of a category within [start_from, end_at].

        Raises:
            NotFound: unknown category
        """
        options = options or RunOptions()
        cat = self.get_category(category)
        self.console.print(f"\n[bold cyan]Running category: {cat.display_name}[/]")

        targets = [
            (cat.key, exercise.number)
            for exercise in cat.exercises
            if exercise.number >= options.start_from
            and (options.end_at is None or exercise.number <= options.end_at)
        ]
        return await self._run_sequence(cat.key, targets, options)

    async def run_batch(self, pattern: str, options: RunOptions | None = None) -> RunSummary:
        """Run every exercise matched by pattern; an empty match runs nothing."""
        options = options or RunOptions()
        matches = self.find_exercises(pattern)
        self.console.print(f"\n[bold cyan]Running exercises matching pattern: {escape(pattern)}[/]")

        if not matches:
            self.console.print("[yellow]No exercises found matching the pattern[/]")
        else:
            self.console.print(f"Found {len(matches)} exercises:")
            for match in matches:
                self.console.print(f"   - {match.label}")

        targets = [(m.category, m.number) for m in matches]
        return await self._run_sequence(pattern, targets, options)

    # =========================================================================
    # Benchmark
    # =========================================================================

    async def benchmark(self, category: str, exercise_number: int, iterations: int = 10) -> BenchmarkStats:
        """
        Run an exercise `iterations` times and summarise successful timings.

        Tests and progress recording are disabled. Zero successful runs gives
        BenchmarkStats.no_data() rather than an error.

        Raises:
            ValueError: iterations < 1
            NotFound: unknown category or exercise number
        """
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        self.get_exercise(category, exercise_number)

        options = RunOptions(show_output=False, measure_time=True, run_tests=False, update_progress=False)
        samples: list[float] = []

        for _ in range(iterations):
            result = await self.run_exercise(category, exercise_number, options)
            if result.success and result.execution_time_ms is not None:
                samples.append(result.execution_time_ms)

        return BenchmarkStats.from_samples(iterations, samples)

    # =========================================================================
    # Report
    # =========================================================================

    def report(self) -> SessionReport:
        return self.session.report()
