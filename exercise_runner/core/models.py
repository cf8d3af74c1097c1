"""
Data model for the exercise runner.

Catalog entries are immutable for the lifetime of a process; results are
created once per run and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True)
class Exercise:
    """A single numbered exercise file within a category."""

    number: int
    file_name: str
    path: Path

    @property
    def label(self) -> str:
        return f"{self.number:03d}"


@dataclass(frozen=True)
class Category:
    """A directory of exercises, ordered by number."""

    key: str
    display_name: str
    path: Path
    exercises: tuple[Exercise, ...]

    @property
    def count(self) -> int:
        return len(self.exercises)

    def get(self, number: int) -> Exercise | None:
        for exercise in self.exercises:
            if exercise.number == number:
                return exercise
        return None


@dataclass(frozen=True)
class ExerciseMatch:
    """One target resolved from a batch pattern."""

    category: str
    number: int
    file_name: str

    @property
    def label(self) -> str:
        return f"{self.category}/exercise-{self.number:03d}"


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running one exercise once."""

    category: str
    exercise_number: int
    success: bool
    output: str | None = None
    error: str | None = None
    execution_time_ms: float | None = None
    tests_passed: bool | None = None  # None = tests not run / no test file

    @property
    def label(self) -> str:
        return f"{self.category}/exercise-{self.exercise_number:03d}"


@dataclass
class RunSummary:
    """Aggregate of a category or batch run."""

    label: str
    total_exercises: int
    completed: int = 0
    failed: int = 0
    results: list[ExecutionResult] = field(default_factory=list)
    aborted: bool = False

    @property
    def success_rate(self) -> float:
        if self.total_exercises == 0:
            return 0.0
        return self.completed / self.total_exercises * 100

    def add(self, result: ExecutionResult) -> None:
        self.results.append(result)
        if result.success:
            self.completed += 1
        else:
            self.failed += 1


@dataclass(frozen=True)
class BenchmarkStats:
    """Timing statistics over the successful runs of a benchmark."""

    iterations: int
    successful_runs: int
    min_ms: float | None = None
    max_ms: float | None = None
    average_ms: float | None = None
    median_ms: float | None = None

    @property
    def has_data(self) -> bool:
        return self.successful_runs > 0

    @classmethod
    def no_data(cls, iterations: int) -> "BenchmarkStats":
        return cls(iterations=iterations, successful_runs=0)

    @classmethod
    def from_samples(cls, iterations: int, samples: list[float]) -> "BenchmarkStats":
        if not samples:
            return cls.no_data(iterations)

        ordered = sorted(samples)
        mid = len(ordered) // 2
        if len(ordered) % 2:
            median = ordered[mid]
        else:
            median = (ordered[mid - 1] + ordered[mid]) / 2

        return cls(
            iterations=iterations,
            successful_runs=len(ordered),
            min_ms=ordered[0],
            max_ms=ordered[-1],
            average_ms=sum(ordered) / len(ordered),
            median_ms=median,
        )
