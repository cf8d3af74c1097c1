"""
Run session: the in-process results log and its summary report.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from exercise_runner.core.models import ExecutionResult


@dataclass
class CategoryTally:
    total: int = 0
    successful: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        return self.successful / self.total * 100 if self.total else 0.0


@dataclass(frozen=True)
class SessionReport:
    """Aggregate over every result recorded in a session."""

    total_run: int
    successful: int
    failed: int
    average_time_ms: float | None
    categories: dict[str, CategoryTally] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.total_run == 0

    @classmethod
    def empty(cls) -> "SessionReport":
        return cls(total_run=0, successful=0, failed=0, average_time_ms=None)


def build_session_report(results: list[ExecutionResult]) -> SessionReport:
    """Summarise results; categories keep first-seen order."""
    if not results:
        return SessionReport.empty()

    categories: dict[str, CategoryTally] = {}
    for result in results:
        tally = categories.setdefault(result.category, CategoryTally())
        tally.total += 1
        if result.success:
            tally.successful += 1
        else:
            tally.failed += 1

    times = [r.execution_time_ms for r in results if r.execution_time_ms is not None]
    successful = sum(1 for r in results if r.success)

    return SessionReport(
        total_run=len(results),
        successful=successful,
        failed=len(results) - successful,
        average_time_ms=sum(times) / len(times) if times else None,
        categories=categories,
    )


class RunSession:
    """
    Append-only log of execution results for one operator session.

    Passed explicitly to the runner so several sessions can coexist in one
    process.
    """

    def __init__(self):
        self._results: list[ExecutionResult] = []

    @property
    def results(self) -> list[ExecutionResult]:
        return list(self._results)

    def record(self, result: ExecutionResult) -> None:
        self._results.append(result)

    def clear(self) -> None:
        self._results.clear()

    def report(self) -> SessionReport:
        return build_session_report(self._results)

    def __len__(self) -> int:
        return len(self._results)
