"""
Error hierarchy for the exercise runner.

Per-exercise errors (execution, timeout, test runner) are converted into
ExecutionResult records by the orchestrator, and a failed progress write is
logged without stopping the run. Catalog and lookup errors propagate to the
caller.
"""

from __future__ import annotations


class ExerciseRunnerError(Exception):
    """Base class for all runner errors."""


class CatalogUnavailable(ExerciseRunnerError):
    """Raised when the exercises root is missing or not a directory."""

    def __init__(self, root):
        self.root = root
        super().__init__(f"Exercises directory not found: {root}")


class NotFound(ExerciseRunnerError):
    """Raised for an unknown category or exercise number."""


class ExecutionError(ExerciseRunnerError):
    """An exercise process failed (non-zero exit)."""

    def __init__(self, message: str, exit_code: int | None = None, stderr: str = ""):
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)


class ProcessSpawnError(ExecutionError):
    """The exercise process could not be started at all."""

    def __init__(self, message: str):
        super().__init__(message, exit_code=None)


class ExecutionTimeout(ExerciseRunnerError):
    """An exercise exceeded its deadline and was killed."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Exercise execution timed out after {timeout_ms}ms")


class TestRunError(ExerciseRunnerError):
    """The external test command could not be executed."""

    __test__ = False


class ProgressWriteError(ExerciseRunnerError):
    """The progress document could not be written."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Could not write progress file {path}: {reason}")
