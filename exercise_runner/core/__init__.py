"""
Core Module - Shared domain models, errors, and catalog logic.

Components:
- models: Exercise, Category, ExecutionResult, RunSummary, BenchmarkStats
- errors: ExerciseRunnerError hierarchy
- catalog: Directory layout -> category index
- patterns: Batch pattern grammar
"""

from .catalog import (
    DEFAULT_EXTENSIONS,
    build_catalog,
    filter_catalog,
    format_display_name,
    parse_exercise_number,
    scan_catalog,
)
from .errors import (
    CatalogUnavailable,
    ExecutionError,
    ExecutionTimeout,
    ExerciseRunnerError,
    NotFound,
    ProcessSpawnError,
    ProgressWriteError,
    TestRunError,
)
from .models import (
    BenchmarkStats,
    Category,
    ExecutionResult,
    Exercise,
    ExerciseMatch,
    RunSummary,
)
from .patterns import resolve_pattern

__all__ = [
    # Models
    "Exercise",
    "Category",
    "ExerciseMatch",
    "ExecutionResult",
    "RunSummary",
    "BenchmarkStats",
    # Errors
    "ExerciseRunnerError",
    "CatalogUnavailable",
    "NotFound",
    "ExecutionError",
    "ProcessSpawnError",
    "ProgressWriteError",
    "ExecutionTimeout",
    "TestRunError",
    # Catalog
    "DEFAULT_EXTENSIONS",
    "build_catalog",
    "scan_catalog",
    "filter_catalog",
    "format_display_name",
    "parse_exercise_number",
    "resolve_pattern",
]
