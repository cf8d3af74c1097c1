"""
Runner: orchestration of exercise runs over a catalog.

Components:
- ExerciseRunner: run one exercise, a category, a pattern batch, or a benchmark
- RunSession: in-process results log
- SessionReport: summary of a session's results
"""

from .orchestrator import ExerciseRunner, RunOptions
from .session import CategoryTally, RunSession, SessionReport, build_session_report

__all__ = [
    "ExerciseRunner",
    "RunOptions",
    "RunSession",
    "SessionReport",
    "CategoryTally",
    "build_session_report",
]
