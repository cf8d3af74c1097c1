"""
Execution: subprocess engine and the external test runner.
"""

from .engine import DEFAULT_TIMEOUT_MS, ExecutionEngine, ProcessOutcome
from .test_runner import TestOutcome, TestRunner, find_test_file, interpret_result

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "ExecutionEngine",
    "ProcessOutcome",
    "TestOutcome",
    "TestRunner",
    "find_test_file",
    "interpret_result",
]
