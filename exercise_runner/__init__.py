"""
Exercise Runner: discover, run, test, benchmark and track numbered exercises.

Components:
- core: Catalog scanning, pattern matching, data model, errors
- execution: Subprocess engine with timeouts, external test runner
- progress: JSON completion store
- runner: Orchestration of run modes and the session report
- cli: Typer command-line interface
"""

__version__ = "1.0.0"
