"""
Entry point for running exercise-runner as a module.

Usage:
    python -m exercise_runner list
    python -m exercise_runner run 01-basic 1
    python -m exercise_runner --help
"""
from exercise_runner.cli.main import run

if __name__ == "__main__":
    run()
