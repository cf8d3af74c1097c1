"""
Command-line interface for exercise-runner.
"""
