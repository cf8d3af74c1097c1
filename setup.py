"""
Setup script for exercise-runner.

Exercise Runner is the terminal companion for a self-study collection of
numbered programming exercises. It serves three roles:

1. Runner - Execute exercises as isolated subprocesses with a timeout
2. Checker - Run each exercise's paired tests
3. Tracker - Record completion progress in a JSON document

The 'exercises' command is the primary entry point.
"""

from setuptools import find_packages, setup

setup(
    name="exercise-runner",
    version="1.0.0",
    description="Run, test, benchmark and track progress across numbered exercises",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "exercises=exercise_runner.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="exercises runner progress cli education",
)
