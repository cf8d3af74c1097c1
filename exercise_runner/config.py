"""
Configuration settings for exercise-runner.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

import shlex
import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Layout
    # ========================================
    project_root: Path = Field(
        default_factory=Path.cwd,
        description="Root of the exercise collection (relative paths resolve against it)",
    )
    exercises_dir: Path = Field(
        default=Path("exercises"),
        description="Directory holding one subdirectory per category",
    )
    progress_file: Path = Field(
        default=Path("progress.json"),
        description="JSON progress document",
    )
    exercise_extensions: str = Field(
        default=".js,.mjs,.cjs,.ts,.py",
        description="Comma-separated source extensions recognised as exercises",
    )

    # ========================================
    # Execution
    # ========================================
    execution_timeout_ms: int = Field(
        default=10_000,
        description="Wall-clock limit for a single exercise run",
    )
    node_command: str = Field(
        default="node",
        description="Interpreter for .js/.mjs/.cjs exercises",
    )
    typescript_command: str = Field(
        default="npx tsx",
        description="Interpreter for .ts exercises",
    )

    # ========================================
    # Tests
    # ========================================
    test_command: str = Field(
        default="npx jest --json --testPathPattern {test_file}",
        description="Test runner invocation; {test_file} is replaced with the test path",
    )
    test_timeout_ms: int = Field(
        default=60_000,
        description="Wall-clock limit for one test runner invocation",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.project_root / path

    def resolved_exercises_dir(self) -> Path:
        return self._resolve(self.exercises_dir)

    def resolved_progress_file(self) -> Path:
        return self._resolve(self.progress_file)

    def extension_list(self) -> list[str]:
        """Normalised extensions, each with a leading dot."""
        extensions = []
        for ext in self.exercise_extensions.split(","):
            ext = ext.strip().lower()
            if not ext:
                continue
            extensions.append(ext if ext.startswith(".") else f".{ext}")
        return extensions

    def test_command_args(self) -> list[str]:
        return shlex.split(self.test_command)

    def interpreter_map(self) -> dict[str, list[str]]:
        """Map file extension to the command prefix that runs it."""
        node = shlex.split(self.node_command)
        return {
            ".js": node,
            ".mjs": node,
            ".cjs": node,
            ".ts": shlex.split(self.typescript_command),
            ".py": [sys.executable],
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
