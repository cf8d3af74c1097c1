"""
External test runner collaborator.

Each exercise may have a paired test file at
<category>/tests/exercise-<NNN>.test.<ext>. The configured test command is
run once per exercise with the test path substituted into it.

Pass/fail comes from the exit code, refined by the structured JSON report
when the command prints one (Jest's --json shape: {"success": bool, ...}).
Console text is never searched for failure markers.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from exercise_runner.core.errors import TestRunError
from exercise_runner.execution.engine import NEW_PROCESS_GROUP, kill_process_tree

DEFAULT_TEST_COMMAND = ("npx", "jest", "--json", "--testPathPattern", "{test_file}")
DEFAULT_TEST_TIMEOUT_MS = 60_000


@dataclass(frozen=True)
class TestOutcome:
    """Result of one test command invocation."""

    __test__ = False

    passed: bool | None
    detail: str | None = None


def find_test_file(category_path: Path, number: int) -> Path | None:
    """Locate the paired test file for an exercise, if any."""
    tests_dir = category_path / "tests"
    if not tests_dir.is_dir():
        return None
    candidates = sorted(tests_dir.glob(f"exercise-{number:03d}.test.*"))
    return candidates[0] if candidates else None


def _parse_report(stdout: str) -> dict | None:
    text = stdout.strip()
    if not text.startswith("{"):
        return None
    try:
        report = json.loads(text)
    except json.JSONDecodeError:
        return None
    return report if isinstance(report, dict) else None


def interpret_result(exit_code: int, stdout: str, stderr: str = "") -> TestOutcome:
    """Classify a finished test command from its exit code and JSON report."""
    report = _parse_report(stdout)

    if exit_code == 0:
        if report is not None and report.get("success") is False:
            return TestOutcome(passed=False, detail=_failure_detail(report, stderr))
        return TestOutcome(passed=True)

    return TestOutcome(passed=False, detail=_failure_detail(report, stderr) or f"Test command exited with code {exit_code}")


def _failure_detail(report: dict | None, stderr: str) -> str | None:
    if report is not None and isinstance(report.get("numFailedTests"), int):
        return f"{report['numFailedTests']} failing test(s)"
    stderr = stderr.strip()
    return stderr.splitlines()[-1] if stderr else None


class TestRunner:
    """
    Run the configured test command for a single test file.

    Args:
        command: argument list; "{test_file}" is replaced with the test path
        project_root: working directory for the test command
        timeout_ms: deadline for one invocation
    """

    __test__ = False

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_TEST_COMMAND,
        project_root: Path | None = None,
        timeout_ms: int = DEFAULT_TEST_TIMEOUT_MS,
    ):
        self.command = list(command)
        self.project_root = project_root or Path.cwd()
        self.timeout_ms = timeout_ms

    def build_command(self, test_file: Path) -> list[str]:
        return [part.replace("{test_file}", str(test_file)) for part in self.command]

    async def run(self, test_file: Path) -> TestOutcome:
        """
        Run tests for test_file.

        Raises:
            TestRunError: the command could not be started or timed out
        """
        cmd = self.build_command(test_file)
        if not cmd:
            raise TestRunError("No test command configured")
        logger.debug(f"Running tests: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.project_root),
                start_new_session=NEW_PROCESS_GROUP,
            )
        except OSError as exc:
            raise TestRunError(f"Failed to start test command '{cmd[0]}': {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout_ms / 1000)
        except asyncio.TimeoutError:
            await kill_process_tree(process)
            raise TestRunError(f"Test command timed out after {self.timeout_ms}ms") from None

        outcome = interpret_result(
            process.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )
        if not outcome.passed:
            logger.warning(f"Tests failed for {test_file.name}: {outcome.detail}")
        return outcome
