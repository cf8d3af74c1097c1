"""
Execution Engine: run one exercise file as an isolated subprocess.

The child runs in the exercise's own directory so relative resource loads
resolve. stdout and stderr are collected separately; the whole run races a
wall-clock deadline. A child that misses it is killed together with
anything it spawned, and reaped.
"""

from __future__ import annotations

import asyncio
import os
import signal
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from exercise_runner.core.errors import ExecutionError, ExecutionTimeout, ProcessSpawnError

DEFAULT_TIMEOUT_MS = 10_000

# Each child leads its own process group so kills reach its descendants
NEW_PROCESS_GROUP = os.name == "posix"


@dataclass(frozen=True)
class ProcessOutcome:
    """Output of a child process that exited 0."""

    stdout: str
    stderr: str
    exit_code: int = 0


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace").strip()


async def kill_process_tree(process: asyncio.subprocess.Process) -> None:
    """Force-kill a child and its process group, then reap the child."""
    try:
        if NEW_PROCESS_GROUP:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        pass  # Already exited
    await process.wait()


class ExecutionEngine:
    """
    Spawn exercise files with the interpreter registered for their extension.

    Args:
        interpreters: extension (".js") -> command prefix (["node"])
        default_timeout_ms: deadline used when execute() is given none
    """

    def __init__(
        self,
        interpreters: Mapping[str, Sequence[str]],
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ):
        self.interpreters = {ext.lower(): list(cmd) for ext, cmd in interpreters.items()}
        self.default_timeout_ms = default_timeout_ms

    def command_for(self, path: Path) -> list[str]:
        prefix = self.interpreters.get(path.suffix.lower())
        if not prefix:
            raise ProcessSpawnError(f"No interpreter configured for '{path.suffix}' files")
        return [*prefix, str(path)]

    async def execute(self, path: Path, timeout_ms: int | None = None) -> ProcessOutcome:
        """
        Run path to completion.

        Returns:
            ProcessOutcome with trimmed stdout on exit code 0

        Raises:
            ExecutionError: non-zero exit (message is stderr or the exit code)
            ProcessSpawnError: the interpreter could not be started
            ExecutionTimeout: the deadline passed; the child has been killed
        """
        if timeout_ms is None:
            timeout_ms = self.default_timeout_ms
        path = Path(path)
        cmd = self.command_for(path)
        logger.debug(f"Spawning {' '.join(cmd)} (cwd={path.parent}, timeout={timeout_ms}ms)")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(path.parent),
                start_new_session=NEW_PROCESS_GROUP,
            )
        except FileNotFoundError as exc:
            raise ProcessSpawnError(f"Command not found: {cmd[0]} ({exc})") from exc
        except OSError as exc:
            raise ProcessSpawnError(f"Failed to start process: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            logger.debug(f"Killing pid {process.pid} after {timeout_ms}ms")
            await kill_process_tree(process)
            raise ExecutionTimeout(timeout_ms) from None
        except asyncio.CancelledError:
            await kill_process_tree(process)
            raise

        out, err = _decode(stdout), _decode(stderr)
        code = process.returncode

        if code != 0:
            raise ExecutionError(err or f"Process exited with code {code}", exit_code=code, stderr=err)

        return ProcessOutcome(stdout=out, stderr=err, exit_code=code)
