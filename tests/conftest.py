"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import os
import sys
import textwrap
import time
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


def write_exercise(root: Path, category: str, number: int, source: str, ext: str = ".py") -> Path:
    """Write exercises/<category>/exercise-NNN<ext> and return its path."""
    category_dir = root / category
    category_dir.mkdir(parents=True, exist_ok=True)
    path = category_dir / f"exercise-{number:03d}{ext}"
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


@pytest.fixture
def exercises_root(tmp_path):
    """
    A small exercise tree of Python programs.

    01-basic:   1 prints "hello", 2 fails with "boom", 3 prints "three"
    02-strings: 5 and 6 print their numbers
    03-empty:   no exercises (only a README)
    """
    root = tmp_path / "exercises"
    write_exercise(root, "01-basic", 1, 'print("hello")\n')
    write_exercise(root, "01-basic", 2, """
        import sys
        sys.stderr.write("boom\\n")
        sys.exit(1)
    """)
    write_exercise(root, "01-basic", 3, 'print("three")\n')
    write_exercise(root, "02-strings", 5, 'print("five")\n')
    write_exercise(root, "02-strings", 6, 'print("six")\n')
    (root / "03-empty").mkdir()
    (root / "03-empty" / "README.md").write_text("nothing here\n", encoding="utf-8")
    return root


@pytest.fixture
def make_exercise():
    """Return the write_exercise helper."""
    return write_exercise


@pytest.fixture
def spawning_wrapper(tmp_path):
    """
    A launcher script that runs its argument in a grandchild process.

    Stands in for interpreters like `npx tsx` or `npx jest` that start their
    own children and hold the output pipes open.
    """
    path = tmp_path / "spawning_wrapper.py"
    path.write_text(
        "import subprocess, sys\n"
        "sys.exit(subprocess.run([sys.executable, *sys.argv[1:]]).returncode)\n",
        encoding="utf-8",
    )
    return path


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    # Orphans reparented to a non-reaping PID 1 linger as zombies
    stat = Path(f"/proc/{pid}/stat")
    try:
        state = stat.read_text().rsplit(")", 1)[1].split()[0]
    except (OSError, IndexError):
        return True
    return state not in ("Z", "X")


@pytest.fixture
def wait_until_dead():
    """Return a function polling until pid has exited (False on timeout)."""

    def wait(pid: int, timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if not _pid_alive(pid):
                return True
            time.sleep(0.05)
        return not _pid_alive(pid)

    return wait
