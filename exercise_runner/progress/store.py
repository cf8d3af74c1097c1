"""
JSON Progress Store.

Records which exercises have been completed, per category.

Document location: <project_root>/progress.json

The document is read once on construction and rewritten in full on every
mutation. A single writer is assumed: two processes updating the file at
the same time can lose updates (last writer wins).
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from exercise_runner.core.errors import ProgressWriteError

# Fixed catalog of category sizes for the full collection (4905 exercises)
DEFAULT_CATEGORY_TOTALS: dict[str, int] = {
    "01-basic": 600,
    "02-fundamental-es6-part1": 600,
    "02-fundamental-es6-part2": 590,
    "03-functions": 145,
    "04-recursion": 65,
    "05-arrays": 265,
    "06-strings": 315,
    "07-math": 570,
    "08-date": 285,
    "09-conditional-loops": 60,
    "10-error-handling": 65,
    "11-async": 45,
    "12-promises": 100,
    "13-modules": 100,
    "14-stack": 175,
    "15-linked-list": 175,
    "16-objects": 90,
    "17-dom": 65,
    "18-events": 105,
    "19-drawing": 30,
    "20-bit-manipulation": 75,
    "21-regex": 105,
    "22-validation": 50,
}

# =============================================================================
# Persisted Document
# =============================================================================


class CategoryProgress(BaseModel):
    """Completion state of one category."""

    total: int
    completed: int = 0
    exercises: list[int] = Field(default_factory=list)


class ProgressDocument(BaseModel):
    """The persisted progress document (camelCase on disk)."""

    model_config = ConfigDict(populate_by_name=True)

    total_exercises: int = Field(alias="totalExercises")
    completed: int = 0
    start_date: date = Field(alias="startDate")
    last_updated: date = Field(alias="lastUpdated")
    categories: dict[str, CategoryProgress] = Field(default_factory=dict)

    @classmethod
    def fresh(cls, totals: Mapping[str, int], today: date) -> "ProgressDocument":
        return cls(
            total_exercises=sum(totals.values()),
            completed=0,
            start_date=today,
            last_updated=today,
            categories={key: CategoryProgress(total=total) for key, total in totals.items()},
        )

    def recount(self) -> None:
        """Re-derive completion counts from the recorded exercise sets."""
        for category in self.categories.values():
            category.exercises = sorted(set(category.exercises))
            category.completed = len(category.exercises)
        self.completed = sum(c.completed for c in self.categories.values())

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json", by_alias=True), indent=2)


# =============================================================================
# Report
# =============================================================================


def _percentage(done: int, total: int) -> float:
    return done / total * 100 if total > 0 else 0.0


@dataclass(frozen=True)
class CategoryProgressLine:
    key: str
    completed: int
    total: int

    @property
    def percentage(self) -> float:
        return _percentage(self.completed, self.total)


@dataclass(frozen=True)
class ProgressReport:
    """Read-only snapshot of overall and per-category completion."""

    completed: int
    total: int
    start_date: date
    last_updated: date
    categories: tuple[CategoryProgressLine, ...]

    @property
    def percentage(self) -> float:
        return _percentage(self.completed, self.total)


# =============================================================================
# Store
# =============================================================================


class ProgressBackend(Protocol):
    """What the orchestrator needs from a progress store."""

    def load(self) -> ProgressDocument: ...

    def mark_complete(self, category: str, exercise_number: int) -> bool: ...

    def report(self) -> ProgressReport: ...


class ProgressStore:
    """
    File-backed progress tracking.

    Args:
        path: JSON document location
        default_totals: category sizes used to seed a fresh document
        clock: returns today's date (injectable for tests)
    """

    def __init__(
        self,
        path: Path,
        default_totals: Mapping[str, int] | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.path = Path(path)
        self.default_totals = dict(default_totals if default_totals is not None else DEFAULT_CATEGORY_TOTALS)
        self.clock = clock
        self.document = self.load()

    def load(self) -> ProgressDocument:
        """Read the document; a missing or unreadable file yields a fresh one."""
        if not self.path.exists():
            logger.debug(f"No progress file at {self.path}, starting fresh")
            return self._fresh()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            document = ProgressDocument.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable progress file {self.path}: {e}")
            return self._fresh()

        document.recount()
        return document

    def _fresh(self) -> ProgressDocument:
        return ProgressDocument.fresh(self.default_totals, self.clock())

    def save(self) -> Path:
        """
        Rewrite the whole document.

        Raises:
            ProgressWriteError: the file or its directory could not be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(self.document.to_json())
        except OSError as e:
            raise ProgressWriteError(self.path, str(e)) from e
        return self.path

    def mark_complete(self, category: str, exercise_number: int) -> bool:
        """
        Record an exercise as completed.

        Returns:
            True if the document changed, False for an unknown category or
            an exercise that was already recorded

        Raises:
            ProgressWriteError: the document could not be saved (nothing is recorded)
        """
        entry = self.document.categories.get(category)
        if entry is None or exercise_number in entry.exercises:
            return False

        previous_update = self.document.last_updated
        entry.exercises.append(exercise_number)
        self.document.recount()
        self.document.last_updated = self.clock()
        try:
            self.save()
        except ProgressWriteError:
            # Keep memory in step with disk
            entry.exercises.remove(exercise_number)
            self.document.recount()
            self.document.last_updated = previous_update
            raise

        logger.info(f"Completed {category}/exercise-{exercise_number:03d}")
        return True

    def reset(self) -> None:
        """Discard all completions and persist a fresh document."""
        self.document = self._fresh()
        self.save()
        logger.info(f"Progress reset at {self.path}")

    def report(self) -> ProgressReport:
        doc = self.document
        return ProgressReport(
            completed=doc.completed,
            total=doc.total_exercises,
            start_date=doc.start_date,
            last_updated=doc.last_updated,
            categories=tuple(
                CategoryProgressLine(key=key, completed=entry.completed, total=entry.total)
                for key, entry in doc.categories.items()
            ),
        )
