"""
Batch pattern resolution.

Pattern examples:
    "01-basic"             all exercises in the basic category
    "basic:1-10"           exercises 1-10 in categories matching "basic"
    "functions:palindrome" exercises with "palindrome" in the file name
    "1-5"                  exercises 1-5 in every category
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from exercise_runner.core.models import Category, Exercise, ExerciseMatch

_RANGE_RE = re.compile(r"^([0-9]+)-([0-9]+)$")
_NUMBER_RE = re.compile(r"^[0-9]+$")


def _parse_range(text: str) -> tuple[int, int] | None:
    match = _RANGE_RE.match(text)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def matches_exercise(exercise: Exercise, fragment: str) -> bool:
    """Match one exercise against the part of a pattern after the colon."""
    bounds = _parse_range(fragment)
    if bounds:
        start, end = bounds
        return start <= exercise.number <= end

    if _NUMBER_RE.match(fragment):
        return exercise.number == int(fragment)

    return fragment.lower() in exercise.file_name.lower()


def _match(category: Category, exercise: Exercise) -> ExerciseMatch:
    return ExerciseMatch(category=category.key, number=exercise.number, file_name=exercise.file_name)


def resolve_pattern(catalog: Mapping[str, Category], pattern: str) -> list[ExerciseMatch]:
    """Resolve a pattern to targets sorted by category key, then number."""
    pattern = pattern.strip()
    if not pattern:
        return []

    matches: list[ExerciseMatch] = []

    if ":" in pattern:
        category_fragment, exercise_fragment = pattern.split(":", 1)
        needle = category_fragment.lower()
        for category in catalog.values():
            if needle not in category.key.lower() and needle not in category.display_name.lower():
                continue
            matches.extend(
                _match(category, exercise)
                for exercise in category.exercises
                if matches_exercise(exercise, exercise_fragment)
            )
    else:
        lowered = pattern.lower()
        named = [
            category
            for category in catalog.values()
            if category.key.lower() == lowered or category.display_name.lower() == lowered
        ]
        if named:
            category = named[0]
            matches.extend(_match(category, exercise) for exercise in category.exercises)
        elif bounds := _parse_range(pattern):
            start, end = bounds
            for category in catalog.values():
                matches.extend(
                    _match(category, exercise)
                    for exercise in category.exercises
                    if start <= exercise.number <= end
                )

    return sorted(matches, key=lambda m: (m.category, m.number))
