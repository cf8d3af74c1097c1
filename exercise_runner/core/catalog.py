"""
Category Catalog: discover exercises from a directory layout.

Layout:
    exercises/
        01-basic/
            exercise-001.js
            exercise-002.js
            tests/exercise-001.test.js
        03-functions/
            ...

The filesystem walk lives in scan_catalog(); everything else is a pure
function of the directory listing so it can be tested without real files.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from loguru import logger

from exercise_runner.core.errors import CatalogUnavailable
from exercise_runner.core.models import Category, Exercise

DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".mjs", ".cjs", ".ts", ".py")

_EXERCISE_RE = re.compile(r"^exercise-([0-9]+)(\.[A-Za-z0-9]+)$")
_PREFIX_RE = re.compile(r"^\d+-")

# category key -> (category directory, file names inside it)
DirectoryListing = Mapping[str, tuple[Path, Iterable[str]]]


def format_display_name(key: str) -> str:
    """
    Derive a human-readable label from a category directory name.

    "01-basic" -> "Basic", "02-fundamental-es6-part1" -> "Fundamental Es6 Part1"
    """
    stripped = _PREFIX_RE.sub("", key)
    return " ".join(word[:1].upper() + word[1:] for word in stripped.split("-"))


def parse_exercise_number(file_name: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> int | None:
    """Return the exercise number of file_name, or None if it is not an exercise."""
    match = _EXERCISE_RE.match(file_name)
    if not match or match.group(2).lower() not in extensions:
        return None
    return int(match.group(1))


def build_catalog(
    listing: DirectoryListing,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> dict[str, Category]:
    """
    Build the category index from a directory listing.

    Exercises are sorted ascending by number; a number seen twice keeps the
    first file in name order. Categories with no exercises are dropped.
    """
    catalog: dict[str, Category] = {}

    for key in sorted(listing):
        category_path, file_names = listing[key]
        by_number: dict[int, Exercise] = {}

        for file_name in sorted(file_names):
            number = parse_exercise_number(file_name, extensions)
            if number is None:
                continue
            if number in by_number:
                logger.debug(f"Skipping {key}/{file_name}: exercise {number} already indexed")
                continue
            by_number[number] = Exercise(
                number=number,
                file_name=file_name,
                path=category_path / file_name,
            )

        if not by_number:
            continue

        catalog[key] = Category(
            key=key,
            display_name=format_display_name(key),
            path=category_path,
            exercises=tuple(by_number[n] for n in sorted(by_number)),
        )

    return catalog


def list_directory(root: Path) -> dict[str, tuple[Path, list[str]]]:
    """Read the immediate category subdirectories of root and their files."""
    if not root.is_dir():
        raise CatalogUnavailable(root)

    listing: dict[str, tuple[Path, list[str]]] = {}
    for entry in root.iterdir():
        if not entry.is_dir():
            continue
        files = [child.name for child in entry.iterdir() if child.is_file()]
        listing[entry.name] = (entry, files)
    return listing


def scan_catalog(root: Path, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> dict[str, Category]:
    """Scan root for categories. Raises CatalogUnavailable for a bad root."""
    catalog = build_catalog(list_directory(root), extensions)
    logger.debug(
        f"Catalog scanned at {root}: {len(catalog)} categories, "
        f"{sum(c.count for c in catalog.values())} exercises"
    )
    return catalog


def filter_catalog(catalog: Mapping[str, Category], fragment: str | None) -> dict[str, Category]:
    """Keep categories whose key or display name contains fragment (case-insensitive)."""
    if not fragment:
        return dict(catalog)
    needle = fragment.lower()
    return {
        key: category
        for key, category in catalog.items()
        if needle in key.lower() or needle in category.display_name.lower()
    }
