"""
Unit tests for the category catalog.

Tests:
- Display name derivation
- Exercise file name parsing
- Pure catalog construction from a listing
- Filesystem scanning and CatalogUnavailable
"""

from pathlib import Path

import pytest

from exercise_runner.core.catalog import (
    build_catalog,
    filter_catalog,
    format_display_name,
    parse_exercise_number,
    scan_catalog,
)
from exercise_runner.core.errors import CatalogUnavailable


class TestDisplayName:
    """Tests for format_display_name."""

    def test_strips_numeric_prefix(self):
        assert format_display_name("01-basic") == "Basic"

    def test_title_cases_each_token(self):
        assert format_display_name("02-fundamental-es6-part1") == "Fundamental Es6 Part1"

    def test_without_prefix(self):
        assert format_display_name("linked-list") == "Linked List"


class TestParseExerciseNumber:
    """Tests for parse_exercise_number."""

    def test_js_exercise(self):
        assert parse_exercise_number("exercise-007.js") == 7

    def test_python_exercise(self):
        assert parse_exercise_number("exercise-120.py") == 120

    def test_test_file_is_not_an_exercise(self):
        assert parse_exercise_number("exercise-001.test.js") is None

    def test_unrecognised_extension(self):
        assert parse_exercise_number("exercise-001.txt") is None

    def test_custom_extensions(self):
        assert parse_exercise_number("exercise-001.js", extensions=(".py",)) is None

    def test_other_names(self):
        assert parse_exercise_number("README.md") is None
        assert parse_exercise_number("exercise-abc.js") is None


class TestBuildCatalog:
    """Tests for the pure catalog builder."""

    def test_sorts_exercises_ascending(self):
        listing = {
            "01-basic": (Path("/x/01-basic"), ["exercise-010.js", "exercise-002.js", "exercise-001.js"]),
        }
        catalog = build_catalog(listing)

        numbers = [e.number for e in catalog["01-basic"].exercises]
        assert numbers == [1, 2, 10]

    def test_drops_empty_categories(self):
        listing = {
            "01-basic": (Path("/x/01-basic"), ["exercise-001.js"]),
            "02-empty": (Path("/x/02-empty"), ["notes.md", "exercise-001.test.js"]),
        }
        catalog = build_catalog(listing)

        assert list(catalog) == ["01-basic"]

    def test_duplicate_numbers_are_collapsed(self):
        listing = {
            "01-basic": (Path("/x/01-basic"), ["exercise-001.mjs", "exercise-001.js", "exercise-002.js"]),
        }
        category = build_catalog(listing)["01-basic"]

        numbers = [e.number for e in category.exercises]
        assert numbers == [1, 2]
        assert category.exercises[0].file_name == "exercise-001.js"

    def test_category_fields(self):
        listing = {"03-functions": (Path("/x/03-functions"), ["exercise-004.js"])}
        category = build_catalog(listing)["03-functions"]

        assert category.display_name == "Functions"
        assert category.count == 1
        assert category.exercises[0].path == Path("/x/03-functions/exercise-004.js")
        assert category.get(4) is category.exercises[0]
        assert category.get(5) is None

    def test_numbers_strictly_ascending(self):
        listing = {
            "a": (Path("/a"), [f"exercise-{n:03d}.js" for n in (9, 3, 3, 1, 7)]),
            "b": (Path("/b"), [f"exercise-{n}.py" for n in (20, 2, 11)]),
        }
        for category in build_catalog(listing).values():
            numbers = [e.number for e in category.exercises]
            assert all(a < b for a, b in zip(numbers, numbers[1:]))


class TestScanCatalog:
    """Tests for scanning a real directory tree."""

    def test_scan(self, exercises_root):
        catalog = scan_catalog(exercises_root)

        assert list(catalog) == ["01-basic", "02-strings"]
        assert [e.number for e in catalog["01-basic"].exercises] == [1, 2, 3]
        assert catalog["01-basic"].path == exercises_root / "01-basic"

    def test_ignores_top_level_files(self, exercises_root):
        (exercises_root / "exercise-001.py").write_text("print(1)\n")

        catalog = scan_catalog(exercises_root)

        assert "exercise-001.py" not in catalog

    def test_missing_root(self, tmp_path):
        with pytest.raises(CatalogUnavailable):
            scan_catalog(tmp_path / "nope")

    def test_root_is_a_file(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x")

        with pytest.raises(CatalogUnavailable):
            scan_catalog(path)


class TestFilterCatalog:
    """Tests for filter_catalog."""

    def test_filter_by_key_fragment(self, exercises_root):
        catalog = scan_catalog(exercises_root)

        assert list(filter_catalog(catalog, "01")) == ["01-basic"]

    def test_filter_by_display_name_case_insensitive(self, exercises_root):
        catalog = scan_catalog(exercises_root)

        assert list(filter_catalog(catalog, "STRINGS")) == ["02-strings"]

    def test_no_filter(self, exercises_root):
        catalog = scan_catalog(exercises_root)

        assert filter_catalog(catalog, None) == catalog
