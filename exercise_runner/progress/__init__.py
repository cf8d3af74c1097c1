"""
Progress tracking: persisted completion state.
"""

from .store import (
    DEFAULT_CATEGORY_TOTALS,
    CategoryProgress,
    CategoryProgressLine,
    ProgressBackend,
    ProgressDocument,
    ProgressReport,
    ProgressStore,
)

__all__ = [
    "DEFAULT_CATEGORY_TOTALS",
    "CategoryProgress",
    "CategoryProgressLine",
    "ProgressBackend",
    "ProgressDocument",
    "ProgressReport",
    "ProgressStore",
]
