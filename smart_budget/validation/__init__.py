"""Record validation package."""

from smart_budget.validation.categories import CATEGORIES, OTHER_CATEGORY, categories_for
from smart_budget.validation.validator import RecordValidator

__all__ = [
    "CATEGORIES",
    "OTHER_CATEGORY",
    "RecordValidator",
    "categories_for",
]
