"""Allowed category labels for each record kind."""

from smart_budget.models.record import RecordKind


OTHER_CATEGORY = "other"

CATEGORIES: dict[RecordKind, tuple[str, ...]] = {
    RecordKind.EXPENSE: (
        "food",
        "transport",
        "personal care",
        "electronics",
        "health",
        "entertainment",
        "shopping",
        "education",
        "maintenance",
        OTHER_CATEGORY,
    ),
    RecordKind.RECEIVABLE: (
        "loan",
        "deferred sale",
        OTHER_CATEGORY,
    ),
    RecordKind.PAYABLE: (
        "rent",
        "electricity",
        "water",
        "internet",
        "loan",
        "personal debt",
        "installment/bill",
        OTHER_CATEGORY,
    ),
}


def categories_for(kind: RecordKind) -> tuple[str, ...]:
    """Category labels the UI offers for a record kind."""
    return CATEGORIES[RecordKind(kind)]
