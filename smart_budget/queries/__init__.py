"""Ledger summary package."""

from smart_budget.queries.summary import (
    LedgerSummary,
    list_records,
    section_total,
    summarize,
)

__all__ = ["LedgerSummary", "list_records", "section_total", "summarize"]
