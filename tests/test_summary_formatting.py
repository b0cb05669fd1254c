"""Tests for dashboard figures and display formatting."""

import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from smart_budget.formatting import (
    HIDDEN_AMOUNT,
    MISSING_VALUE,
    format_currency,
    format_timestamp,
    generate_id,
    mask_amount,
)
from smart_budget.ledger import upsert
from smart_budget.models.record import (
    ExpenseRecord,
    LedgerState,
    PayableRecord,
    ReceivableRecord,
    RecordKind,
)
from smart_budget.queries import list_records, section_total, summarize


@pytest.fixture
def ledger():
    now = datetime(2026, 5, 1, 12, 0)
    records = [
        ExpenseRecord(amount=Decimal("100"), category="food", occurred_at=now),
        ExpenseRecord(
            amount=Decimal("20"), category="transport",
            occurred_at=now + timedelta(days=1),
        ),
        ReceivableRecord(amount=Decimal("300"), category="loan", occurred_at=now),
        ReceivableRecord(
            amount=Decimal("50"), category="loan", status="settled", occurred_at=now,
        ),
        PayableRecord(amount=Decimal("400"), category="rent", occurred_at=now),
        PayableRecord(
            amount=Decimal("70"), category="water", status="settled", occurred_at=now,
        ),
    ]
    state = LedgerState()
    for record in records:
        state = upsert(state, record).state
    return state


class TestSummary:
    """Tests for summarize and the listing helpers."""

    def test_summarize(self, ledger):
        """Test the overview figures."""
        summary = summarize(ledger)

        assert summary.balance == Decimal("-140")
        assert summary.total_spent == Decimal("190")
        assert summary.outstanding_receivables == Decimal("300")
        assert summary.outstanding_payables == Decimal("400")
        assert summary.record_counts == {
            RecordKind.EXPENSE: 2,
            RecordKind.RECEIVABLE: 2,
            RecordKind.PAYABLE: 2,
        }

    def test_summarize_empty(self):
        """Test an empty ledger."""
        summary = summarize(LedgerState())
        assert summary.total_spent == Decimal("0")
        assert summary.record_counts[RecordKind.EXPENSE] == 0

    def test_list_records_newest_first(self, ledger):
        """Test records are ordered by date, newest first."""
        expenses = list_records(ledger, RecordKind.EXPENSE)
        assert [r.category for r in expenses] == ["transport", "food"]

    def test_list_records_with_mixed_timezones(self):
        """Test records with aware and naive dates still sort."""
        state = LedgerState()
        records = [
            ExpenseRecord(
                amount=Decimal("1"), category="food",
                occurred_at=datetime(2026, 5, 1, 12, 0),
            ),
            ExpenseRecord(
                amount=Decimal("2"), category="transport",
                occurred_at=datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc),
            ),
        ]
        for record in records:
            state = upsert(state, record).state

        listed = list_records(state, RecordKind.EXPENSE)

        assert [r.category for r in listed] == ["transport", "food"]

    def test_list_all_records(self, ledger):
        """Test listing without a kind."""
        assert len(list_records(ledger)) == 6

    def test_section_total(self, ledger):
        """Test section totals include settled and unsettled entries."""
        assert section_total(ledger, RecordKind.RECEIVABLE) == Decimal("350")
        assert section_total(ledger, RecordKind.PAYABLE) == Decimal("470")


class TestFormatting:
    """Tests for display helpers."""

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("1234.5"), "1,234.5 $"),
            (Decimal("1000"), "1,000 $"),
            (Decimal("0.125"), "0.13 $"),
            (Decimal("-42.10"), "-42.1 $"),
            (7, "7 $"),
        ],
    )
    def test_format_currency(self, amount, expected):
        """Test separators, rounding and trailing zeros."""
        assert format_currency(amount, "$") == expected

    def test_mask_amount(self):
        """Test hidden amounts are masked."""
        assert mask_amount(Decimal("10"), "$", hidden=True) == HIDDEN_AMOUNT
        assert mask_amount(Decimal("10"), "$", hidden=False) == "10 $"

    def test_format_timestamp(self):
        """Test timestamp formatting and the missing placeholder."""
        assert format_timestamp(datetime(2026, 10, 17, 21, 30)) == "17 Oct 2026, 09:30 PM"
        assert format_timestamp(None) == MISSING_VALUE

    def test_generate_id(self):
        """Test the id shape."""
        assert re.fullmatch(r"txn-\d+-[0-9a-f]{9}", generate_id("txn"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
