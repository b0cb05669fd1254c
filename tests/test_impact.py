"""Tests for the balance impact rules."""

from decimal import Decimal

import pytest

from smart_budget.ledger import booking_kind, forward_impact, reverse_impact
from smart_budget.models.record import (
    BalanceEventKind,
    ExpenseRecord,
    PayableRecord,
    ReceivableRecord,
    SettlementStatus,
)


AMOUNT = Decimal("120.50")


class TestForwardImpact:
    """Tests for forward_impact."""

    @pytest.mark.parametrize(
        "record, expected",
        [
            (ExpenseRecord(amount=AMOUNT, category="food"), -AMOUNT),
            (ReceivableRecord(amount=AMOUNT, category="loan"), Decimal("0")),
            (
                ReceivableRecord(
                    amount=AMOUNT, category="loan", status=SettlementStatus.SETTLED
                ),
                AMOUNT,
            ),
            (PayableRecord(amount=AMOUNT, category="rent"), Decimal("0")),
            (
                PayableRecord(
                    amount=AMOUNT, category="rent", status=SettlementStatus.SETTLED
                ),
                -AMOUNT,
            ),
        ],
        ids=[
            "expense",
            "unsettled-receivable",
            "settled-receivable",
            "unsettled-payable",
            "settled-payable",
        ],
    )
    def test_impact_by_kind_and_status(self, record, expected):
        """Test the sign rules for every kind and status."""
        assert forward_impact(record) == expected

    def test_reverse_is_negation(self):
        """Test that reverse_impact undoes forward_impact."""
        records = [
            ExpenseRecord(amount=AMOUNT, category="food"),
            ReceivableRecord(amount=AMOUNT, category="loan", status="settled"),
            PayableRecord(amount=AMOUNT, category="rent", status="settled"),
            PayableRecord(amount=AMOUNT, category="rent"),
        ]
        for record in records:
            assert forward_impact(record) + reverse_impact(record) == 0


class TestBookingKind:
    """Tests for booking_kind."""

    def test_booking_kinds(self):
        """Test each record kind maps to its history event kind."""
        assert booking_kind(
            ExpenseRecord(amount=AMOUNT, category="food")
        ) == BalanceEventKind.EXPENSE_BOOKED
        assert booking_kind(
            ReceivableRecord(amount=AMOUNT, category="loan")
        ) == BalanceEventKind.RECEIVABLE_COLLECTED
        assert booking_kind(
            PayableRecord(amount=AMOUNT, category="rent")
        ) == BalanceEventKind.PAYABLE_SETTLED
