"""
Tests for Smart Budget models

Test strategy:
1. Unit tests for individual components (models, validators, engine)
2. Integration tests for the controller (with in-memory storage)
3. No real files outside pytest's tmp_path
"""

import json
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import TypeAdapter, ValidationError

from smart_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from smart_budget.models.preferences import (
    DEFAULT_CURRENCY,
    AppState,
    Preferences,
    get_currency,
)
from smart_budget.models.record import (
    BalanceEvent,
    BalanceEventKind,
    CashFlow,
    ExpenseRecord,
    LedgerState,
    PayableRecord,
    ReceivableRecord,
    Record,
    SettlementStatus,
    is_settled,
)
from smart_budget.models.validation import ValidationIssue, ValidationResult


class TestRecordModels:
    """Tests for the record variants."""

    def test_expense_creation(self):
        """Test ExpenseRecord creation with defaults."""
        record = ExpenseRecord(amount=Decimal("50"), category="food")
        assert record.kind == "expense"
        assert record.id.startswith("txn-")
        assert record.description == ""
        assert record.attachment_ref is None

    def test_record_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        record = ExpenseRecord(amount=Decimal("5"), category="  food  ")
        assert record.category == "food"

    def test_record_rejects_zero_amount(self):
        """Test that amounts must be positive."""
        with pytest.raises(ValidationError):
            ExpenseRecord(amount=Decimal("0"), category="food")

    def test_record_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            PayableRecord(amount=Decimal("-10"), category="rent")

    def test_record_rejects_empty_category(self):
        """Test that a category is required."""
        with pytest.raises(ValidationError):
            ReceivableRecord(amount=Decimal("10"), category="")

    def test_obligations_default_to_unsettled(self):
        """Test receivables and payables start unsettled."""
        receivable = ReceivableRecord(amount=Decimal("10"), category="loan")
        payable = PayableRecord(amount=Decimal("10"), category="rent")
        assert receivable.status == SettlementStatus.UNSETTLED
        assert payable.status == SettlementStatus.UNSETTLED
        assert not is_settled(receivable)
        assert not is_settled(payable)

    def test_expense_is_always_settled(self):
        """Test that expenses count as settled."""
        assert is_settled(ExpenseRecord(amount=Decimal("1"), category="food"))

    def test_aware_timestamp_is_stored_naive(self):
        """Test timezone-aware dates become naive local time."""
        aware = datetime(2026, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=3)))

        record = ExpenseRecord(amount=Decimal("5"), category="food", occurred_at=aware)

        assert record.occurred_at.tzinfo is None
        assert record.occurred_at == aware.astimezone().replace(tzinfo=None)

    def test_naive_timestamp_is_unchanged(self):
        """Test naive dates are kept as given."""
        naive = datetime(2026, 5, 1, 12, 0)
        record = PayableRecord(amount=Decimal("5"), category="rent", occurred_at=naive)
        assert record.occurred_at == naive

    def test_records_are_immutable(self):
        """Test that records cannot be modified in place."""
        record = ExpenseRecord(amount=Decimal("5"), category="food")
        with pytest.raises(ValidationError):
            record.amount = Decimal("6")

    def test_ids_are_unique(self):
        """Test generated ids don't collide."""
        ids = {ExpenseRecord(amount=Decimal("1"), category="food").id for _ in range(100)}
        assert len(ids) == 100

    def test_discriminated_union_parses_by_kind(self):
        """Test that the kind tag selects the variant."""
        adapter = TypeAdapter(Record)
        record = adapter.validate_python({
            "kind": "payable",
            "amount": "300",
            "category": "rent",
            "status": "settled",
            "expected_date": "2026-01-01",
        })
        assert isinstance(record, PayableRecord)
        assert record.status == SettlementStatus.SETTLED
        assert record.expected_date == date(2026, 1, 1)

    def test_discriminated_union_rejects_unknown_kind(self):
        """Test that an unknown kind tag is rejected."""
        with pytest.raises(ValidationError):
            TypeAdapter(Record).validate_python(
                {"kind": "gift", "amount": "1", "category": "other"}
            )


class TestBalanceEvent:
    """Tests for balance history entries."""

    def test_signed_amount(self):
        """Test outflows are negative and inflows positive."""
        outflow = BalanceEvent(
            amount=Decimal("50"),
            flow=CashFlow.OUTFLOW,
            kind=BalanceEventKind.EXPENSE_BOOKED,
            balance_after=Decimal("-50"),
        )
        inflow = BalanceEvent(
            amount=Decimal("50"),
            flow=CashFlow.INFLOW,
            kind=BalanceEventKind.MANUAL_DEPOSIT,
            balance_after=Decimal("50"),
        )
        assert outflow.signed_amount == Decimal("-50")
        assert inflow.signed_amount == Decimal("50")

    def test_reversal_requires_reversed_kind(self):
        """Test that a reversal must name what it undoes."""
        with pytest.raises(ValidationError, match="must name the reversed kind"):
            BalanceEvent(
                amount=Decimal("50"),
                flow=CashFlow.INFLOW,
                kind=BalanceEventKind.REVERSAL,
                balance_after=Decimal("0"),
            )

    def test_reversal_cannot_reverse_reversal(self):
        """Test reversal_of cannot itself be a reversal."""
        with pytest.raises(ValidationError):
            BalanceEvent(
                amount=Decimal("50"),
                flow=CashFlow.INFLOW,
                kind=BalanceEventKind.REVERSAL,
                reversal_of=BalanceEventKind.REVERSAL,
                balance_after=Decimal("0"),
            )

    def test_only_reversals_set_reversal_of(self):
        """Test non-reversal events cannot set reversal_of."""
        with pytest.raises(ValidationError, match="Only reversal events"):
            BalanceEvent(
                amount=Decimal("50"),
                flow=CashFlow.OUTFLOW,
                kind=BalanceEventKind.EXPENSE_BOOKED,
                reversal_of=BalanceEventKind.EXPENSE_BOOKED,
                balance_after=Decimal("0"),
            )

    def test_event_amount_must_be_positive(self):
        """Test that event amounts are magnitudes."""
        with pytest.raises(ValidationError):
            BalanceEvent(
                amount=Decimal("0"),
                flow=CashFlow.INFLOW,
                kind=BalanceEventKind.MANUAL_DEPOSIT,
                balance_after=Decimal("0"),
            )


class TestLedgerState:
    """Tests for the ledger state container."""

    def test_empty_state(self):
        """Test the default state."""
        state = LedgerState()
        assert state.records == {}
        assert state.balance == Decimal("0")
        assert state.history == ()

    def test_record_key_must_match_id(self):
        """Test records must be keyed by their own id."""
        record = ExpenseRecord(amount=Decimal("1"), category="food")
        with pytest.raises(ValidationError, match="stored under"):
            LedgerState(records={"other-id": record})

    def test_state_json_round_trip_keeps_variants(self):
        """Test that a saved state comes back with the right record types."""
        expense = ExpenseRecord(amount=Decimal("12.50"), category="food")
        payable = PayableRecord(amount=Decimal("300"), category="rent")
        state = AppState(
            ledger=LedgerState(
                records={expense.id: expense, payable.id: payable},
                balance=Decimal("-12.50"),
            )
        )

        restored = AppState.model_validate_json(state.model_dump_json())

        assert restored == state
        assert isinstance(restored.ledger.records[payable.id], PayableRecord)
        assert restored.ledger.balance == Decimal("-12.50")


class TestPreferences:
    """Tests for display preferences."""

    def test_defaults(self):
        """Test default preferences."""
        preferences = Preferences()
        assert preferences.currency == DEFAULT_CURRENCY
        assert preferences.currency.code == "SAR"
        assert preferences.dark_mode is False
        assert preferences.balance_hidden is False

    def test_get_currency_is_case_insensitive(self):
        """Test currency lookup by code."""
        assert get_currency("usd").symbol == "$"

    def test_get_currency_rejects_unknown(self):
        """Test that unsupported currencies raise KeyError."""
        with pytest.raises(KeyError):
            get_currency("XYZ")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            description="State saved",
        )
        assert event.event_type == AuditEventType.STATE_SAVED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            description="Expense created",
            details={"amount": "50"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "record_created"
        assert log_dict["details"]["amount"] == "50"

    def test_audit_event_to_json_line(self):
        """Test conversion to a single JSON line."""
        event = AuditEventBuilder.state_cleared()
        line = event.to_json_line()
        assert "\n" not in line
        assert json.loads(line)["event_type"] == "state_cleared"

    def test_audit_event_builder_record_created(self):
        """Test AuditEventBuilder.record_created."""
        correlation_id = uuid4()

        event = AuditEventBuilder.record_created(
            record_id="txn-1",
            kind="expense",
            amount="50",
            impact="-50",
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.RECORD_CREATED
        assert event.entity_id == "txn-1"
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True

    def test_audit_event_builder_save_failed(self):
        """Test AuditEventBuilder.save_failed is an error."""
        event = AuditEventBuilder.save_failed(error_message="disk full")
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            record_id="txn-1",
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            record_id="txn-1",
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="occurred_at",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0

    def test_severity_must_be_known(self):
        """Test that unknown severities are rejected."""
        with pytest.raises(ValidationError):
            ValidationIssue(
                field="amount",
                issue_type="x",
                message="x",
                severity="fatal",
            )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
