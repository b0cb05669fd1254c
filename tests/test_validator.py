"""Tests for record validation and categories."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from smart_budget.config import AppSettings
from smart_budget.models.record import (
    ExpenseRecord,
    PayableRecord,
    ReceivableRecord,
    RecordKind,
)
from smart_budget.validation import (
    CATEGORIES,
    OTHER_CATEGORY,
    RecordValidator,
    categories_for,
)


@pytest.fixture
def validator():
    settings = AppSettings(
        _env_file=None,
        max_record_amount=1000.0,
        future_date_tolerance_days=7,
    )
    return RecordValidator(settings)


class TestCategories:
    """Tests for the category lists."""

    def test_every_kind_has_categories(self):
        """Test each record kind has its own list."""
        for kind in RecordKind:
            assert categories_for(kind)

    def test_every_list_ends_with_other(self):
        """Test 'other' is always available as the last choice."""
        for categories in CATEGORIES.values():
            assert categories[-1] == OTHER_CATEGORY

    def test_accepts_plain_string_kind(self):
        """Test lookup with the record's kind tag."""
        assert categories_for("payable") == CATEGORIES[RecordKind.PAYABLE]


class TestRecordValidator:
    """Tests for RecordValidator."""

    def test_valid_expense(self, validator):
        """Test a normal expense passes."""
        record = ExpenseRecord(amount=Decimal("25"), category="food")
        result = validator.validate(record)

        assert result.is_valid
        assert result.issues == []
        assert result.record_id == record.id

    def test_category_must_match_kind(self, validator):
        """Test an expense category is rejected for a receivable."""
        record = ReceivableRecord(amount=Decimal("25"), category="food")
        result = validator.validate(record)

        assert not result.is_valid
        assert result.has_errors
        assert result.issues[0].field == "category"
        assert "loan" in result.issues[0].suggested_fix

    def test_shared_category_names(self, validator):
        """Test 'loan' is valid for both receivables and payables."""
        assert validator.validate(
            ReceivableRecord(amount=Decimal("25"), category="loan")
        ).is_valid
        assert validator.validate(
            PayableRecord(amount=Decimal("25"), category="loan")
        ).is_valid

    def test_zero_amount_is_error(self, validator):
        """Test an amount that bypassed model validation is caught."""
        record = ExpenseRecord(amount=Decimal("5"), category="food")
        invalid = record.model_copy(update={"amount": Decimal("0")})

        result = validator.validate(invalid)

        assert not result.is_valid
        assert result.error_count == 1

    @pytest.mark.parametrize("bad", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_amount_is_error(self, validator, bad):
        """Test NaN and infinite amounts are errors, not exceptions."""
        record = ExpenseRecord(amount=Decimal("5"), category="food")
        invalid = record.model_copy(update={"amount": Decimal(bad)})

        result = validator.validate(invalid)

        assert not result.is_valid
        assert result.issues[0].field == "amount"

    def test_large_amount_is_warning(self, validator):
        """Test unusually large amounts warn but don't block."""
        record = ExpenseRecord(amount=Decimal("5000"), category="shopping")
        result = validator.validate(record)

        assert result.is_valid
        assert not result.has_errors
        assert len(result.warnings) == 1
        assert result.issues[0].issue_type == "suspicious_value"

    def test_future_date_is_warning(self, validator):
        """Test dates far in the future warn."""
        record = ExpenseRecord(
            amount=Decimal("5"),
            category="food",
            occurred_at=datetime.now() + timedelta(days=30),
        )
        result = validator.validate(record)

        assert result.is_valid
        assert result.issues[0].issue_type == "future_date"

    def test_near_future_date_is_allowed(self, validator):
        """Test dates within the tolerance don't warn."""
        record = ExpenseRecord(
            amount=Decimal("5"),
            category="food",
            occurred_at=datetime.now() + timedelta(days=2),
        )
        assert validator.validate(record).issues == []

    def test_expected_date_before_record_date(self, validator):
        """Test an expected date before the record date warns."""
        record = PayableRecord(
            amount=Decimal("100"),
            category="rent",
            occurred_at=datetime(2026, 3, 10, 12, 0),
            expected_date=date(2026, 3, 1),
        )
        result = validator.validate(record)

        assert result.is_valid
        assert result.issues[0].field == "expected_date"

    def test_validate_adjustment(self, validator):
        """Test manual adjustment amounts."""
        assert validator.validate_adjustment(Decimal("10")).is_valid
        assert not validator.validate_adjustment(Decimal("0")).is_valid
        assert not validator.validate_adjustment(Decimal("-1")).is_valid
        assert not validator.validate_adjustment(Decimal("NaN")).is_valid

    def test_user_friendly_summary(self, validator):
        """Test the summary shown in the UI."""
        ok = validator.validate(ExpenseRecord(amount=Decimal("5"), category="food"))
        assert validator.get_user_friendly_summary(ok) == "✅ All checks passed."

        bad = validator.validate(
            ReceivableRecord(amount=Decimal("5000"), category="rent")
        )
        summary = validator.get_user_friendly_summary(bad)
        assert "Please fix the following" in summary
        assert "Please verify the following" in summary


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
