"""
Record Validation

DESIGN DECISION: Validation happens BEFORE a record reaches the ledger.
The reconciliation engine assumes valid input (it only re-checks the
amount), so everything a user can get wrong is caught here.

Checks:
- Category belongs to the record kind
- Amount is positive
- Dates are plausible (future dates, expected date before the record)
- Absurdly large amounts

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the user can correct the form.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from smart_budget.config import AppSettings, get_settings
from smart_budget.models.record import ExpenseRecord, Record, RecordKind
from smart_budget.models.validation import ValidationIssue, ValidationResult
from smart_budget.validation.categories import categories_for


def _is_positive(amount) -> bool:
    """NaN and infinity are never valid amounts."""
    if amount is None:
        return False
    amount = Decimal(str(amount))
    return amount.is_finite() and amount > 0


class RecordValidator:
    """Validates records submitted from the UI."""

    def __init__(self, settings: Optional[AppSettings] = None):
        """
        Initialize validator.

        Args:
            settings: Thresholds to use. Defaults to the app settings.
        """
        self._settings = settings or get_settings().app

    def _validate_fields(self, record: Record) -> list[ValidationIssue]:
        """Hard errors: the record must not be saved as-is."""
        issues = []

        if not _is_positive(record.amount):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
                suggested_fix="Enter a positive amount",
            ))

        allowed = categories_for(RecordKind(record.kind))
        if not record.category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
                suggested_fix="Pick a category from the list",
            ))
        elif record.category not in allowed:
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=f"'{record.category}' is not a valid {record.kind} category",
                severity="error",
                suggested_fix=f"Use one of: {', '.join(allowed)}",
            ))

        if record.occurred_at is None:
            issues.append(ValidationIssue(
                field="occurred_at",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))

        return issues

    def _validate_semantic(self, record: Record) -> list[ValidationIssue]:
        """Soft checks: shown to the user, but don't block saving."""
        issues = []
        today = date.today()

        if record.occurred_at is not None:
            max_future = today + timedelta(days=self._settings.future_date_tolerance_days)
            if record.occurred_at.date() > max_future:
                issues.append(ValidationIssue(
                    field="occurred_at",
                    issue_type="future_date",
                    message=f"Date ({record.occurred_at.date()}) is in the future",
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))

        max_amount = Decimal(str(self._settings.max_record_amount))
        if _is_positive(record.amount) and record.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({record.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if not isinstance(record, ExpenseRecord) and record.expected_date is not None:
            if (
                record.occurred_at is not None
                and record.expected_date < record.occurred_at.date()
            ):
                issues.append(ValidationIssue(
                    field="expected_date",
                    issue_type="inconsistent",
                    message="Expected date is before the record date",
                    severity="warning",
                    suggested_fix="Please verify both dates",
                ))

        return issues

    def validate(self, record: Record) -> ValidationResult:
        """
        Run all checks on a record.

        Returns:
            ValidationResult with all issues found
        """
        issues = self._validate_fields(record)
        issues.extend(self._validate_semantic(record))

        warnings = [issue.message for issue in issues if issue.severity == "warning"]
        is_valid = not any(issue.severity == "error" for issue in issues)

        return ValidationResult(
            record_id=record.id,
            is_valid=is_valid,
            issues=issues,
            warnings=warnings,
        )

    def validate_adjustment(self, amount: Decimal) -> ValidationResult:
        """Check a manual deposit/withdrawal amount."""
        issues = []
        if not _is_positive(amount):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
                suggested_fix="Enter a positive amount",
            ))
        return ValidationResult(
            record_id="balance",
            is_valid=not issues,
            issues=issues,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Generate a short summary of validation results for the UI."""
        if result.is_valid and not result.warnings:
            return "✅ All checks passed."

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
