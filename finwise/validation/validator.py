"""
Record Field Validation

DESIGN DECISION: Form input is validated BEFORE the store is touched.
A failed validation raises with the full list of issues, and the
collections stay exactly as they were.

Checks:
- Required fields present and not blank
- Amounts parse to finite, positive numbers
- Dates parse as ISO calendar dates
- Transaction kind is income or expense

IMPORTANT: Validation NEVER silently fixes values.
Whitespace is trimmed, nothing else is corrected.
"""

import math
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from finwise.models.records import TransactionKind
from finwise.models.validation import ValidationIssue


class RecordValidationError(Exception):
    """Submitted fields failed validation. Nothing was mutated."""

    def __init__(self, issues: list[ValidationIssue], message: Optional[str] = None):
        self.issues = issues
        if message is None:
            message = "; ".join(issue.message for issue in issues) or "Invalid input"
        super().__init__(message)

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]


class InvalidAmountError(RecordValidationError):
    """An amount was missing, non-numeric, or not positive."""
    pass


def _first(fields: Mapping[str, Any], *names: str) -> Any:
    """Return the first present value among alternative field spellings."""
    for name in names:
        if name in fields:
            return fields[name]
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(value: Any) -> str:
    """Stripped string form of a field; enum members give their value."""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip()


def parse_amount(value: Any) -> Optional[float]:
    """
    Parse user input into a finite float.

    Returns None for missing, non-numeric, NaN or infinite input.
    Sign is preserved; callers decide whether zero or negatives are allowed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO-8601 calendar date, or pass a date through.

    Datetimes are reduced to their calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _amount_issue(field: str, raw: Any) -> Optional[ValidationIssue]:
    """Check that a required amount is present, numeric and positive."""
    if _is_blank(raw):
        return ValidationIssue(
            field=field,
            issue_type="missing",
            message=f"{field.replace('_', ' ').capitalize()} is required",
            suggested_fix="Enter an amount greater than zero",
        )
    amount = parse_amount(raw)
    if amount is None:
        return ValidationIssue(
            field=field,
            issue_type="not_a_number",
            message=f"{field.replace('_', ' ').capitalize()} must be a number",
            suggested_fix="Use digits and a decimal point, e.g. 12.50",
        )
    if amount <= 0:
        return ValidationIssue(
            field=field,
            issue_type="not_positive",
            message=f"{field.replace('_', ' ').capitalize()} must be greater than zero",
        )
    return None


def _required_issue(field: str, raw: Any) -> Optional[ValidationIssue]:
    if _is_blank(raw):
        return ValidationIssue(
            field=field,
            issue_type="missing",
            message=f"{field.replace('_', ' ').capitalize()} is required",
        )
    return None


def _raise_if_issues(issues: list[Optional[ValidationIssue]]) -> None:
    found = [issue for issue in issues if issue is not None]
    if not found:
        return
    # Amount problems alone surface as InvalidAmountError
    if all(issue.issue_type in ("not_a_number", "not_positive") for issue in found):
        raise InvalidAmountError(found)
    raise RecordValidationError(found)


class RecordValidator:
    """
    Validates raw form fields for transactions, goals and contributions.

    Field names may be given in snake_case or in the stored camelCase.
    Every method either returns the cleaned values or raises.
    """

    def validate_transaction(
        self,
        fields: Mapping[str, Any],
        today: Optional[date] = None,
    ) -> dict[str, Any]:
        """
        Validate transaction fields.

        Returns:
            Cleaned keyword arguments for Transaction

        Raises:
            InvalidAmountError: If only the amount is wrong
            RecordValidationError: For any other problem
        """
        raw_amount = _first(fields, "amount")
        raw_category = _first(fields, "category")
        raw_description = _first(fields, "description")
        raw_date = _first(fields, "date")
        raw_kind = _first(fields, "kind", "type")

        issues = [
            _amount_issue("amount", raw_amount),
            _required_issue("category", raw_category),
            _required_issue("description", raw_description),
        ]

        tx_date = today or date.today()
        if not _is_blank(raw_date):
            tx_date = parse_date(raw_date)
            if tx_date is None:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message="Date must be a calendar date (YYYY-MM-DD)",
                ))

        kind = TransactionKind.EXPENSE
        if not _is_blank(raw_kind):
            try:
                kind = TransactionKind(_text(raw_kind).lower())
            except ValueError:
                issues.append(ValidationIssue(
                    field="kind",
                    issue_type="invalid_value",
                    message="Transaction type must be 'income' or 'expense'",
                ))

        _raise_if_issues(issues)

        payment_method = _first(fields, "payment_method", "paymentMethod")
        receipt_image = _first(fields, "receipt_image", "receiptImage")

        return {
            "amount": parse_amount(raw_amount),
            "category": _text(raw_category),
            "description": _text(raw_description),
            "date": tx_date,
            "kind": kind,
            "payment_method": None if _is_blank(payment_method) else _text(payment_method),
            "receipt_image": None if _is_blank(receipt_image) else receipt_image,
        }

    def validate_goal(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate savings goal fields.

        Returns:
            Cleaned keyword arguments for SavingsGoal (without current_amount)
        """
        raw_name = _first(fields, "name")
        raw_target = _first(fields, "target_amount", "targetAmount")
        raw_deadline = _first(fields, "deadline")
        raw_category = _first(fields, "category")

        issues = [
            _required_issue("name", raw_name),
            _amount_issue("target_amount", raw_target),
            _required_issue("deadline", raw_deadline),
            _required_issue("category", raw_category),
        ]

        deadline = None
        if not _is_blank(raw_deadline):
            deadline = parse_date(raw_deadline)
            if deadline is None:
                issues.append(ValidationIssue(
                    field="deadline",
                    issue_type="invalid_format",
                    message="Deadline must be a calendar date (YYYY-MM-DD)",
                ))

        _raise_if_issues(issues)

        return {
            "name": _text(raw_name),
            "target_amount": parse_amount(raw_target),
            "deadline": deadline,
            "category": _text(raw_category),
        }

    def validate_contribution(self, amount: Any) -> float:
        """
        Validate a goal contribution.

        Raises:
            InvalidAmountError: If amount is missing, non-numeric or <= 0
        """
        issue = _amount_issue("amount", amount)
        if issue is not None:
            raise InvalidAmountError([issue])
        return parse_amount(amount)
