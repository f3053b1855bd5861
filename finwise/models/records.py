"""
Core Record Models for FinWise

These models define the two persisted collections: transactions and
savings goals. They are designed to:
1. Enforce the record invariants at runtime (positive amounts, non-empty text)
2. Serialize to the stored layout (camelCase keys, ISO dates, plain strings)
3. Stay immutable; the store replaces records instead of editing them

DESIGN DECISION: Amounts are plain floats. Money is summed naively, exactly
as the stored JSON numbers are, rather than through Decimal arithmetic.
"""

import datetime as dt
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
)
from pydantic.alias_generators import to_camel


def new_record_id() -> str:
    """Generate a fresh unique record identifier."""
    return uuid4().hex


# =============================================================================
# ENUMS - Values offered by the forms
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of a transaction. Amounts are always positive."""
    INCOME = "income"
    EXPENSE = "expense"


class ExpenseCategory(str, Enum):
    """
    Categories offered when logging a transaction.

    DESIGN DECISION: Records store the plain string, so the set is
    open-ended. OTHER is the catch-all and unknown values still load.
    """
    FOOD_AND_DINING = "Food & Dining"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS_AND_UTILITIES = "Bills & Utilities"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    GROCERIES = "Groceries"
    OTHER = "Other"


class PaymentMethod(str, Enum):
    """How a transaction was paid."""
    CASH = "cash"
    CREDIT = "credit"
    DEBIT = "debit"
    MOBILE = "mobile"
    BANK = "bank"

    @property
    def label(self) -> str:
        return _PAYMENT_METHOD_LABELS[self]


_PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "Cash",
    PaymentMethod.CREDIT: "Credit Card",
    PaymentMethod.DEBIT: "Debit Card",
    PaymentMethod.MOBILE: "Mobile Payment",
    PaymentMethod.BANK: "Bank Transfer",
}


class GoalCategory(str, Enum):
    """Categories offered when creating a savings goal."""
    EMERGENCY_FUND = "Emergency Fund"
    VACATION = "Vacation"
    HOME_PURCHASE = "Home Purchase"
    CAR = "Car"
    EDUCATION = "Education"
    RETIREMENT = "Retirement"
    OTHER = "Other"


# =============================================================================
# RECORDS
# =============================================================================

_RECORD_CONFIG = ConfigDict(
    str_strip_whitespace=True,
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


class Transaction(BaseModel):
    """
    A single income or expense record.

    Created once on submission and never mutated afterwards.
    Direction is encoded by `kind`, never by the sign of `amount`.
    """
    model_config = _RECORD_CONFIG

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique record identifier"
    )
    amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Positive amount"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name (see ExpenseCategory)"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Free text description"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    # Older stored data used "type" for this field
    kind: TransactionKind = Field(
        default=TransactionKind.EXPENSE,
        validation_alias=AliasChoices("kind", "type"),
        description="income or expense"
    )
    payment_method: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Payment method tag (see PaymentMethod)"
    )
    receipt_image: Optional[str] = Field(
        default=None,
        description="Opaque reference to a receipt image (data URL)"
    )

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    @property
    def signed_amount(self) -> float:
        """Amount with income positive and expenses negative."""
        return self.amount if self.is_income else -self.amount


class SavingsGoal(BaseModel):
    """
    A named savings target with a deadline.

    current_amount only ever grows through contributions.
    Over-funding past target_amount is allowed.
    """
    model_config = _RECORD_CONFIG

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique record identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Goal name"
    )
    target_amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount to reach"
    )
    current_amount: float = Field(
        default=0.0,
        ge=0,
        allow_inf_nan=False,
        description="Amount contributed so far"
    )
    deadline: dt.date = Field(
        ...,
        description="Date the goal should be reached by"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Goal category (see GoalCategory)"
    )

    def with_contribution(self, amount: float) -> "SavingsGoal":
        """Return a copy with `amount` added to the running total."""
        return self.model_copy(
            update={"current_amount": self.current_amount + amount}
        )


# Adapters for whole-collection (de)serialization
TransactionList = TypeAdapter(list[Transaction])
SavingsGoalList = TypeAdapter(list[SavingsGoal])


def dump_transactions(transactions: list[Transaction]) -> str:
    """Serialize transactions to the stored JSON layout."""
    return TransactionList.dump_json(transactions, by_alias=True).decode("utf-8")


def load_transactions(raw: str) -> list[Transaction]:
    """Parse transactions from stored JSON. Raises pydantic.ValidationError."""
    return TransactionList.validate_json(raw)


def dump_goals(goals: list[SavingsGoal]) -> str:
    """Serialize savings goals to the stored JSON layout."""
    return SavingsGoalList.dump_json(goals, by_alias=True).decode("utf-8")


def load_goals(raw: str) -> list[SavingsGoal]:
    """Parse savings goals from stored JSON. Raises pydantic.ValidationError."""
    return SavingsGoalList.validate_json(raw)
