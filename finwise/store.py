"""
Record Store

DESIGN DECISION: One store object owns both collections. Consumers get
read-only snapshots (tuples of frozen models) and change data only through
the methods below, so persistence happens in exactly one place.

Guarantees:
- Validation runs before any mutation; a failure leaves both collections as they were
- After every successful mutation the whole collection is written under its key
- The write happens before the in-memory swap, so memory never runs ahead of storage
- Unreadable or corrupt stored data loads as an empty collection
- Deleting an unknown id is a no-op
"""

from collections.abc import Mapping
from datetime import date
from typing import Any, Callable, Optional, TypeVar

import structlog
from pydantic import ValidationError

from finwise.audit import AuditLogger
from finwise.models.audit import AuditEvent, AuditEventBuilder
from finwise.models.records import (
    SavingsGoal,
    Transaction,
    dump_goals,
    dump_transactions,
    load_goals,
    load_transactions,
)
from finwise.models.validation import ValidationIssue
from finwise.services.storage import KeyValueStorage, StorageReadError
from finwise.validation import RecordValidationError, RecordValidator

T = TypeVar("T")

logger = structlog.get_logger("finwise.store")


class RecordStore:
    """
    Holds the transaction and savings goal collections.

    Transactions are kept most-recent-first: new entries are prepended.
    Goals are kept in creation order: new entries are appended.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        transactions_key: str = "expenses",
        goals_key: str = "savingsGoals",
    ):
        self._storage = storage
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger
        self._transactions_key = transactions_key
        self._goals_key = goals_key

        self._transactions: list[Transaction] = []
        self._goals: list[SavingsGoal] = []
        self.reload()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Snapshot of all transactions, most recent first."""
        return tuple(self._transactions)

    @property
    def goals(self) -> tuple[SavingsGoal, ...]:
        """Snapshot of all savings goals, in creation order."""
        return tuple(self._goals)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self._transactions if t.id == transaction_id), None)

    def get_goal(self, goal_id: str) -> Optional[SavingsGoal]:
        return next((g for g in self._goals if g.id == goal_id), None)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def add_transaction(
        self,
        fields: Mapping[str, Any],
        today: Optional[date] = None,
    ) -> Transaction:
        """
        Validate form fields and prepend a new transaction.

        `today` is the default date when the fields carry none.

        Raises:
            InvalidAmountError: If the amount is not a positive number
            RecordValidationError: If required fields are missing or invalid
            StorageWriteError: If the collection could not be persisted
        """
        cleaned = self._validated("transaction", self._validator.validate_transaction, fields, today)
        transaction = self._build("transaction", Transaction, cleaned)

        updated = [transaction] + self._transactions
        self._save_transactions(updated)

        self._audit(AuditEventBuilder.transaction_added(
            transaction_id=transaction.id,
            kind=transaction.kind.value,
            category=transaction.category,
            amount=transaction.amount,
        ))
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        """
        Remove a transaction by id.

        Returns:
            True if a transaction was removed, False if the id was unknown
        """
        updated = [t for t in self._transactions if t.id != transaction_id]
        if len(updated) == len(self._transactions):
            return False

        self._save_transactions(updated)
        self._audit(AuditEventBuilder.transaction_deleted(transaction_id))
        return True

    # ------------------------------------------------------------------
    # Savings goals
    # ------------------------------------------------------------------

    def add_goal(self, fields: Mapping[str, Any]) -> SavingsGoal:
        """
        Validate form fields and append a new goal with nothing saved yet.

        Raises:
            InvalidAmountError: If the target is not a positive number
            RecordValidationError: If required fields are missing or invalid
            StorageWriteError: If the collection could not be persisted
        """
        cleaned = self._validated("goal", self._validator.validate_goal, fields)
        goal = self._build("goal", SavingsGoal, {**cleaned, "current_amount": 0.0})

        updated = self._goals + [goal]
        self._save_goals(updated)

        self._audit(AuditEventBuilder.goal_created(
            goal_id=goal.id,
            name=goal.name,
            target_amount=goal.target_amount,
        ))
        return goal

    def contribute(self, goal_id: str, amount: Any) -> Optional[SavingsGoal]:
        """
        Add a contribution to a goal's running total.

        There is no cap at the target; over-funding is kept as is.

        Returns:
            The updated goal, or None if no goal has this id

        Raises:
            InvalidAmountError: If amount is not a positive number
            StorageWriteError: If the collection could not be persisted
        """
        value = self._validated("contribution", self._validator.validate_contribution, amount)

        goal = self.get_goal(goal_id)
        if goal is None:
            logger.warning("contribution_unknown_goal", goal_id=goal_id)
            return None

        funded = goal.with_contribution(value)
        updated = [funded if g.id == goal_id else g for g in self._goals]
        self._save_goals(updated)

        self._audit(AuditEventBuilder.goal_contribution(
            goal_id=goal_id,
            amount=value,
            new_total=funded.current_amount,
        ))
        return funded

    def delete_goal(self, goal_id: str) -> bool:
        """
        Remove a goal by id.

        Returns:
            True if a goal was removed, False if the id was unknown
        """
        updated = [g for g in self._goals if g.id != goal_id]
        if len(updated) == len(self._goals):
            return False

        self._save_goals(updated)
        self._audit(AuditEventBuilder.goal_deleted(goal_id))
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def reload(self) -> None:
        """(Re)load both collections from storage."""
        self._transactions = self._load(self._transactions_key, load_transactions)
        self._goals = self._load(self._goals_key, load_goals)

    def _load(self, key: str, parse: Callable[[str], list[T]]) -> list[T]:
        """Load one collection, degrading to empty on any read or parse failure."""
        try:
            raw = self._storage.get(key)
        except StorageReadError as e:
            self._load_failed(key, str(e))
            return []

        if raw is None or not raw.strip():
            return []

        try:
            return parse(raw)
        except ValidationError as e:
            self._load_failed(key, f"{e.error_count()} invalid entries or malformed JSON")
            return []

    def _load_failed(self, key: str, error: str) -> None:
        logger.warning("collection_load_failed", key=key, error=error)
        self._audit(AuditEventBuilder.storage_load_failed(key=key, error_message=error))

    def _save_transactions(self, transactions: list[Transaction]) -> None:
        self._storage.set(self._transactions_key, dump_transactions(transactions))
        self._transactions = transactions

    def _save_goals(self, goals: list[SavingsGoal]) -> None:
        self._storage.set(self._goals_key, dump_goals(goals))
        self._goals = goals

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validated(self, entity_type: str, check: Callable[..., T], *args: Any) -> T:
        try:
            return check(*args)
        except RecordValidationError as e:
            self._audit(AuditEventBuilder.validation_failed(
                entity_type=entity_type,
                issues=[issue.model_dump() for issue in e.issues],
            ))
            raise

    def _build(self, entity_type: str, model: Callable[..., T], cleaned: dict) -> T:
        """Construct a record, reporting model constraint failures as validation errors."""
        try:
            return model(**cleaned)
        except ValidationError as e:
            issues = [
                ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or entity_type,
                    issue_type=error["type"],
                    message=error["msg"],
                )
                for error in e.errors()
            ]
            self._audit(AuditEventBuilder.validation_failed(
                entity_type=entity_type,
                issues=[issue.model_dump() for issue in issues],
            ))
            raise RecordValidationError(issues) from e

    def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)
