"""
Data Models Package

This package contains all Pydantic models used in FinWise.
All records flowing through the system must conform to these schemas.
"""

from finwise.models.records import (
    ExpenseCategory,
    GoalCategory,
    PaymentMethod,
    SavingsGoal,
    Transaction,
    TransactionKind,
    dump_goals,
    dump_transactions,
    load_goals,
    load_transactions,
    new_record_id,
)
from finwise.models.views import (
    CategoryTotal,
    DailyPoint,
    DashboardView,
    FinancialSummary,
    GoalPacing,
    GoalsView,
    MonthlyPoint,
    ReportsView,
)
from finwise.models.validation import ValidationIssue
from finwise.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "ExpenseCategory",
    "GoalCategory",
    "PaymentMethod",
    "SavingsGoal",
    "Transaction",
    "TransactionKind",
    "dump_goals",
    "dump_transactions",
    "load_goals",
    "load_transactions",
    "new_record_id",
    # View models
    "CategoryTotal",
    "DailyPoint",
    "DashboardView",
    "FinancialSummary",
    "GoalPacing",
    "GoalsView",
    "MonthlyPoint",
    "ReportsView",
    # Validation
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
