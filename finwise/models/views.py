"""
Derived View Models

Aggregates computed from the record collections. These are never stored;
the analytics layer rebuilds them from the current snapshot on every render.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from finwise.models.records import SavingsGoal, Transaction


class CategoryTotal(BaseModel):
    """Expense total for one category."""

    category: str
    total: float = Field(ge=0)
    share_pct: float = Field(
        default=0.0,
        description="Share of the expenses the ranking was built from (0-100)"
    )


class FinancialSummary(BaseModel):
    """Headline numbers over a set of transactions and goals."""

    total_income: float
    total_expenses: float
    net_savings: float
    savings_rate: float = Field(
        description="net / income as a percentage; 0 when there is no income"
    )
    goal_count: int = Field(ge=0)
    goals_target_total: float = 0.0
    goals_current_total: float = 0.0
    goals_progress_pct: float = 0.0


class MonthlyPoint(BaseModel):
    """One month of the income/expense trend."""

    month_start: dt.date
    label: str = Field(description="Month abbreviation, e.g. 'Jan'")
    income: float
    expenses: float
    savings: float


class DailyPoint(BaseModel):
    """One day of the spending trend."""

    day: dt.date
    label: str = Field(description="Weekday abbreviation, e.g. 'Mon'")
    amount: float


class GoalPacing(BaseModel):
    """
    Progress and required pace for one savings goal.

    days_remaining keeps its sign; display_days_remaining floors it at zero.
    required_monthly_pace is None unless the deadline is still ahead.
    """

    goal_id: str
    progress_pct: float
    remaining: float
    days_remaining: int
    required_monthly_pace: Optional[float] = None

    @property
    def display_days_remaining(self) -> int:
        return max(self.days_remaining, 0)

    @property
    def is_overdue(self) -> bool:
        return self.days_remaining <= 0 and self.remaining > 0


class DashboardView(BaseModel):
    """Everything the dashboard tab renders for one reference date."""

    reference_date: dt.date
    month_income: float
    month_expenses: float
    month_net: float
    month_transaction_count: int
    largest_month_expense: float
    top_categories: list[CategoryTotal] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(default_factory=list)
    summary: FinancialSummary


class ReportsView(BaseModel):
    """Everything the reports tab renders for one reference date."""

    reference_date: dt.date
    summary: FinancialSummary
    monthly_trend: list[MonthlyPoint] = Field(default_factory=list)
    month_categories: list[CategoryTotal] = Field(default_factory=list)
    daily_trend: list[DailyPoint] = Field(default_factory=list)
    daily_average: float = 0.0


class GoalsView(BaseModel):
    """Goals tab: each goal with its pacing, plus the savings insight."""

    goals: list[SavingsGoal] = Field(default_factory=list)
    pacing: dict[str, GoalPacing] = Field(default_factory=dict)
    monthly_savings: float = 0.0

    @property
    def show_savings_insight(self) -> bool:
        return self.monthly_savings > 0
