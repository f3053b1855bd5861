"""
View Builders

Assemble the dashboard, reports and goals views from the aggregation
functions. Each builder is a pure function of the record snapshot and a
reference date.
"""

from collections.abc import Sequence

from finwise.analytics.aggregation import (
    DateLike,
    as_date,
    daily_average,
    daily_series,
    goal_pacing,
    month_transactions,
    monthly_series,
    summarize,
    top_categories,
    total_expenses,
    total_income,
)
from finwise.models.records import SavingsGoal, Transaction, TransactionKind
from finwise.models.views import DashboardView, GoalsView, ReportsView


def build_dashboard(
    transactions: Sequence[Transaction],
    goals: Sequence[SavingsGoal],
    reference: DateLike,
    recent_limit: int = 5,
    top_limit: int = 5,
) -> DashboardView:
    """This month's numbers, recent activity and goal totals."""
    in_month = month_transactions(transactions, reference)
    income = total_income(in_month)
    expenses = total_expenses(in_month)
    month_expense_amounts = [t.amount for t in in_month if t.kind == TransactionKind.EXPENSE]

    return DashboardView(
        reference_date=as_date(reference),
        month_income=income,
        month_expenses=expenses,
        month_net=income - expenses,
        month_transaction_count=len(in_month),
        largest_month_expense=max(month_expense_amounts, default=0.0),
        top_categories=top_categories(in_month, top_limit),
        recent_transactions=list(transactions[:recent_limit]),
        summary=summarize(transactions, goals),
    )


def build_reports(
    transactions: Sequence[Transaction],
    reference: DateLike,
    months: int = 6,
    days: int = 7,
) -> ReportsView:
    """Trends, this month's category split and all-time totals."""
    daily = daily_series(transactions, reference, days)

    return ReportsView(
        reference_date=as_date(reference),
        summary=summarize(transactions),
        monthly_trend=monthly_series(transactions, reference, months),
        month_categories=top_categories(month_transactions(transactions, reference)),
        daily_trend=daily,
        daily_average=daily_average(daily),
    )


def build_goals_view(
    transactions: Sequence[Transaction],
    goals: Sequence[SavingsGoal],
    reference: DateLike,
) -> GoalsView:
    """Goals with pacing, plus all-time income minus expenses for the insight banner."""
    return GoalsView(
        goals=list(goals),
        pacing={goal.id: goal_pacing(goal, reference) for goal in goals},
        monthly_savings=total_income(transactions) - total_expenses(transactions),
    )
