"""
Analytics Package

Pure aggregation over record snapshots, and the view builders
that the dashboard, reports and goals tabs render.
"""

from finwise.analytics.aggregation import (
    category_breakdown,
    daily_average,
    daily_series,
    filter_transactions,
    goal_pacing,
    goals_progress,
    month_transactions,
    month_window,
    monthly_series,
    net_savings,
    percentage,
    recent_months_window,
    running_totals,
    savings_rate,
    summarize,
    top_categories,
    top_category,
    total_expenses,
    total_income,
    totals,
    week_window,
    windowed,
)
from finwise.analytics.views import (
    build_dashboard,
    build_goals_view,
    build_reports,
)

__all__ = [
    "category_breakdown",
    "daily_average",
    "daily_series",
    "filter_transactions",
    "goal_pacing",
    "goals_progress",
    "month_transactions",
    "month_window",
    "monthly_series",
    "net_savings",
    "percentage",
    "recent_months_window",
    "running_totals",
    "savings_rate",
    "summarize",
    "top_categories",
    "top_category",
    "total_expenses",
    "total_income",
    "totals",
    "week_window",
    "windowed",
    "build_dashboard",
    "build_goals_view",
    "build_reports",
]
