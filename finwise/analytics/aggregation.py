"""
Aggregation Engine

DESIGN DECISION: Every function here is pure. It takes a snapshot of the
records (and, where time matters, an explicit reference date) and returns
a value. Nothing reads the wall clock, so every view is reproducible.

GUARANTEES:
- Inputs are never mutated
- Empty input gives zeros, never errors
- Division by zero gives 0, never NaN or infinity
"""

import calendar
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import Optional, Union

from finwise.models.records import SavingsGoal, Transaction, TransactionKind
from finwise.models.views import (
    CategoryTotal,
    DailyPoint,
    FinancialSummary,
    GoalPacing,
    MonthlyPoint,
)

DateLike = Union[date, datetime]

# Days per month used when converting a deadline into a monthly pace
DAYS_PER_MONTH = 30


def as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def percentage(part: float, whole: float) -> float:
    """part / whole * 100, or 0 when whole is 0."""
    if whole == 0:
        return 0.0
    return part / whole * 100


# =============================================================================
# TOTALS
# =============================================================================

def totals(transactions: Iterable[Transaction], kind: TransactionKind) -> float:
    """Sum of amounts of the given kind; 0 for empty input."""
    return sum((t.amount for t in transactions if t.kind == kind), 0.0)


def total_income(transactions: Iterable[Transaction]) -> float:
    return totals(transactions, TransactionKind.INCOME)


def total_expenses(transactions: Iterable[Transaction]) -> float:
    return totals(transactions, TransactionKind.EXPENSE)


def net_savings(transactions: Sequence[Transaction]) -> float:
    """Income minus expenses."""
    return total_income(transactions) - total_expenses(transactions)


def savings_rate(transactions: Sequence[Transaction]) -> float:
    """
    Net savings as a percentage of income.

    Returns 0 when there is no income. A negative rate (spending more
    than earned) keeps its sign.
    """
    income = total_income(transactions)
    return percentage(income - total_expenses(transactions), income)


def summarize(
    transactions: Sequence[Transaction],
    goals: Sequence[SavingsGoal] = (),
) -> FinancialSummary:
    """Headline numbers for a transaction set and the goals."""
    income = total_income(transactions)
    expenses = total_expenses(transactions)
    target_total = sum((g.target_amount for g in goals), 0.0)
    current_total = sum((g.current_amount for g in goals), 0.0)

    return FinancialSummary(
        total_income=income,
        total_expenses=expenses,
        net_savings=income - expenses,
        savings_rate=percentage(income - expenses, income),
        goal_count=len(goals),
        goals_target_total=target_total,
        goals_current_total=current_total,
        goals_progress_pct=percentage(current_total, target_total),
    )


# =============================================================================
# CATEGORIES
# =============================================================================

def category_breakdown(transactions: Iterable[Transaction]) -> dict[str, float]:
    """
    Expense totals per category.

    Keys are the categories actually seen, in first-seen order.
    Income transactions are ignored.
    """
    breakdown: dict[str, float] = {}
    for t in transactions:
        if t.kind != TransactionKind.EXPENSE:
            continue
        breakdown[t.category] = breakdown.get(t.category, 0.0) + t.amount
    return breakdown


def top_categories(
    transactions: Sequence[Transaction],
    n: Optional[int] = None,
) -> list[CategoryTotal]:
    """
    Expense categories ranked by total, largest first.

    Equal totals keep first-seen order (sorted() is stable).
    At most n entries are returned; None means all.
    """
    breakdown = category_breakdown(transactions)
    overall = sum(breakdown.values(), 0.0)

    ranked = sorted(breakdown.items(), key=lambda item: item[1], reverse=True)
    if n is not None:
        ranked = ranked[: max(0, n)]

    return [
        CategoryTotal(
            category=category,
            total=total,
            share_pct=percentage(total, overall),
        )
        for category, total in ranked
    ]


def top_category(transactions: Sequence[Transaction]) -> Optional[CategoryTotal]:
    """The single largest expense category, or None without expenses."""
    ranked = top_categories(transactions, 1)
    return ranked[0] if ranked else None


# =============================================================================
# TIME WINDOWS
# =============================================================================

def windowed(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
) -> list[Transaction]:
    """Transactions dated within [start, end], both ends inclusive, order kept."""
    start_date, end_date = as_date(start), as_date(end)
    return [t for t in transactions if start_date <= t.date <= end_date]


def month_start(reference: DateLike) -> date:
    return as_date(reference).replace(day=1)


def month_end(reference: DateLike) -> date:
    ref = as_date(reference)
    return ref.replace(day=calendar.monthrange(ref.year, ref.month)[1])


def month_window(reference: DateLike) -> tuple[date, date]:
    """First and last day of the reference date's month."""
    return month_start(reference), month_end(reference)


def shift_months(reference: DateLike, months: int) -> date:
    """First day of the month `months` away from the reference month."""
    ref = as_date(reference)
    index = ref.year * 12 + (ref.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def week_window(reference: DateLike, days: int = 7) -> tuple[date, date]:
    """The `days` calendar days ending on (and including) the reference date."""
    end = as_date(reference)
    return end - timedelta(days=days - 1), end


def recent_months_window(reference: DateLike, months: int = 6) -> tuple[date, date]:
    """From the first day `months - 1` months back to the end of the reference month."""
    return shift_months(reference, -(months - 1)), month_end(reference)


def month_transactions(
    transactions: Iterable[Transaction],
    reference: DateLike,
) -> list[Transaction]:
    """Transactions in the reference date's month."""
    return windowed(transactions, *month_window(reference))


# =============================================================================
# SERIES
# =============================================================================

def monthly_series(
    transactions: Sequence[Transaction],
    reference: DateLike,
    months: int = 6,
) -> list[MonthlyPoint]:
    """Income, expenses and savings per month, oldest month first, ending at the reference month."""
    points = []
    for offset in range(months - 1, -1, -1):
        first = shift_months(reference, -offset)
        in_month = windowed(transactions, first, month_end(first))
        income = total_income(in_month)
        expenses = total_expenses(in_month)
        points.append(MonthlyPoint(
            month_start=first,
            label=first.strftime("%b"),
            income=income,
            expenses=expenses,
            savings=income - expenses,
        ))
    return points


def daily_series(
    transactions: Sequence[Transaction],
    reference: DateLike,
    days: int = 7,
) -> list[DailyPoint]:
    """Expense total per day, oldest day first, ending at the reference date."""
    start, _ = week_window(reference, days)
    by_day: dict[date, float] = {}
    for t in transactions:
        if t.kind == TransactionKind.EXPENSE:
            by_day[t.date] = by_day.get(t.date, 0.0) + t.amount

    points = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        points.append(DailyPoint(
            day=day,
            label=day.strftime("%a"),
            amount=by_day.get(day, 0.0),
        ))
    return points


def daily_average(points: Sequence[DailyPoint]) -> float:
    """Average spending per day over a daily series."""
    if not points:
        return 0.0
    return sum(p.amount for p in points) / len(points)


# =============================================================================
# GOALS
# =============================================================================

def goal_pacing(goal: SavingsGoal, now: DateLike) -> GoalPacing:
    """
    Progress and the monthly amount still needed to hit the deadline.

    required_monthly_pace = remaining / (days_remaining / 30), and is only
    defined while the deadline is in the future.
    """
    remaining = goal.target_amount - goal.current_amount
    days_remaining = (goal.deadline - as_date(now)).days

    pace = None
    if days_remaining > 0:
        pace = remaining / (days_remaining / DAYS_PER_MONTH)

    return GoalPacing(
        goal_id=goal.id,
        progress_pct=percentage(goal.current_amount, goal.target_amount),
        remaining=remaining,
        days_remaining=days_remaining,
        required_monthly_pace=pace,
    )


def goals_progress(goals: Sequence[SavingsGoal]) -> float:
    """Combined progress over all goals: sum(current) / sum(target) * 100."""
    return percentage(
        sum((g.current_amount for g in goals), 0.0),
        sum((g.target_amount for g in goals), 0.0),
    )


# =============================================================================
# LISTING
# =============================================================================

def filter_transactions(
    transactions: Iterable[Transaction],
    search: str = "",
    category: Optional[str] = None,
    kind: Optional[TransactionKind] = None,
) -> list[Transaction]:
    """
    Filter for the transaction list.

    search matches description or category, case-insensitive.
    category None or 'all' means any category; kind None means both kinds.
    """
    needle = search.strip().lower()
    result = []
    for t in transactions:
        if needle and needle not in t.description.lower() and needle not in t.category.lower():
            continue
        if category not in (None, "", "all") and t.category != category:
            continue
        if kind is not None and t.kind != kind:
            continue
        result.append(t)
    return result


def running_totals(transactions: Iterable[Transaction]) -> list[float]:
    """Cumulative signed total after each transaction, in the given order."""
    results = []
    balance = 0.0
    for t in transactions:
        balance += t.signed_amount
        results.append(balance)
    return results
