"""
Rule-Based Advice Engine

DESIGN DECISION: The assistant does NOT use a language model. A question
is lower-cased and matched against an ordered table of topics; the first
topic with a keyword in the question answers it from a template filled
with the user's own aggregates.

Priority order (first match wins):
    spending -> saving -> budget -> goal -> income -> overview -> default

CRITICAL BOUNDARIES:
- Deterministic: same question and same records, same answer
- Numbers come only from the aggregation engine
- Amounts are shown with two decimals, percentages with one
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Optional

from finwise.analytics.aggregation import (
    category_breakdown,
    percentage,
    summarize,
    top_category,
)
from finwise.models.records import SavingsGoal, Transaction
from finwise.models.views import CategoryTotal, FinancialSummary

# Savings rate (percent) considered healthy
TARGET_SAVINGS_RATE = 20.0

# Category spending above these shares of income triggers a tip
CATEGORY_INCOME_LIMITS = (
    ("Food & Dining", 0.15, "• Your food spending is high - try meal prepping to save 30-40%"),
    ("Entertainment", 0.10, "• Consider free entertainment alternatives to reduce costs"),
    ("Shopping", 0.10, "• Use the 24-hour rule before making non-essential purchases"),
)

# Share of expenses the savings tips are estimated to free up each month
ESTIMATED_SAVINGS_SHARE = 0.15

# Share of net savings suggested for goal contributions
GOAL_ALLOCATION_SHARE = 0.8

# Recommended split of income, in display order
BUDGET_ALLOCATION = (
    ("Housing", 0.30),
    ("Food & Dining", 0.15),
    ("Transportation", 0.15),
    ("Savings", 0.20),
    ("Entertainment", 0.05),
    ("Other", 0.15),
)

HELP_TEXT = (
    "I can help you with:\n\n"
    "• Analyzing your spending patterns\n"
    "• Savings tips and strategies\n"
    "• Budget recommendations\n"
    "• Savings goal advice\n"
    "• Income optimization ideas\n\n"
    "Try asking: 'How can I save more?' or 'Analyze my spending'"
)


@dataclass(frozen=True)
class AdviceContext:
    """Aggregates computed once per question and shared by all handlers."""

    transactions: Sequence[Transaction]
    goals: Sequence[SavingsGoal]
    summary: FinancialSummary
    categories: dict[str, float]
    top: Optional[CategoryTotal]
    currency: str = "$"

    def money(self, value: float) -> str:
        return f"{self.currency}{value:.2f}"

    @classmethod
    def build(
        cls,
        transactions: Sequence[Transaction],
        goals: Sequence[SavingsGoal],
        currency: str = "$",
    ) -> "AdviceContext":
        return cls(
            transactions=transactions,
            goals=goals,
            summary=summarize(transactions, goals),
            categories=category_breakdown(transactions),
            top=top_category(transactions),
            currency=currency,
        )


def pct(value: float) -> str:
    return f"{value:.1f}%"


# =============================================================================
# TOPIC HANDLERS
# =============================================================================

def spending_advice(ctx: AdviceContext) -> str:
    s = ctx.summary
    if s.total_expenses == 0:
        return (
            "You haven't logged any expenses yet. "
            "Start tracking your spending to get personalized insights!"
        )

    top_name = ctx.top.category if ctx.top else "N/A"
    top_total = ctx.top.total if ctx.top else 0.0
    within = "within" if s.savings_rate >= 0 else "beyond"
    remark = (
        "✅ Great job maintaining a healthy savings rate!"
        if s.savings_rate >= TARGET_SAVINGS_RATE
        else "⚠️ Try to save at least 20% of your income. Consider reducing discretionary spending."
    )
    return (
        "Based on your spending data:\n\n"
        f"💰 Total expenses: {ctx.money(s.total_expenses)}\n"
        f"📊 Top category: {top_name} ({ctx.money(top_total)})\n"
        f"📉 You're spending {within} your income.\n\n"
        f"{remark}"
    )


def saving_recommendations(ctx: AdviceContext) -> list[str]:
    """Tips that apply, in fixed order."""
    s = ctx.summary
    tips = []
    if s.savings_rate < TARGET_SAVINGS_RATE:
        tips.append("• Aim to save at least 20% of your income")
    for category, limit, tip in CATEGORY_INCOME_LIMITS:
        if ctx.categories.get(category, 0.0) > s.total_income * limit:
            tips.append(tip)
    return tips


def saving_advice(ctx: AdviceContext) -> str:
    tips = saving_recommendations(ctx)
    if not tips:
        return (
            "You're doing great with your savings! Keep maintaining your current "
            "habits and consider increasing your savings rate gradually."
        )
    estimate = ctx.summary.total_expenses * ESTIMATED_SAVINGS_SHARE
    return (
        "Here are personalized savings tips for you:\n\n"
        + "\n".join(tips)
        + f"\n\nImplementing these could save you {ctx.money(estimate)}/month!"
    )


def budget_advice(ctx: AdviceContext) -> str:
    income = ctx.summary.total_income
    lines = [
        f"{name}: {ctx.money(income * share)} ({share * 100:.0f}%)"
        for name, share in BUDGET_ALLOCATION
    ]
    return (
        "Recommended budget breakdown (50/30/20 rule):\n\n"
        + "\n".join(lines)
        + "\n\nAdjust based on your lifestyle and location!"
    )


def goal_advice(ctx: AdviceContext) -> str:
    if not ctx.goals:
        return (
            "You haven't set any savings goals yet. I recommend starting with:\n\n"
            "1. Emergency Fund (3-6 months expenses)\n"
            "2. Short-term goals (vacation, gadgets)\n"
            "3. Long-term goals (home, retirement)\n\n"
            "Start with one achievable goal to build momentum!"
        )

    lines = []
    for goal in ctx.goals:
        progress = percentage(goal.current_amount, goal.target_amount)
        remaining = goal.target_amount - goal.current_amount
        lines.append(f"📌 {goal.name}: {pct(progress)} ({ctx.money(remaining)} remaining)")

    net = ctx.summary.net_savings
    if net > 0:
        closing = (
            "With your current savings rate, allocate "
            f"{ctx.money(net * GOAL_ALLOCATION_SHARE)}/month to goals!"
        )
    else:
        closing = "Focus on increasing income or reducing expenses to fund your goals."

    return (
        f"Your savings goals progress: {pct(ctx.summary.goals_progress_pct)}\n\n"
        + "\n".join(lines)
        + f"\n\n{closing}"
    )


def income_advice(ctx: AdviceContext) -> str:
    return (
        f"Your total income: {ctx.money(ctx.summary.total_income)}\n\n"
        "Ways to increase income:\n\n"
        "• Ask for a raise (research market rates)\n"
        "• Start a side hustle aligned with your skills\n"
        "• Freelance in your spare time\n"
        "• Invest in upskilling for better opportunities\n"
        "• Sell unused items\n\n"
        f"Even an extra {ctx.currency}500/month can make a huge difference!"
    )


def overview_advice(ctx: AdviceContext) -> str:
    s = ctx.summary
    remark = (
        "✅ You're on track!"
        if s.savings_rate >= TARGET_SAVINGS_RATE
        else "⚠️ Try to increase your savings rate to 20%"
    )
    return (
        "📊 Financial Overview:\n\n"
        f"💵 Income: {ctx.money(s.total_income)}\n"
        f"💸 Expenses: {ctx.money(s.total_expenses)}\n"
        f"💰 Net Savings: {ctx.money(s.net_savings)}\n"
        f"📈 Savings Rate: {pct(s.savings_rate)}\n"
        f"🎯 Active Goals: {s.goal_count}\n\n"
        f"{remark}\n\n"
        "Ask me about specific areas like spending, savings, or budget advice!"
    )


def default_advice(ctx: AdviceContext) -> str:
    return HELP_TEXT


# =============================================================================
# DISPATCH TABLE
# =============================================================================

@dataclass(frozen=True)
class AdviceRule:
    """A topic: its trigger keywords and the handler that answers it."""

    topic: str
    keywords: tuple[str, ...]
    handler: Callable[[AdviceContext], str]

    def matches(self, query: str) -> bool:
        return any(keyword in query for keyword in self.keywords)


ADVICE_RULES: tuple[AdviceRule, ...] = (
    AdviceRule("spending", ("spending", "expense"), spending_advice),
    AdviceRule("saving", ("save", "saving"), saving_advice),
    AdviceRule("budget", ("budget",), budget_advice),
    AdviceRule("goal", ("goal",), goal_advice),
    AdviceRule("income", ("income",), income_advice),
    AdviceRule("overview", ("overview", "summary"), overview_advice),
)

DEFAULT_RULE = AdviceRule("default", (), default_advice)


def classify(query: str) -> AdviceRule:
    """The first rule whose keyword appears in the query, else the default."""
    lowered = query.lower()
    for rule in ADVICE_RULES:
        if rule.matches(lowered):
            return rule
    return DEFAULT_RULE


def advise(
    query: str,
    transactions: Sequence[Transaction],
    goals: Sequence[SavingsGoal],
    currency: str = "$",
) -> str:
    """Answer a free-text question from the user's records."""
    rule = classify(query)
    if rule is DEFAULT_RULE:
        return HELP_TEXT
    return rule.handler(AdviceContext.build(transactions, goals, currency))
