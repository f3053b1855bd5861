"""
Tests for the rule-based advice engine.
"""

import pytest
from datetime import date

from finwise.agents import ADVICE_RULES, DEFAULT_RULE, HELP_TEXT, advise, classify
from finwise.agents.advisor import AdviceContext, saving_recommendations
from finwise.models.records import SavingsGoal, Transaction, TransactionKind


def tx(amount, kind="expense", category="Food & Dining"):
    return Transaction(
        amount=amount,
        kind=TransactionKind(kind),
        category=category,
        description="Item",
        date=date(2024, 3, 1),
    )


@pytest.fixture
def transactions():
    """Income 1000; expenses 200 on food."""
    return [tx(1000, "income", "Other"), tx(200, category="Food & Dining")]


@pytest.fixture
def goals():
    return [
        SavingsGoal(
            name="Vacation Fund",
            target_amount=1000,
            current_amount=250,
            deadline=date(2024, 12, 31),
            category="Vacation",
        )
    ]


class TestClassification:
    """Tests for keyword topic matching."""

    @pytest.mark.parametrize("query,topic", [
        ("Analyze my spending", "spending"),
        ("what are my biggest EXPENSES", "spending"),
        ("How can I save more?", "saving"),
        ("Review my budget", "budget"),
        ("Am I close to my goal?", "goal"),
        ("how is my income", "income"),
        ("Financial overview", "overview"),
        ("give me a summary", "overview"),
        ("hello there", "default"),
    ])
    def test_topics(self, query, topic):
        """Test that each topic is reached by its keywords."""
        assert classify(query).topic == topic

    def test_first_match_wins(self):
        """Test priority when several topics match."""
        assert classify("save on spending").topic == "spending"
        assert classify("budget for my goal").topic == "budget"
        assert classify("income summary").topic == "income"
        # "savings" contains "saving", which outranks "goal"
        assert classify("savings goal tips").topic == "saving"

    def test_rule_order(self):
        """Test the fixed priority order."""
        assert [r.topic for r in ADVICE_RULES] == [
            "spending", "saving", "budget", "goal", "income", "overview",
        ]
        assert classify("").topic == DEFAULT_RULE.topic


class TestAdvice:
    """Tests for the answer templates."""

    def test_default_answer_ignores_data(self, transactions, goals):
        """Test that the help text is identical regardless of records."""
        assert advise("hello", [], []) == HELP_TEXT
        assert advise("hello", transactions, goals) == HELP_TEXT

    def test_spending_without_expenses(self):
        """Test the no-expenses answer."""
        answer = advise("analyze my spending", [tx(1000, "income")], [])
        assert "haven't logged any expenses" in answer

    def test_spending_answer(self, transactions):
        """Test the spending summary."""
        answer = advise("analyze my spending", transactions, [])
        assert "Total expenses: $200.00" in answer
        assert "Top category: Food & Dining ($200.00)" in answer
        assert "within your income" in answer
        assert "Great job" in answer

    def test_spending_beyond_income(self):
        """Test the overspending remark."""
        answer = advise("spending", [tx(100, "income"), tx(300)], [])
        assert "beyond your income" in answer
        assert "Try to save at least 20%" in answer

    def test_save_includes_food_tip(self, transactions):
        """Test that food spending above 15% of income triggers the meal-prep tip."""
        answer = advise("How can I save more?", transactions, [])
        assert "meal prepping" in answer
        assert "Aim to save at least 20%" not in answer
        assert "could save you $30.00/month" in answer

    def test_save_tips_in_fixed_order(self):
        """Test that applicable tips are listed in order."""
        context = AdviceContext.build([
            tx(1000, "income", "Other"),
            tx(600, category="Shopping"),
            tx(300, category="Food & Dining"),
        ], [])
        tips = saving_recommendations(context)
        assert tips[0] == "• Aim to save at least 20% of your income"
        assert "meal prepping" in tips[1]
        assert "24-hour rule" in tips[2]
        assert len(tips) == 3

    def test_save_with_no_tips(self):
        """Test the congratulation when no tip applies."""
        answer = advise("save", [tx(1000, "income", "Other"), tx(100, category="Bills & Utilities")], [])
        assert answer.startswith("You're doing great with your savings!")

    def test_budget_table(self, transactions):
        """Test the recommended allocation of income."""
        answer = advise("budget", transactions, [])
        assert "Housing: $300.00 (30%)" in answer
        assert "Food & Dining: $150.00 (15%)" in answer
        assert "Savings: $200.00 (20%)" in answer
        assert "Entertainment: $50.00 (5%)" in answer

    def test_budget_without_income(self):
        """Test that zero income yields zero amounts, not errors."""
        answer = advise("budget", [], [])
        assert "Housing: $0.00 (30%)" in answer

    def test_goal_answer_without_goals(self, transactions):
        """Test the starter suggestions."""
        answer = advise("my goal", transactions, [])
        assert "haven't set any savings goals" in answer
        assert "Emergency Fund" in answer

    def test_goal_answer(self, transactions, goals):
        """Test per-goal progress and allocation."""
        answer = advise("my goal", transactions, goals)
        assert "Your savings goals progress: 25.0%" in answer
        assert "📌 Vacation Fund: 25.0% ($750.00 remaining)" in answer
        assert "allocate $640.00/month to goals" in answer

    def test_goal_answer_without_savings(self, goals):
        """Test the closing line when nothing is being saved."""
        answer = advise("goal", [tx(50)], goals)
        assert "Focus on increasing income or reducing expenses" in answer

    def test_income_answer(self, transactions):
        """Test the income answer and currency symbol."""
        answer = advise("income", transactions, [], currency="€")
        assert "Your total income: €1000.00" in answer
        assert "€500/month" in answer

    def test_overview(self, transactions, goals):
        """Test the overview numbers."""
        answer = advise("overview", transactions, goals)
        assert "💵 Income: $1000.00" in answer
        assert "💰 Net Savings: $800.00" in answer
        assert "📈 Savings Rate: 80.0%" in answer
        assert "🎯 Active Goals: 1" in answer
        assert "You're on track!" in answer

    def test_answers_are_deterministic(self, transactions, goals):
        """Test that the same question and records give the same answer."""
        assert advise("overview", transactions, goals) == advise("overview", list(transactions), list(goals))
