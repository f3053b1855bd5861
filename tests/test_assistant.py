"""
Tests for the assistant session and the simulated receipt extractor.

Async code is driven with asyncio.run; delays are zero unless a test is
about the delay itself.
"""

import asyncio
import pytest
import random
from datetime import date

from finwise.agents import GREETING, QUICK_ACTIONS, AssistantSession, ChatMessage
from finwise.audit import AuditLogger
from finwise.models.records import ExpenseCategory
from finwise.services.receipts import (
    ReceiptExtractionError,
    SimulatedReceiptExtractor,
    to_data_url,
)
from finwise.services.storage import InMemoryStorage
from finwise.store import RecordStore


@pytest.fixture
def store():
    return RecordStore(InMemoryStorage())


@pytest.fixture
def audit_logger():
    return AuditLogger(InMemoryStorage())


@pytest.fixture
def session(store, audit_logger):
    return AssistantSession(store, delay_seconds=0, audit_logger=audit_logger)


class TestAssistantSession:
    """Tests for AssistantSession."""

    def test_starts_with_greeting(self, session):
        """Test the initial conversation."""
        assert session.messages == [ChatMessage(role="assistant", content=GREETING)]
        assert session.show_quick_actions is True
        assert len(QUICK_ACTIONS) == 4

    def test_ask_appends_question_and_answer(self, session):
        """Test a full exchange."""
        reply = asyncio.run(session.ask("  Review my budget  "))
        assert reply.role == "assistant"
        assert reply.content.startswith("Recommended budget breakdown")
        assert [m.role for m in session.messages] == ["assistant", "user", "assistant"]
        assert session.messages[1].content == "Review my budget"
        assert session.show_quick_actions is False

    def test_blank_question_is_ignored(self, session):
        """Test that blank input does nothing."""
        assert asyncio.run(session.ask("   ")) is None
        assert len(session.messages) == 1

    def test_answer_uses_current_records(self, session, store):
        """Test that answers reflect records added after the session started."""
        store.add_transaction(
            {"amount": "2500", "category": "Other", "description": "Salary", "kind": "income"},
            today=date(2024, 3, 1),
        )
        reply = asyncio.run(session.ask("what is my income?"))
        assert "$2500.00" in reply.content

    def test_cancel_during_delay_keeps_only_question(self, store):
        """Test that cancelling while 'thinking' appends no answer."""
        session = AssistantSession(store, delay_seconds=5)

        async def ask_then_cancel():
            task = asyncio.create_task(session.ask("Analyze my spending"))
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(ask_then_cancel())
        assert [m.role for m in session.messages] == ["assistant", "user"]

    def test_answers_are_audited(self, session, audit_logger):
        """Test that each answer is recorded with the conversation id."""
        asyncio.run(session.ask("How can I save more?"))
        event = audit_logger.recent_events()[0]
        assert event["event_type"] == "assistant_answered"
        assert event["details"]["topic"] == "saving"
        assert event["correlation_id"] == str(session.conversation_id)

    def test_reset(self, session):
        """Test starting a new conversation."""
        old_id = session.conversation_id
        asyncio.run(session.ask("overview"))
        session.reset()
        assert len(session.messages) == 1
        assert session.conversation_id != old_id

    def test_answer_now_does_not_touch_history(self, session):
        """Test the synchronous answer helper."""
        assert "Financial Overview" in session.answer_now("overview")
        assert len(session.messages) == 1

    def test_chat_message_roles(self):
        """Test that only user and assistant roles exist."""
        with pytest.raises(ValueError):
            ChatMessage(role="system", content="hi")


class TestSimulatedReceiptExtractor:
    """Tests for the receipt scan stand-in."""

    def make_extractor(self, seed=7):
        return SimulatedReceiptExtractor(
            delay_seconds=0,
            rng=random.Random(seed),
            today=lambda: date(2024, 3, 5),
        )

    def test_extraction_proposes_form_values(self):
        """Test the proposed amount, category and description."""
        result = asyncio.run(self.make_extractor().extract(b"\x89PNG fake", "image/jpeg"))
        assert 10 <= result.amount < 110
        assert round(result.amount, 2) == result.amount
        assert result.category in [c.value for c in ExpenseCategory]
        assert result.description == "Receipt from 03/05/2024"
        assert result.receipt_image.startswith("data:image/jpeg;base64,")
        assert result.simulated is True

    def test_same_seed_same_proposal(self):
        """Test that a seeded generator makes extraction reproducible."""
        first = asyncio.run(self.make_extractor(seed=3).extract(b"img"))
        second = asyncio.run(self.make_extractor(seed=3).extract(b"img"))
        assert first == second

    def test_amount_stays_below_upper_bound(self):
        """Test that a draw rounding up to 110.00 is kept inside the range."""

        class HighRandom(random.Random):
            def random(self):
                return 0.999999999

        extractor = SimulatedReceiptExtractor(delay_seconds=0, rng=HighRandom(1))
        result = asyncio.run(extractor.extract(b"img"))
        assert result.amount == 109.99

    def test_empty_image_rejected(self):
        """Test that an empty upload cannot be scanned."""
        with pytest.raises(ReceiptExtractionError):
            asyncio.run(self.make_extractor().extract(b""))

    def test_to_data_url(self):
        """Test the stored receipt reference format."""
        assert to_data_url(b"abc", "image/png") == "data:image/png;base64,YWJj"
