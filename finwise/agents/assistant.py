"""
Assistant Session

Holds one chat conversation with the rule-based advisor. Answers are
delivered after a short cosmetic delay. The delay is an asyncio sleep, so
a caller that stops waiting (e.g. the user navigated away) cancels the
task and no reply is appended to the history.
"""

import asyncio
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finwise.agents.advisor import advise, classify
from finwise.audit import AuditLogger
from finwise.models.audit import AuditEventBuilder
from finwise.store import RecordStore

GREETING = (
    "Hi! I'm your AI financial assistant. I can help you analyze your spending "
    "patterns, suggest ways to save money, and give personalized financial "
    "advice. What would you like to know?"
)

QUICK_ACTIONS = (
    "Analyze my spending",
    "How can I save more?",
    "Review my budget",
    "Financial overview",
)


class ChatMessage(BaseModel):
    """One message in the conversation."""

    role: str = Field(pattern="^(user|assistant)$")
    content: str


class AssistantSession:
    """
    A conversation with the advisor over the current store contents.

    Each answer is computed from the store snapshot taken when the delay
    ends, so records added while "thinking" are included.
    """

    def __init__(
        self,
        store: RecordStore,
        delay_seconds: float = 1.0,
        currency: str = "$",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._delay_seconds = delay_seconds
        self._currency = currency
        self._audit_logger = audit_logger
        self.conversation_id: UUID = uuid4()
        self.messages: list[ChatMessage] = [ChatMessage(role="assistant", content=GREETING)]

    @property
    def show_quick_actions(self) -> bool:
        """Quick actions are offered until the first question is asked."""
        return len(self.messages) == 1

    def answer_now(self, question: str) -> str:
        """Compute an answer without touching the history or waiting."""
        return advise(question, self._store.transactions, self._store.goals, self._currency)

    async def ask(self, question: str) -> Optional[ChatMessage]:
        """
        Append the question, wait, then append and return the answer.

        Blank questions are ignored and return None.
        If the task is cancelled during the delay, only the question stays
        in the history.
        """
        text = question.strip()
        if not text:
            return None

        self.messages.append(ChatMessage(role="user", content=text))

        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)

        reply = ChatMessage(role="assistant", content=self.answer_now(text))
        self.messages.append(reply)

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.assistant_answered(
                topic=classify(text).topic,
                question_length=len(text),
                correlation_id=self.conversation_id,
            ))
        return reply

    def reset(self) -> None:
        """Start a new conversation."""
        self.conversation_id = uuid4()
        self.messages = [ChatMessage(role="assistant", content=GREETING)]
