"""Assistant package: the rule-based advisor and chat sessions."""

from finwise.agents.advisor import (
    ADVICE_RULES,
    DEFAULT_RULE,
    HELP_TEXT,
    AdviceContext,
    AdviceRule,
    advise,
    classify,
)
from finwise.agents.assistant import (
    GREETING,
    QUICK_ACTIONS,
    AssistantSession,
    ChatMessage,
)

__all__ = [
    "ADVICE_RULES",
    "DEFAULT_RULE",
    "HELP_TEXT",
    "AdviceContext",
    "AdviceRule",
    "advise",
    "classify",
    "GREETING",
    "QUICK_ACTIONS",
    "AssistantSession",
    "ChatMessage",
]
