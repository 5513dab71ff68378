"""Conversation layer: replies, drafts and per-chat clarification state."""

from .responses import generate_bot_response
from .session import (
    ChatReply,
    ChatSession,
    ExpenseAssistant,
    ExpenseDraft,
    ExpenseRecorder,
    build_expense_draft,
)

__all__ = [
    "ChatReply",
    "ChatSession",
    "ExpenseAssistant",
    "ExpenseDraft",
    "ExpenseRecorder",
    "build_expense_draft",
    "generate_bot_response",
]
