"""Conversation state and the assistant turn loop around the expense parser."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Protocol, runtime_checkable

from smartspend import get_logger
from smartspend.chat.responses import (
    CANCELLED_REPLY,
    HELP_REPLY,
    NOTHING_TO_CANCEL_REPLY,
    RECORDING_FAILED_REPLY,
    UNKNOWN_COMMAND_REPLY,
    UNRECOGNIZED_REPLY,
    format_category_list,
    generate_bot_response,
)
from smartspend.config import DEFAULT_ACTIONABLE_CONFIDENCE, PaymentMethod
from smartspend.parsing import DEFAULT_TAXONOMY, ParsedExpense, Taxonomy, parse_expense_text
from smartspend.parsing.expense import (
    GENERIC_DESCRIPTION,
    extract_amount,
    fallback_description,
    score_confidence,
)
from smartspend.parsing.taxonomy import match_category_name

LOGGER = get_logger("chat.session")

MAX_DESCRIPTION_LENGTH = 500

HELP_COMMANDS = {"/help", "/start"}
CATEGORY_COMMANDS = {"/categories"}
CANCEL_COMMANDS = {"/cancel"}


@dataclass(slots=True)
class ExpenseDraft:
    """Expense-creation payload handed to the recording collaborator."""

    amount: Decimal
    category: str
    description: str
    date: date
    payment_method: PaymentMethod = "credit"
    added_via: Literal["chatbot", "manual"] = "chatbot"

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("Expense amount must be greater than zero.")
        if not self.category:
            raise ValueError("Expense category is required.")
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(
                f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters."
            )


@runtime_checkable
class ExpenseRecorder(Protocol):
    """Collaborator that persists drafts produced by the assistant."""

    def record_expense(self, draft: ExpenseDraft) -> None:
        """Store the expense described by ``draft``."""


@dataclass(slots=True)
class ChatSession:
    """Per-chat state: the last actionable parse still awaiting clarification."""

    pending: ParsedExpense | None = None
    recorded: list[ExpenseDraft] = field(default_factory=list)

    def clear(self) -> None:
        self.pending = None


@dataclass(frozen=True, slots=True)
class ChatReply:
    """Assistant output for one user message."""

    text: str
    draft: ExpenseDraft | None = None
    parsed: ParsedExpense | None = None


def is_actionable(
    parsed: ParsedExpense, threshold: float = DEFAULT_ACTIONABLE_CONFIDENCE
) -> bool:
    """True when ``parsed.confidence`` is at or above ``threshold`` (default 0.3)."""
    return parsed.confidence >= threshold


def build_expense_draft(
    parsed: ParsedExpense,
    *,
    today: date,
    threshold: float = DEFAULT_ACTIONABLE_CONFIDENCE,
    payment_method: PaymentMethod = "credit",
) -> ExpenseDraft | None:
    """Return a recordable draft, or ``None`` when the parse is incomplete.

    The parser never defaults the date; recording does, using ``today``.
    """

    if not is_actionable(parsed, threshold):
        return None
    if parsed.amount is None or parsed.category is None:
        return None
    return ExpenseDraft(
        amount=parsed.amount,
        category=parsed.category,
        description=parsed.description[:MAX_DESCRIPTION_LENGTH],
        date=parsed.date or today,
        payment_method=payment_method,
    )


def merge_clarification(
    pending: ParsedExpense,
    answer: ParsedExpense,
    answer_text: str,
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> ParsedExpense | None:
    """Fill the pending parse's missing amount or category from a follow-up.

    Returns ``None`` when the follow-up does not answer the open question, in
    which case it should be treated as a brand-new utterance.
    """

    if pending.amount is None:
        amount = answer.amount or extract_amount(f"${answer_text.strip().lstrip('$')}")
        if amount is None or answer.category not in (None, pending.category):
            return None
        merged = replace(pending, amount=amount, date=pending.date or answer.date)
    elif pending.category is None:
        if answer.amount is not None:
            return None
        category = answer.category or match_category_name(answer_text, taxonomy)
        if category is None:
            return None
        description = pending.description
        if description == GENERIC_DESCRIPTION:
            description = fallback_description(category, taxonomy)
        merged = replace(
            pending,
            category=category,
            description=description,
            date=pending.date or answer.date,
        )
    else:
        return None

    return replace(
        merged,
        confidence=score_confidence(
            amount_found=merged.amount is not None,
            category_found=merged.category is not None,
            date_found=merged.date is not None,
            has_description=bool(merged.description),
        ),
    )


class ExpenseAssistant:
    """Turns chat messages into replies and recorded expense drafts."""

    def __init__(
        self,
        *,
        taxonomy: Taxonomy = DEFAULT_TAXONOMY,
        recorder: ExpenseRecorder | None = None,
        threshold: float = DEFAULT_ACTIONABLE_CONFIDENCE,
        payment_method: PaymentMethod = "credit",
    ) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0 and 1.")
        self.taxonomy = taxonomy
        self.recorder = recorder
        self.threshold = threshold
        self.payment_method = payment_method

    def handle_message(
        self,
        text: str,
        session: ChatSession,
        *,
        now: datetime | None = None,
    ) -> ChatReply:
        """Process one user message and update ``session``."""

        message = text.strip()
        if not message:
            return ChatReply(UNRECOGNIZED_REPLY)
        if message.startswith("/"):
            return ChatReply(self._handle_command(message, session))

        current = now or datetime.now()
        parsed = parse_expense_text(message, taxonomy=self.taxonomy, now=current)
        if session.pending is not None:
            merged = merge_clarification(session.pending, parsed, message, self.taxonomy)
            if merged is not None:
                LOGGER.debug("Merged follow-up into pending expense: %s", merged)
                parsed = merged
        session.pending = None

        draft = build_expense_draft(
            parsed,
            today=current.date(),
            threshold=self.threshold,
            payment_method=self.payment_method,
        )
        if draft is not None:
            if not self._record(draft, session):
                return ChatReply(RECORDING_FAILED_REPLY, parsed=parsed)
        elif is_actionable(parsed, self.threshold):
            session.pending = parsed

        success = is_actionable(parsed, self.threshold)
        reply = generate_bot_response(
            parsed, success, taxonomy=self.taxonomy, threshold=self.threshold
        )
        return ChatReply(reply, draft=draft, parsed=parsed)

    def _handle_command(self, message: str, session: ChatSession) -> str:
        command = message.split()[0].split("@", 1)[0].lower()
        if command in HELP_COMMANDS:
            return HELP_REPLY
        if command in CATEGORY_COMMANDS:
            return format_category_list(self.taxonomy)
        if command in CANCEL_COMMANDS:
            if session.pending is None:
                return NOTHING_TO_CANCEL_REPLY
            session.clear()
            return CANCELLED_REPLY
        return UNKNOWN_COMMAND_REPLY

    def _record(self, draft: ExpenseDraft, session: ChatSession) -> bool:
        if self.recorder is not None:
            try:
                self.recorder.record_expense(draft)
            except Exception:
                LOGGER.warning(
                    "Failed to record %s expense of %s",
                    draft.category,
                    draft.amount,
                    exc_info=True,
                )
                return False
        session.recorded.append(draft)
        LOGGER.info(
            "Recorded %s expense of %s dated %s", draft.category, draft.amount, draft.date
        )
        return True


__all__ = [
    "ChatReply",
    "ChatSession",
    "ExpenseAssistant",
    "ExpenseDraft",
    "ExpenseRecorder",
    "build_expense_draft",
    "is_actionable",
    "merge_clarification",
]
