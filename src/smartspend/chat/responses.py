"""Canned assistant replies for parsed expenses and chat commands."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from smartspend.config import DEFAULT_ACTIONABLE_CONFIDENCE
from smartspend.parsing import DEFAULT_TAXONOMY, ParsedExpense, Taxonomy
from smartspend.parsing.expense import fallback_description

UNRECOGNIZED_REPLY = (
    "I couldn't understand that expense. Could you try again? "
    "For example: 'I spent $50 on groceries' or 'lunch cost me $25'."
)
MISSING_AMOUNT_REPLY = (
    "I see you mentioned an expense, but I couldn't find the amount. "
    "How much did you spend?"
)
HELP_REPLY = "\n".join(
    [
        "Available commands:",
        '• Just tell me naturally: "I spent $50 on groceries"',
        "• /help - Show this help",
        "• /categories - List the expense categories",
        "• /cancel - Forget the expense I'm asking about",
        "",
        "Try saying things like:",
        '• "lunch cost me $25"',
        '• "I bought gas for $60 yesterday"',
        '• "$15 for coffee this morning"',
    ]
)
UNKNOWN_COMMAND_REPLY = "Unknown command. Type /help to see available commands."
CANCELLED_REPLY = "No problem, I've dropped that expense. What else did you spend on?"
NOTHING_TO_CANCEL_REPLY = "There's nothing pending to cancel."
RECORDING_FAILED_REPLY = (
    "I understood the expense but couldn't save it right now. Please try again."
)

CATEGORY_HINT_COUNT = 3
DATE_DISPLAY_FORMAT = "%a %b %d %Y"


def generate_bot_response(
    parsed: ParsedExpense,
    success: bool,
    *,
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    threshold: float = DEFAULT_ACTIONABLE_CONFIDENCE,
) -> str:
    """Return the single reply matching the parse outcome."""

    if not success or parsed.confidence < threshold:
        return UNRECOGNIZED_REPLY

    if parsed.amount is None:
        return MISSING_AMOUNT_REPLY

    if parsed.category is None or parsed.category not in taxonomy:
        return (
            f"I found an expense of {format_amount(parsed.amount)}, but what category "
            f"was this for? ({_category_hint(taxonomy)})"
        )

    category_name = taxonomy.display_name(parsed.category)
    # Display-only default; the record's date stays as parsed.
    date_text = format_date(parsed.date) if parsed.date is not None else "today"
    message = (
        f"Perfect! I've added {format_amount(parsed.amount)} for {category_name} "
        f"on {date_text}."
    )
    if parsed.description != fallback_description(parsed.category, taxonomy):
        message = f"{message} ({parsed.description})"
    return f"{message} Anything else you'd like to track?"


def format_amount(amount: Decimal) -> str:
    return f"${amount}"


def format_date(value: date) -> str:
    return value.strftime(DATE_DISPLAY_FORMAT)


def format_category_list(taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> str:
    """One line per category with its icon, display name and sample keywords."""

    lines = ["Expense categories:"]
    for category in taxonomy.categories:
        sample = ", ".join(category.keywords[:3])
        suffix = f" ({sample}, ...)" if sample else ""
        lines.append(f"{category.icon} {category.name}{suffix}".strip())
    return "\n".join(lines)


def _category_hint(taxonomy: Taxonomy) -> str:
    names = [category.name for category in taxonomy.categories[:CATEGORY_HINT_COUNT]]
    return ", ".join([*names, "etc."])


__all__ = [
    "CANCELLED_REPLY",
    "HELP_REPLY",
    "MISSING_AMOUNT_REPLY",
    "NOTHING_TO_CANCEL_REPLY",
    "RECORDING_FAILED_REPLY",
    "UNKNOWN_COMMAND_REPLY",
    "UNRECOGNIZED_REPLY",
    "format_amount",
    "format_category_list",
    "format_date",
    "generate_bot_response",
]
