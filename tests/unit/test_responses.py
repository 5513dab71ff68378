"""Unit tests for assistant reply generation."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from smartspend.chat.responses import (
    MISSING_AMOUNT_REPLY,
    UNRECOGNIZED_REPLY,
    format_category_list,
    generate_bot_response,
)
from smartspend.parsing import ParsedExpense, parse_expense_text


def _parsed(**overrides: object) -> ParsedExpense:
    values: dict[str, object] = {
        "amount": Decimal("25"),
        "category": "food",
        "description": "lunch",
        "date": None,
        "confidence": 0.8,
    }
    values.update(overrides)
    return ParsedExpense(**values)  # type: ignore[arg-type]


def test_unsuccessful_parse_asks_user_to_try_again() -> None:
    assert generate_bot_response(_parsed(), False) == UNRECOGNIZED_REPLY


def test_low_confidence_parse_asks_user_to_try_again(fixed_now: datetime) -> None:
    parsed = parse_expense_text("hello there", now=fixed_now)

    reply = generate_bot_response(parsed, True)

    assert reply == UNRECOGNIZED_REPLY
    assert "'I spent $50 on groceries'" in reply
    assert "'lunch cost me $25'" in reply


def test_missing_amount_asks_how_much() -> None:
    reply = generate_bot_response(
        _parsed(amount=None, description="Food & Dining", confidence=0.4), True
    )

    assert reply == MISSING_AMOUNT_REPLY


def test_missing_amount_is_reported_before_missing_category() -> None:
    parsed = _parsed(
        amount=None,
        category=None,
        description="Expense",
        date=date(2026, 10, 13),
        confidence=0.3,
    )

    assert generate_bot_response(parsed, True) == MISSING_AMOUNT_REPLY


def test_missing_category_echoes_amount_and_suggests_categories() -> None:
    reply = generate_bot_response(
        _parsed(category=None, amount=Decimal("40"), description="Expense", confidence=0.5),
        True,
    )

    assert reply == (
        "I found an expense of $40, but what category was this for? "
        "(Food & Dining, Transportation, Entertainment, etc.)"
    )


def test_confirmation_includes_date_and_description(fixed_now: datetime) -> None:
    parsed = parse_expense_text("Gas for $60 yesterday", now=fixed_now)

    reply = generate_bot_response(parsed, True)

    assert reply == (
        "Perfect! I've added $60 for Transportation on Tue Oct 13 2026. (Gas) "
        "Anything else you'd like to track?"
    )


def test_confirmation_defaults_display_date_to_today_without_touching_record() -> None:
    parsed = _parsed(amount=Decimal("12.50"), description="Food & Dining")

    reply = generate_bot_response(parsed, True)

    assert reply == (
        "Perfect! I've added $12.50 for Food & Dining on today. "
        "Anything else you'd like to track?"
    )
    assert parsed.date is None


def test_confirmation_keeps_decimal_amount_text() -> None:
    reply = generate_bot_response(_parsed(amount=Decimal("50.25")), True)

    assert "$50.25 for Food & Dining" in reply
    assert "(lunch)" in reply


def test_format_category_list_shows_icons_and_names() -> None:
    listing = format_category_list()

    assert listing.splitlines()[0] == "Expense categories:"
    assert "🍔 Food & Dining (lunch, dinner, breakfast, ...)" in listing
    assert "📦 Other" in listing
