"""Unit tests for free-form expense parsing."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from itertools import product

import pytest

from smartspend.parsing.expense import (
    GENERIC_DESCRIPTION,
    ParsedExpense,
    build_description,
    extract_amount,
    parse_expense_text,
    score_confidence,
)


def test_parse_expense_text_groceries_example(fixed_now: datetime) -> None:
    result = parse_expense_text("I spent $50 on groceries", now=fixed_now)

    assert isinstance(result, ParsedExpense)
    assert result.amount == Decimal("50")
    assert result.category == "food"
    assert result.date is None
    assert result.description == "I groceries"
    assert result.confidence == pytest.approx(0.8)


def test_parse_expense_text_lunch_example(fixed_now: datetime) -> None:
    result = parse_expense_text("lunch cost me $25", now=fixed_now)

    assert result.amount == Decimal("25")
    assert result.category == "food"
    assert result.description == "lunch me"
    assert result.confidence == pytest.approx(0.8)


def test_parse_expense_text_resolves_yesterday(fixed_now: datetime) -> None:
    result = parse_expense_text("Gas for $60 yesterday", now=fixed_now)

    assert result.amount == Decimal("60")
    assert result.category == "transportation"
    assert result.date == date(2026, 10, 13)
    assert result.confidence == pytest.approx(1.0)


def test_parse_expense_text_unrecognized_phrase_has_no_date(fixed_now: datetime) -> None:
    result = parse_expense_text("$15 for coffee this morning", now=fixed_now)

    assert result.amount == Decimal("15")
    assert result.category == "food"
    assert result.date is None
    assert result.confidence == pytest.approx(0.8)


def test_parse_expense_text_small_talk_scores_description_only(fixed_now: datetime) -> None:
    result = parse_expense_text("hello there", now=fixed_now)

    assert result.amount is None
    assert result.category is None
    assert result.date is None
    assert result.description == "hello there"
    assert result.confidence == pytest.approx(0.1)


def test_parse_expense_text_never_raises_on_noise(fixed_now: datetime) -> None:
    result = parse_expense_text(
        "$$$ 0 bucks and 0.00 dollars 99999999999 days ago", now=fixed_now
    )

    assert result.amount is None
    assert result.date is None
    assert result.description


def test_parse_expense_text_reads_clock_when_now_omitted() -> None:
    before = datetime.now().date()
    result = parse_expense_text("taxi $12 today")
    after = datetime.now().date()

    assert result.date in {before, after}


def test_parsed_expense_is_immutable(fixed_now: datetime) -> None:
    result = parse_expense_text("I spent $50 on groceries", now=fixed_now)

    with pytest.raises(AttributeError):
        result.amount = Decimal("1")  # type: ignore[misc]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("$50 at the store", Decimal("50")),
        ("dinner was $50.25", Decimal("50.25")),
        ("paid 20 dollars for pizza", Decimal("20")),
        ("it was 1 DOLLAR", Decimal("1")),
        ("it was 12 bucks", Decimal("12")),
        ("lunch was 30$", Decimal("30")),
        ("5 dollars tip on a $40 dinner", Decimal("40")),
    ],
)
def test_extract_amount_recognizes_surface_forms(text: str, expected: Decimal) -> None:
    assert extract_amount(text) == expected


@pytest.mark.parametrize("text", ["$0 today", "0 bucks", "no numbers here", "about 40 euros"])
def test_extract_amount_returns_none_without_positive_amount(text: str) -> None:
    assert extract_amount(text) is None


def test_extract_amount_skips_zero_match_for_later_pattern() -> None:
    assert extract_amount("$0 coupon, paid 12 dollars") == Decimal("12")


def test_build_description_strips_amounts_and_filler() -> None:
    assert build_description("Paid 20 bucks for pizza yesterday", "food") == "pizza"


def test_build_description_keeps_personal_words() -> None:
    assert build_description("my phone bill $80", "bills") == "my phone bill"
    assert build_description("I bought a lamp", "shopping") == "I a lamp"


def test_build_description_falls_back_to_category_name() -> None:
    assert build_description("purchase $45", "shopping") == "Shopping"


def test_build_description_falls_back_to_generic_label() -> None:
    assert build_description("paid $3 for it", None) == GENERIC_DESCRIPTION
    assert build_description("", None) == GENERIC_DESCRIPTION


def test_build_description_keeps_three_character_residual() -> None:
    assert build_description("gas $40", "transportation") == "gas"


@pytest.mark.parametrize(
    ("amount", "category", "found_date", "description"),
    list(product([True, False], repeat=4)),
)
def test_score_confidence_matches_weighted_formula(
    amount: bool, category: bool, found_date: bool, description: bool
) -> None:
    expected = 0.4 * amount + 0.3 * category + 0.2 * found_date + 0.1 * description

    score = score_confidence(
        amount_found=amount,
        category_found=category,
        date_found=found_date,
        has_description=description,
    )

    assert score == pytest.approx(expected)
    assert 0.0 <= score <= 1.0
