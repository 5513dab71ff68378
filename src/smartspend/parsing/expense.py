"""Free-form expense message parsing.

``parse_expense_text`` turns an utterance such as "lunch cost me $25 yesterday"
into a :class:`ParsedExpense`. Every extractor runs independently over the same
text; a missing piece is reported as ``None`` and only lowers the confidence.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
import re

from smartspend import get_logger
from smartspend.parsing.dates import resolve_relative_date
from smartspend.parsing.taxonomy import DEFAULT_TAXONOMY, Taxonomy, classify_category

LOGGER = get_logger("parsing.expense")

GENERIC_DESCRIPTION = "Expense"
MIN_DESCRIPTION_LENGTH = 3

AMOUNT_WEIGHT = 0.4
CATEGORY_WEIGHT = 0.3
DATE_WEIGHT = 0.2
DESCRIPTION_WEIGHT = 0.1

# Priority order: the first pattern with a usable match wins.
_AMOUNT_PATTERNS = (
    re.compile(r"\$(\d+(?:\.\d{2})?)"),  # $50, $50.25
    re.compile(r"(\d+(?:\.\d{2})?)\s*dollars?", re.IGNORECASE),  # 50 dollars
    re.compile(r"(\d+(?:\.\d{2})?)\s*bucks?", re.IGNORECASE),  # 50 bucks
    re.compile(r"(\d+(?:\.\d{2})?)\s*\$"),  # 50$
)
_AMOUNT_STRIP_PATTERN = re.compile(
    r"\$?\d+(?:\.\d{2})?(?:\s*dollars?|\s*bucks?|\$)?", re.IGNORECASE
)
_FILLER_PATTERN = re.compile(
    r"\b(?:spent|paid|cost|for|on|bought|purchase|today|yesterday)\b",
    re.IGNORECASE,
)
_WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class ParsedExpense:
    """Structured representation of a parsed expense utterance."""

    amount: Decimal | None
    category: str | None
    description: str
    date: date | None
    confidence: float


def parse_expense_text(
    message: str,
    *,
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    now: datetime | None = None,
) -> ParsedExpense:
    """Extract amount, category, date and a short description from ``message``."""

    # One clock read per call keeps every relative offset consistent.
    today = (now or datetime.now()).date()

    amount = extract_amount(message)
    category = classify_category(message, taxonomy)
    resolved_date = resolve_relative_date(message, today)
    description = build_description(message, category, taxonomy)
    confidence = score_confidence(
        amount_found=amount is not None,
        category_found=category is not None,
        date_found=resolved_date is not None,
        has_description=bool(description),
    )

    LOGGER.debug(
        "parse_expense_text amount=%s category=%s date=%s confidence=%.2f",
        amount,
        category,
        resolved_date,
        confidence,
    )
    return ParsedExpense(
        amount=amount,
        category=category,
        description=description,
        date=resolved_date,
        confidence=confidence,
    )


def extract_amount(text: str) -> Decimal | None:
    """Return the first positive monetary amount in ``text``, if any."""

    for pattern in _AMOUNT_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        amount = _to_positive_decimal(match.group(1))
        if amount is not None:
            return amount
    return None


def build_description(
    text: str,
    category: str | None,
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> str:
    """Strip amounts and filler words, falling back to the category name."""

    residual = _AMOUNT_STRIP_PATTERN.sub("", text)
    residual = _FILLER_PATTERN.sub("", residual)
    residual = _WHITESPACE_PATTERN.sub(" ", residual).strip()
    if len(residual) >= MIN_DESCRIPTION_LENGTH:
        return residual
    return fallback_description(category, taxonomy)


def fallback_description(category: str | None, taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> str:
    """Label used when an utterance leaves no usable description."""

    if category is not None and category in taxonomy:
        return taxonomy.display_name(category)
    return GENERIC_DESCRIPTION


def score_confidence(
    *,
    amount_found: bool,
    category_found: bool,
    date_found: bool,
    has_description: bool,
) -> float:
    """Weighted presence score in ``[0, 1]``."""

    score = 0.0
    if amount_found:
        score += AMOUNT_WEIGHT
    if category_found:
        score += CATEGORY_WEIGHT
    if date_found:
        score += DATE_WEIGHT
    if has_description:
        score += DESCRIPTION_WEIGHT
    return round(score, 2)


def _to_positive_decimal(raw: str) -> Decimal | None:
    try:
        amount = Decimal(raw)
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


__all__ = [
    "GENERIC_DESCRIPTION",
    "ParsedExpense",
    "build_description",
    "extract_amount",
    "fallback_description",
    "parse_expense_text",
    "score_confidence",
]
