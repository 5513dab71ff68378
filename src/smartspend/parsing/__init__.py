"""Parsing helpers for free-form expense messages."""

from .expense import ParsedExpense, parse_expense_text
from .taxonomy import DEFAULT_TAXONOMY, CategoryInfo, Taxonomy, TaxonomyError, load_taxonomy

__all__ = [
    "CategoryInfo",
    "DEFAULT_TAXONOMY",
    "ParsedExpense",
    "Taxonomy",
    "TaxonomyError",
    "load_taxonomy",
    "parse_expense_text",
]
