"""Expense category taxonomy, keyword classification and answer matching."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Sequence

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator
from rapidfuzz import fuzz

from smartspend import get_logger

LOGGER = get_logger("parsing.taxonomy")

DEFAULT_MATCH_SCORE = 0.8


class TaxonomyError(ValueError):
    """Raised when a taxonomy configuration file cannot be loaded."""


@dataclass(frozen=True, slots=True)
class CategoryInfo:
    """Display metadata and keyword triggers for a single category."""

    identifier: str
    name: str
    icon: str
    keywords: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("Category identifier cannot be blank.")
        if not self.name:
            raise ValueError("Category display name cannot be blank.")


class Taxonomy(Mapping[str, CategoryInfo]):
    """Immutable, declaration-ordered mapping of identifier to category."""

    __slots__ = ("_categories", "_index")

    def __init__(self, categories: Iterable[CategoryInfo]) -> None:
        ordered: list[CategoryInfo] = []
        index: dict[str, int] = {}
        for category in categories:
            if category.identifier in index:
                raise ValueError(f"Duplicate category identifier: {category.identifier}")
            index[category.identifier] = len(ordered)
            ordered.append(category)
        self._categories: tuple[CategoryInfo, ...] = tuple(ordered)
        self._index: dict[str, int] = index

    def __getitem__(self, identifier: str) -> CategoryInfo:
        return self._categories[self._index[identifier]]

    def __iter__(self) -> Iterator[str]:
        return (category.identifier for category in self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __repr__(self) -> str:
        return f"Taxonomy({list(self)!r})"

    @property
    def categories(self) -> tuple[CategoryInfo, ...]:
        return self._categories

    def display_name(self, identifier: str) -> str:
        return self[identifier].name

    def extend(self, categories: Iterable[CategoryInfo]) -> Taxonomy:
        """Return a new taxonomy with categories replaced in place or appended."""

        merged = list(self._categories)
        positions = dict(self._index)
        for category in categories:
            position = positions.get(category.identifier)
            if position is None:
                positions[category.identifier] = len(merged)
                merged.append(category)
            else:
                merged[position] = category
        return Taxonomy(merged)


DEFAULT_TAXONOMY = Taxonomy(
    (
        CategoryInfo(
            "food",
            "Food & Dining",
            "🍔",
            ("lunch", "dinner", "breakfast", "restaurant", "groceries", "coffee",
             "pizza", "food", "meal", "eat", "drink"),
        ),
        CategoryInfo(
            "transportation",
            "Transportation",
            "🚗",
            ("gas", "fuel", "uber", "taxi", "bus", "train", "parking", "metro",
             "transport", "car", "bike"),
        ),
        CategoryInfo(
            "entertainment",
            "Entertainment",
            "🎬",
            ("movie", "cinema", "game", "concert", "show", "streaming", "netflix",
             "entertainment", "fun", "music"),
        ),
        CategoryInfo(
            "shopping",
            "Shopping",
            "🛍️",
            ("clothes", "amazon", "store", "shopping", "buy", "purchase", "mall",
             "online", "shop"),
        ),
        CategoryInfo(
            "bills",
            "Bills & Utilities",
            "💡",
            ("electricity", "water", "rent", "phone", "internet", "cable", "bill",
             "utility", "subscription"),
        ),
        CategoryInfo(
            "healthcare",
            "Healthcare",
            "🏥",
            ("doctor", "medicine", "pharmacy", "hospital", "dentist", "health",
             "medical", "prescription"),
        ),
        CategoryInfo(
            "education",
            "Education",
            "📚",
            ("books", "course", "tuition", "school", "education", "learning",
             "class", "study"),
        ),
        CategoryInfo(
            "travel",
            "Travel",
            "✈️",
            ("hotel", "flight", "vacation", "trip", "travel", "booking", "holiday",
             "airbnb"),
        ),
        CategoryInfo(
            "other",
            "Other",
            "📦",
            ("other", "miscellaneous", "random", "misc"),
        ),
    )
)


class CategoryDefinition(BaseModel):
    """Schema for one category entry in a taxonomy JSON file."""

    identifier: str = Field(min_length=1)
    name: str = Field(min_length=1)
    icon: str = ""
    keywords: list[str] = Field(default_factory=list)

    @field_validator("identifier", mode="after")
    @classmethod
    def _normalize_identifier(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("keywords", mode="after")
    @classmethod
    def _normalize_keywords(cls, value: list[str]) -> list[str]:
        keywords: list[str] = []
        for keyword in value:
            cleaned = keyword.strip().lower()
            if cleaned and cleaned not in keywords:
                keywords.append(cleaned)
        return keywords

    def to_category(self) -> CategoryInfo:
        return CategoryInfo(
            identifier=self.identifier,
            name=self.name.strip(),
            icon=self.icon,
            keywords=tuple(self.keywords),
        )


_DEFINITIONS_ADAPTER = TypeAdapter(list[CategoryDefinition])


def load_taxonomy(path: str | Path, *, base: Taxonomy = DEFAULT_TAXONOMY) -> Taxonomy:
    """Extend ``base`` with the categories declared in a JSON file."""

    source = Path(path)
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise TaxonomyError(f"Unable to read taxonomy file {source}: {exc}") from exc

    try:
        definitions = _DEFINITIONS_ADAPTER.validate_python(json.loads(raw))
    except json.JSONDecodeError as exc:
        raise TaxonomyError(f"Taxonomy file {source} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        raise TaxonomyError(f"Taxonomy file {source} failed validation: {exc}") from exc

    taxonomy = base.extend(definition.to_category() for definition in definitions)
    LOGGER.info(
        "Loaded %d category definition(s) from %s (%d total)",
        len(definitions),
        source,
        len(taxonomy),
    )
    return taxonomy


def count_keyword_hits(text: str, taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> dict[str, int]:
    """Return cumulative keyword occurrence counts for every matching category."""

    lowered = text.lower()
    scores: dict[str, int] = {}
    for category in taxonomy.categories:
        hits = sum(lowered.count(keyword) for keyword in category.keywords if keyword)
        if hits:
            scores[category.identifier] = hits
    return scores


def classify_category(text: str, taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> str | None:
    """Return the category with the most keyword hits, first-declared on ties."""

    best: str | None = None
    best_hits = 0
    # Dict order follows taxonomy declaration, so strict ">" keeps the first tie.
    for identifier, hits in count_keyword_hits(text, taxonomy).items():
        if hits > best_hits:
            best, best_hits = identifier, hits
    return best


def match_category_name(
    answer: str,
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    *,
    min_score: float = DEFAULT_MATCH_SCORE,
) -> str | None:
    """Resolve a short clarification answer such as "utilities" to a category."""

    cleaned = " ".join(answer.lower().split()).strip(" .,!?")
    if not cleaned:
        return None

    exact = classify_category(cleaned, taxonomy)
    if exact is not None:
        return exact

    best: str | None = None
    best_score = 0.0
    for category in taxonomy.categories:
        score = _best_label_score(
            cleaned, (category.identifier, category.name.lower(), *category.keywords)
        )
        if score > best_score:
            best, best_score = category.identifier, score

    if best is None or best_score < min_score:
        LOGGER.debug("match_category_name found no match for %r (best=%.2f)", cleaned, best_score)
        return None
    return best


def _best_label_score(answer: str, labels: Sequence[str]) -> float:
    return max((fuzz.token_set_ratio(answer, label) / 100 for label in labels if label), default=0.0)


__all__ = [
    "CategoryDefinition",
    "CategoryInfo",
    "DEFAULT_TAXONOMY",
    "Taxonomy",
    "TaxonomyError",
    "classify_category",
    "count_keyword_hits",
    "load_taxonomy",
    "match_category_name",
]
