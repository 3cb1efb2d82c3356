# src/filters/comparison_matcher.py

"""Pairs a product with look-alikes from the other two categories."""

import logging
from dataclasses import dataclass

from src.models.product import CanonicalProduct, Category

logger = logging.getLogger("perfume_compare.matcher")

MIN_TOKEN_LENGTH = 4


@dataclass(frozen=True)
class ComparisonSet:
    """One slot per category; unmatched slots are None."""

    middle_eastern: CanonicalProduct | None = None
    western: CanonicalProduct | None = None
    replica: CanonicalProduct | None = None

    def slot(self, category: Category) -> CanonicalProduct | None:
        if category is Category.MIDDLE_EASTERN:
            return self.middle_eastern
        if category is Category.WESTERN:
            return self.western
        return self.replica


def name_tokens(name: str) -> list[str]:
    """Lower-cased words longer than three characters."""
    return [w for w in name.lower().split() if len(w) >= MIN_TOKEN_LENGTH]


def _first_match(
    selected: CanonicalProduct,
    tokens: list[str],
    pool: list[CanonicalProduct],
) -> CanonicalProduct | None:
    """First candidate (catalog order) whose name contains any token."""
    for candidate in pool:
        if candidate.id == selected.id:
            continue
        candidate_name = (candidate.name or "").lower()
        if any(token in candidate_name for token in tokens):
            return candidate
    return None


def find_comparison(
    selected: CanonicalProduct,
    catalog: list[CanonicalProduct],
) -> ComparisonSet:
    """Fill the selected product's slot and search the other two.

    This is a substring heuristic: a shared common word can pair
    unrelated perfumes and a renamed one can be missed.
    """
    tokens = name_tokens(selected.name or "")
    matches: dict[Category, CanonicalProduct | None] = {}

    for category in Category:
        if category is selected.category:
            matches[category] = selected
            continue
        pool = [p for p in catalog if p.category is category]
        matches[category] = _first_match(selected, tokens, pool)

    logger.debug(
        "Comparison for %s (tokens=%s): me=%s w=%s rep=%s",
        selected.id,
        tokens,
        getattr(matches[Category.MIDDLE_EASTERN], "id", None),
        getattr(matches[Category.WESTERN], "id", None),
        getattr(matches[Category.REPLICA], "id", None),
    )
    return ComparisonSet(
        middle_eastern=matches[Category.MIDDLE_EASTERN],
        western=matches[Category.WESTERN],
        replica=matches[Category.REPLICA],
    )


def find_product(
    catalog: list[CanonicalProduct], product_id: str,
) -> CanonicalProduct | None:
    """Look a product up by its catalog id."""
    return next((p for p in catalog if p.id == product_id), None)
