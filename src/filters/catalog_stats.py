# src/filters/catalog_stats.py

"""Headline figures for the currently visible products."""

from dataclasses import dataclass

from src.models.product import CanonicalProduct, Region


@dataclass(frozen=True)
class CatalogStats:
    """Summary of a product list."""

    total_products: int
    average_price: float
    western_count: int
    middle_eastern_count: int


def summarize(products: list[CanonicalProduct]) -> CatalogStats:
    """Count by region and average the EUR price.

    Replicas carry the Middle-Eastern region, so they are counted there.
    """
    total = len(products)
    average = (
        sum(p.price or 0 for p in products) / total if total else 0.0
    )
    return CatalogStats(
        total_products=total,
        average_price=average,
        western_count=sum(
            1 for p in products if p.region is Region.WESTERN
        ),
        middle_eastern_count=sum(
            1 for p in products if p.region is Region.MIDDLE_EAST
        ),
    )
