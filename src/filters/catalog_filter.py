# src/filters/catalog_filter.py

"""Client-side filtering and sorting of the unified catalog."""

import logging
import math
import re
from dataclasses import dataclass, replace
from enum import Enum

from src.config.settings import Settings
from src.models.product import CanonicalProduct, Region

logger = logging.getLogger("perfume_compare.filters")

_POSSESSIVE_RE = re.compile(r"'s$")


class SortKey(Enum):
    """Supported orderings of the visible list."""

    PRICE = "price"
    NAME = "name"
    NEWEST = "newest"


@dataclass(frozen=True)
class CatalogQuery:
    """Everything the user can tweak about the visible list."""

    search_term: str = ""
    selected_brand: str = ""
    price_min: float = Settings.DEFAULT_PRICE_MIN
    price_max: float = Settings.DEFAULT_PRICE_MAX
    western: bool = True
    middle_east: bool = True
    original: bool = True
    replica: bool = True
    sort_key: SortKey = SortKey.PRICE

    def with_region_shortcut(self, shortcut: str) -> "CatalogQuery":
        """Apply a region shortcut: ``all``, ``western`` or ``middle-east``.

        Only the region toggles change; type toggles are kept.
        """
        if shortcut == "all":
            return replace(self, western=True, middle_east=True)
        if shortcut == Region.WESTERN.value:
            return replace(self, western=True, middle_east=False)
        if shortcut == Region.MIDDLE_EAST.value:
            return replace(self, western=False, middle_east=True)
        raise ValueError(f"Unknown region shortcut: {shortcut!r}")


def normalize_brand(brand: str) -> str:
    """Comparison key for a brand: ``"Dior's "`` -> ``"dior"``."""
    key = brand.lower().strip()
    return _POSSESSIVE_RE.sub("", key).strip()


def available_brands(products: list[CanonicalProduct]) -> list[str]:
    """Distinct brands, one display spelling per key, sorted A-Z.

    The first spelling seen for a key wins (possessive removed).
    """
    by_key: dict[str, str] = {}
    for product in products:
        if not product.brand:
            continue
        key = normalize_brand(product.brand)
        if key and key not in by_key:
            display = _POSSESSIVE_RE.sub("", product.brand.strip())
            by_key[key] = display.strip()
    return sorted(by_key.values(), key=lambda b: (b.casefold(), b))


def _matches_search(product: CanonicalProduct, term: str) -> bool:
    fields = (product.brand, product.name, product.node, product.details)
    return any(term in (value or "").lower() for value in fields)


def _has_numeric_price(product: CanonicalProduct) -> bool:
    price = product.price
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return False
    return not math.isnan(price)


def _passes_toggles(
    product: CanonicalProduct, query: CatalogQuery,
) -> bool:
    """Region AND type must both be switched on for this product."""
    if product.region is Region.WESTERN:
        region_on = query.western
    else:
        region_on = query.middle_east
    type_on = query.replica if product.is_replica else query.original
    return region_on and type_on


def _newest_key(product: CanonicalProduct) -> int:
    """Numeric source id; 0 when it is not a number."""
    try:
        return int(product.source_id)
    except ValueError:
        return 0


def sort_products(
    products: list[CanonicalProduct], sort_key: SortKey,
) -> list[CanonicalProduct]:
    """Return a sorted copy; ties keep their catalog order."""
    if sort_key is SortKey.PRICE:
        return sorted(products, key=lambda p: p.price or 0)
    if sort_key is SortKey.NAME:
        # Code-point order: stable across hosts, unlike locale collation
        return sorted(products, key=lambda p: p.name or "")
    return sorted(products, key=_newest_key, reverse=True)


def filter_catalog(
    products: list[CanonicalProduct], query: CatalogQuery,
) -> list[CanonicalProduct]:
    """Apply search, brand, price band and toggles, then sort."""
    visible = list(products)

    term = query.search_term.lower()
    if term:
        visible = [p for p in visible if _matches_search(p, term)]

    if query.selected_brand:
        wanted = normalize_brand(query.selected_brand)
        visible = [
            p
            for p in visible
            if p.brand and normalize_brand(p.brand) == wanted
        ]

    visible = [
        p
        for p in visible
        if _has_numeric_price(p)
        and query.price_min <= p.price <= query.price_max
    ]

    visible = [p for p in visible if _passes_toggles(p, query)]

    logger.debug(
        "Filter kept %d of %d products (query=%s)",
        len(visible),
        len(products),
        query,
    )
    return sort_products(visible, query.sort_key)
