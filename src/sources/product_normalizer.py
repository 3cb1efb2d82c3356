# src/sources/product_normalizer.py

"""Map raw Shopify product records onto :class:`CanonicalProduct`."""

import logging
import re
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

from src.models.exchange_rate import ExchangeRate
from src.models.product import CanonicalProduct, Category

logger = logging.getLogger("perfume_compare.normalizer")

# Permissive: also eats an unterminated trailing "<..." run
_TAG_RE = re.compile(r"<[^>]*>?")

DEFAULT_NODE = "Perfume"

Normalizer = Callable[
    [dict[str, Any], dict[str, str], ExchangeRate | None],
    CanonicalProduct,
]


def strip_html(html: str | None) -> str:
    """Remove ``<...>`` tags; entities are left as-is."""
    if not html:
        return ""
    return _TAG_RE.sub("", str(html))


def storefront_host(base_url: str) -> str:
    """``https://www.dubaioud.ie/`` -> ``dubaioud.ie``."""
    host = urlparse(base_url).netloc or base_url
    return host.removeprefix("www.").rstrip("/")


def _first(items: Any) -> dict[str, Any] | None:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


def parse_price(raw: Any) -> float:
    """Parse a Shopify price string; bad or negative values become 0."""
    try:
        price = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if price != price or price < 0:  # NaN or negative
        return 0.0
    return price


def _build(
    item: dict[str, Any],
    source: dict[str, str],
    category: Category,
    price: float,
    variant_id: int | str | None,
) -> CanonicalProduct:
    native_id = str(item["id"])
    image = _first(item.get("images"))
    base_url = source["base_url"].rstrip("/")
    handle = item.get("handle") or ""
    return CanonicalProduct(
        id=f"{category.id_prefix}-{native_id}",
        brand=str(item.get("vendor") or ""),
        name=str(item.get("title") or ""),
        details=strip_html(item.get("body_html")),
        node=str(item.get("product_type") or DEFAULT_NODE),
        price=price,
        category=category,
        source=storefront_host(base_url),
        source_url=f"{base_url}/products/{handle}",
        source_id=native_id,
        image=str(image["src"]) if image and image.get("src") else None,
        variant_id=variant_id,
    )


def normalize_middle_eastern(
    item: dict[str, Any],
    source: dict[str, str],
    rate: ExchangeRate | None = None,
) -> CanonicalProduct:
    """Middle-Eastern originals: already priced in EUR, add-to-cart capable."""
    variant = _first(item.get("variants"))
    price = parse_price(variant.get("price")) if variant else 0.0
    variant_id = variant.get("id") if variant else None
    return _build(
        item, source, Category.MIDDLE_EASTERN, price, variant_id
    )


def _converted_price(
    item: dict[str, Any], rate: ExchangeRate | None,
) -> float:
    if rate is None:
        raise ValueError("a converting source needs an exchange rate")
    variant = _first(item.get("variants"))
    native = parse_price(variant.get("price")) if variant else 0.0
    return rate.convert(native)


def normalize_western(
    item: dict[str, Any],
    source: dict[str, str],
    rate: ExchangeRate | None = None,
) -> CanonicalProduct:
    """Western originals: CAD prices converted to EUR."""
    return _build(
        item, source, Category.WESTERN, _converted_price(item, rate), None
    )


def normalize_replica(
    item: dict[str, Any],
    source: dict[str, str],
    rate: ExchangeRate | None = None,
) -> CanonicalProduct:
    """Replicas: AED prices converted to EUR."""
    return _build(
        item, source, Category.REPLICA, _converted_price(item, rate), None
    )


NORMALIZERS: dict[Category, Normalizer] = {
    Category.MIDDLE_EASTERN: normalize_middle_eastern,
    Category.WESTERN: normalize_western,
    Category.REPLICA: normalize_replica,
}


def normalize_products(
    items: list[Any],
    source: dict[str, str],
    rate: ExchangeRate | None = None,
) -> list[CanonicalProduct]:
    """Normalise every item of one source, skipping unusable records.

    A record that is not a dict or has no ``id`` is logged and dropped;
    the rest of the batch is unaffected.
    """
    normalizer = NORMALIZERS[Category(source["category"])]
    products: list[CanonicalProduct] = []
    skipped = 0

    for item in items:
        if not isinstance(item, dict) or item.get("id") is None:
            skipped += 1
            logger.warning(
                "[%s] Skipping record without an id: %.80r",
                source["id"],
                item,
            )
            continue
        products.append(normalizer(item, source, rate))

    if skipped:
        logger.info(
            "[%s] Normalisation skipped %d records",
            source["id"],
            skipped,
        )
    return products
