# src/models/product.py

"""Canonical product model shared by every stage of the pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Region(Enum):
    """Geographic origin of a listing."""

    WESTERN = "western"
    MIDDLE_EAST = "middle-east"


class Category(Enum):
    """Display category: the (region, is_replica) pair as one tag."""

    MIDDLE_EASTERN = "middle-east"
    WESTERN = "western"
    REPLICA = "replica"

    @property
    def id_prefix(self) -> str:
        """Short tag prepended to source ids (``me``, ``w``, ``rep``)."""
        return _ID_PREFIXES[self]

    @property
    def region(self) -> Region:
        # Replicas are sold from the Middle-Eastern storefront
        if self is Category.WESTERN:
            return Region.WESTERN
        return Region.MIDDLE_EAST

    @property
    def is_replica(self) -> bool:
        return self is Category.REPLICA

    @classmethod
    def from_flags(cls, region: Region, is_replica: bool) -> "Category":
        """Resolve the category from its region and replica flag."""
        if is_replica:
            return cls.REPLICA
        if region is Region.WESTERN:
            return cls.WESTERN
        return cls.MIDDLE_EASTERN


_ID_PREFIXES: dict[Category, str] = {
    Category.MIDDLE_EASTERN: "me",
    Category.WESTERN: "w",
    Category.REPLICA: "rep",
}


@dataclass(frozen=True)
class CanonicalProduct:
    """One normalised listing; ``price`` is always in EUR."""

    id: str
    brand: str
    name: str
    details: str
    node: str
    price: float
    category: Category
    source: str
    source_url: str
    source_id: str = ""
    currency: str = "EUR"
    image: str | None = None
    variant_id: int | str | None = None

    @property
    def region(self) -> Region:
        return self.category.region

    @property
    def is_replica(self) -> bool:
        return self.category.is_replica

    @property
    def add_to_cart_url(self) -> str | None:
        """Direct add-to-cart link; only sources with variants have one."""
        if self.variant_id is None:
            return None
        storefront, sep, _handle = self.source_url.rpartition("/products/")
        if not sep:
            return None
        return f"{storefront}/cart/add?id={self.variant_id}&quantity=1"

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase wire shape."""
        return {
            "id": self.id,
            "brand": self.brand,
            "name": self.name,
            "details": self.details,
            "node": self.node,
            "price": self.price,
            "currency": self.currency,
            "image": self.image,
            "isReplica": self.is_replica,
            "region": self.region.value,
            "category": self.category.value,
            "source": self.source,
            "sourceId": self.source_id,
            "variantId": self.variant_id,
            "sourceUrl": self.source_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CanonicalProduct":
        """Rebuild a product from :meth:`to_dict` output.

        The category is re-derived from ``region`` and ``isReplica`` so
        that payloads without an explicit ``category`` key still load.
        """
        category = Category.from_flags(
            Region(data["region"]), bool(data.get("isReplica", False))
        )
        price = data.get("price")
        return cls(
            id=str(data["id"]),
            brand=str(data.get("brand") or ""),
            name=str(data.get("name") or ""),
            details=str(data.get("details") or ""),
            node=str(data.get("node") or "Perfume"),
            price=float(price) if isinstance(price, (int, float)) else 0.0,
            category=category,
            source=str(data.get("source") or ""),
            source_url=str(data.get("sourceUrl") or ""),
            source_id=str(data.get("sourceId") or ""),
            currency=str(data.get("currency") or "EUR"),
            image=data.get("image"),
            variant_id=data.get("variantId"),
        )


def format_price(product: CanonicalProduct | None) -> str:
    """Render a product price as ``€12.34`` (``N/A`` when absent)."""
    if product is None:
        return "N/A"
    return f"€{product.price:.2f}"
