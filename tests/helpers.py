# tests/helpers.py

"""Builders shared by several test modules."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

from src.config.settings import Settings
from src.models.product import CanonicalProduct, Category

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SOURCES: dict[str, dict[str, str]] = {
    src["category"]: src for src in Settings.CATALOG_SOURCES
}


def load_fixture(name: str) -> Any:
    """Load a JSON fixture from tests/fixtures."""
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


def make_response(status_code: int = 200, body: Any = None) -> MagicMock:
    """Mock curl_cffi response carrying *body* as JSON text."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = body if isinstance(body, str) else json.dumps(body)
    return resp


def make_product(
    name: str,
    category: Category = Category.MIDDLE_EASTERN,
    price: float = 10.0,
    brand: str = "Brand",
    source_id: str = "1",
    details: str = "",
    node: str = "Perfume",
) -> CanonicalProduct:
    """Minimal CanonicalProduct for filter / matcher tests."""
    return CanonicalProduct(
        id=f"{category.id_prefix}-{source_id}",
        brand=brand,
        name=name,
        details=details,
        node=node,
        price=price,
        category=category,
        source="example.com",
        source_url=f"https://example.com/products/{source_id}",
        source_id=source_id,
    )
