# src/config/settings.py

"""Central configuration for the perfume_compare aggregator."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _products_url(base_url: str) -> str:
    """Shopify storefront catalog endpoint for *base_url*."""
    return f"{base_url.rstrip('/')}/products.json?limit=250"


_DUBAI_OUD_URL = os.getenv("DUBAI_OUD_URL", "https://dubaioud.ie")
_WESTERN_PERFUMES_URL = os.getenv(
    "WESTERN_PERFUMES_URL", "https://westernperfumes.ca"
)
_PARFUM_AE_URL = os.getenv("PARFUM_AE_URL", "https://parfum.ae")


class Settings:
    """Central configuration for the perfume_compare aggregator."""

    # --- Timeouts / scheduling ---
    SOURCE_TIMEOUT: int = 10            # Seconds per catalog source fetch
    REQUEST_TIMEOUT: int = 60           # Seconds for the end-to-end load
    REFRESH_INTERVAL: int = 300         # Seconds between periodic refreshes

    # --- Currency ---
    REFERENCE_CURRENCY: str = "EUR"
    RATE_API_URL: str = os.getenv(
        "RATE_API_URL", "https://api.frankfurter.app/latest"
    )
    FALLBACK_RATES: dict[tuple[str, str], float] = {
        ("CAD", "EUR"): 0.68,
        ("AED", "EUR"): 0.25,
    }

    # --- Filtering defaults ---
    DEFAULT_PRICE_MIN: float = 0.0
    DEFAULT_PRICE_MAX: float = 500.0

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    RESULTS_DIR: Path = BASE_DIR / "results"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources (aggregation order matters) ---
    CATALOG_SOURCES: list[dict[str, str]] = [
        {
            "id": "dubai_oud",
            "label": "Dubai Oud",
            "category": "middle-east",
            "currency": "EUR",
            "base_url": _DUBAI_OUD_URL,
            "products_url": _products_url(_DUBAI_OUD_URL),
        },
        {
            "id": "western_perfumes",
            "label": "Western Perfumes",
            "category": "western",
            "currency": "CAD",
            "base_url": _WESTERN_PERFUMES_URL,
            "products_url": _products_url(_WESTERN_PERFUMES_URL),
        },
        {
            "id": "parfum_ae",
            "label": "Parfum.ae",
            "category": "replica",
            "currency": "AED",
            "base_url": _PARFUM_AE_URL,
            "products_url": _products_url(_PARFUM_AE_URL),
        },
    ]
