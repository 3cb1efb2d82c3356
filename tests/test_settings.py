# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and the source registry."""

    def test_timeouts(self) -> None:
        """Per-source and end-to-end bounds match the contract."""
        self.assertEqual(Settings.SOURCE_TIMEOUT, 10)
        self.assertEqual(Settings.REQUEST_TIMEOUT, 60)
        self.assertLess(Settings.SOURCE_TIMEOUT, Settings.REQUEST_TIMEOUT)

    def test_refresh_interval_is_five_minutes(self) -> None:
        self.assertEqual(Settings.REFRESH_INTERVAL, 300)

    def test_fallback_rates(self) -> None:
        """Both converting pairs have their fixed fallback constant."""
        self.assertEqual(Settings.FALLBACK_RATES[("CAD", "EUR")], 0.68)
        self.assertEqual(Settings.FALLBACK_RATES[("AED", "EUR")], 0.25)

    def test_default_price_band(self) -> None:
        self.assertEqual(Settings.DEFAULT_PRICE_MIN, 0.0)
        self.assertEqual(Settings.DEFAULT_PRICE_MAX, 500.0)

    def test_three_sources_in_order(self) -> None:
        """Middle-Eastern, Western, then replica."""
        categories = [s["category"] for s in Settings.CATALOG_SOURCES]
        self.assertEqual(
            categories, ["middle-east", "western", "replica"]
        )

    def test_each_source_has_required_keys(self) -> None:
        required = {
            "id",
            "label",
            "category",
            "currency",
            "base_url",
            "products_url",
        }
        for src in Settings.CATALOG_SOURCES:
            with self.subTest(src=src.get("id", "?")):
                self.assertTrue(required.issubset(src))

    def test_source_ids_are_unique(self) -> None:
        ids = [s["id"] for s in Settings.CATALOG_SOURCES]
        self.assertEqual(len(ids), len(set(ids)))

    def test_products_url_targets_products_json(self) -> None:
        for src in Settings.CATALOG_SOURCES:
            with self.subTest(src=src["id"]):
                self.assertTrue(
                    src["products_url"].startswith(src["base_url"])
                )
                self.assertIn("/products.json", src["products_url"])

    def test_every_foreign_currency_has_fallback(self) -> None:
        """No source currency is left without a fallback rate."""
        for src in Settings.CATALOG_SOURCES:
            if src["currency"] == Settings.REFERENCE_CURRENCY:
                continue
            with self.subTest(currency=src["currency"]):
                self.assertIn(
                    (src["currency"], Settings.REFERENCE_CURRENCY),
                    Settings.FALLBACK_RATES,
                )

    def test_path_constants_are_paths(self) -> None:
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.RESULTS_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_default_headers_accept_json(self) -> None:
        self.assertEqual(
            Settings.DEFAULT_HEADERS["Accept"], "application/json"
        )


if __name__ == "__main__":
    unittest.main()
