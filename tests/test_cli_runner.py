# tests/test_cli_runner.py

"""Tests for the headless CLI renderers and argument parsing."""

import io
import os
import json
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from main import _build_parser, _query_from_args
from src.cli.runner import (
    cli_brands,
    render_brands,
    render_catalog,
    render_comparison,
    save_catalog,
)
from src.config.settings import Settings
from src.filters.catalog_filter import CatalogQuery, SortKey
from src.models.product import Category
from src.services.catalog_loader import CatalogLoader
from tests.helpers import make_product


def _loaded(error: str | None = None) -> CatalogLoader:
    """Loader holding a small catalog, as if a load had succeeded."""
    loader = CatalogLoader(endpoint=MagicMock())
    loader.products = [
        make_product(
            "Royal Oud Wood", Category.MIDDLE_EASTERN, 49.9, "Lattafa", "1"
        ),
        make_product("Vanilla Bloom", Category.WESTERN, 102.0, "Dior", "2"),
        make_product(
            "Oud Wood Intense", Category.REPLICA, 30.0, "Fragrance World", "3"
        ),
    ]
    loader.loaded_at = datetime.now()
    loader.error = error
    return loader


def _failed() -> CatalogLoader:
    loader = CatalogLoader(endpoint=MagicMock())
    loader.error = "An error occurred while fetching data. Please try again."
    return loader


class TestRenderCatalog(unittest.TestCase):
    """render_catalog output and exit codes."""

    def test_json_output(self) -> None:
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = render_catalog(_loaded(), CatalogQuery(), "json")
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual([d["id"] for d in data], ["rep-3", "me-1", "w-2"])
        self.assertTrue(data[0]["isReplica"])

    def test_filters_applied(self) -> None:
        query = CatalogQuery(search_term="vanilla")
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            render_catalog(_loaded(), query, "json")
        data = json.loads(out.getvalue())
        self.assertEqual([d["name"] for d in data], ["Vanilla Bloom"])

    def test_table_output(self) -> None:
        with patch.dict(os.environ, {"COLUMNS": "200"}), patch(
            "sys.stdout", new_callable=io.StringIO
        ) as out:
            code = render_catalog(_loaded(), CatalogQuery(), "table")
        self.assertEqual(code, 0)
        self.assertIn("Royal Oud Wood", out.getvalue())
        self.assertIn("€49.90", out.getvalue())

    def test_no_matches(self) -> None:
        query = CatalogQuery(search_term="nothing like this")
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = render_catalog(_loaded(), query, "json")
        self.assertEqual(code, 1)
        self.assertEqual(out.getvalue(), "")

    def test_first_load_failure(self) -> None:
        self.assertEqual(render_catalog(_failed(), CatalogQuery(), "json"), 1)

    def test_refresh_failure_still_prints_previous(self) -> None:
        loader = _loaded(error="Data loading timed out.")
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = render_catalog(loader, CatalogQuery(), "json")
        self.assertEqual(code, 0)
        self.assertEqual(len(json.loads(out.getvalue())), 3)

    def test_save_writes_file(self) -> None:
        with patch("sys.stdout", new_callable=io.StringIO):
            render_catalog(_loaded(), CatalogQuery(), "json", save=True)
        saved = list(Settings.RESULTS_DIR.glob("catalog_*.json"))
        self.assertEqual(len(saved), 1)


class TestSaveCatalog(unittest.TestCase):
    """save_catalog writes the boundary representation."""

    def test_round_trip_file(self) -> None:
        products = _loaded().products
        path = save_catalog(products)
        self.assertTrue(path.name.startswith("catalog_"))
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data, [p.to_dict() for p in products])

    def test_explicit_dir(self) -> None:
        target = Settings.RESULTS_DIR / "nested"
        path = save_catalog([], results_dir=target)
        self.assertEqual(path.parent, target)
        self.assertEqual(json.loads(Path(path).read_text("utf-8")), [])


class TestRenderBrands(unittest.TestCase):

    def test_brand_list(self) -> None:
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = render_brands(_loaded())
        self.assertEqual(code, 0)
        self.assertEqual(
            json.loads(out.getvalue()),
            ["Dior", "Fragrance World", "Lattafa"],
        )

    def test_not_loaded(self) -> None:
        self.assertEqual(render_brands(_failed()), 1)


class TestRenderComparison(unittest.TestCase):
    """render_comparison slots and errors."""

    def test_json_slots(self) -> None:
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = render_comparison(_loaded(), "rep-3", "json")
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual(data["replica"]["id"], "rep-3")
        self.assertEqual(data["middleEastern"]["id"], "me-1")
        self.assertIsNone(data["western"])

    def test_table(self) -> None:
        with patch.dict(os.environ, {"COLUMNS": "200"}), patch(
            "sys.stdout", new_callable=io.StringIO
        ) as out:
            code = render_comparison(_loaded(), "me-1", "table")
        self.assertEqual(code, 0)
        self.assertIn("Oud Wood Intense", out.getvalue())

    def test_unknown_id(self) -> None:
        self.assertEqual(render_comparison(_loaded(), "me-404", "json"), 1)

    def test_not_loaded(self) -> None:
        self.assertEqual(render_comparison(_failed(), "me-1", "json"), 1)


class TestCliCommands(unittest.IsolatedAsyncioTestCase):
    """Async command wrappers load before rendering."""

    async def test_cli_brands_loads_first(self) -> None:
        with patch.object(
            CatalogLoader, "load", new_callable=AsyncMock
        ) as mock_load, patch(
            "src.cli.runner.render_brands", return_value=0
        ) as render:
            code = await cli_brands()
        self.assertEqual(code, 0)
        mock_load.assert_awaited_once()
        render.assert_called_once()


class TestArgumentParsing(unittest.TestCase):
    """main._build_parser and _query_from_args."""

    def test_defaults(self) -> None:
        args = _build_parser().parse_args([])
        self.assertFalse(args.list)
        self.assertFalse(args.brands)
        self.assertIsNone(args.compare)
        self.assertEqual(_query_from_args(args), CatalogQuery())

    def test_filter_flags(self) -> None:
        args = _build_parser().parse_args(
            [
                "--list", "-q", "oud", "-b", "Lattafa",
                "--min", "10", "--max", "90",
                "--no-western", "--no-replica", "--sort", "newest",
                "-f", "table",
            ]
        )
        query = _query_from_args(args)
        self.assertTrue(args.list)
        self.assertEqual(args.output_format, "table")
        self.assertEqual(query.search_term, "oud")
        self.assertEqual(query.selected_brand, "Lattafa")
        self.assertEqual((query.price_min, query.price_max), (10.0, 90.0))
        self.assertFalse(query.western)
        self.assertTrue(query.middle_east)
        self.assertTrue(query.original)
        self.assertFalse(query.replica)
        self.assertEqual(query.sort_key, SortKey.NEWEST)

    def test_modes_are_exclusive(self) -> None:
        with patch("sys.stderr", new_callable=io.StringIO), self.assertRaises(
            SystemExit
        ):
            _build_parser().parse_args(["--list", "--brands"])

    def test_compare_takes_id(self) -> None:
        args = _build_parser().parse_args(["--compare", "me-7001"])
        self.assertEqual(args.compare, "me-7001")


if __name__ == "__main__":
    unittest.main()
