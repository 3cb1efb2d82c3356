# main.py

"""Entry point for perfume_compare (TUI dashboard or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.filters.catalog_filter import CatalogQuery, SortKey

logger = logging.getLogger("perfume_compare.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    source_labels = ", ".join(s["label"] for s in Settings.CATALOG_SOURCES)

    parser = argparse.ArgumentParser(
        prog="perfume_compare",
        description=(
            "Compare original and replica perfume prices across stores."
        ),
        epilog=f"Sources: {source_labels}",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--list",
        action="store_true",
        help="Load the catalog and print the filtered list.",
    )
    mode.add_argument(
        "--brands",
        action="store_true",
        help="Print the selectable brand names.",
    )
    mode.add_argument(
        "--compare",
        metavar="PRODUCT_ID",
        default=None,
        help="Print the closest match in every category (e.g. me-123).",
    )
    parser.add_argument(
        "-q", "--search", default="", help="Free-text search term."
    )
    parser.add_argument(
        "-b", "--brand", default="", help="Only show this brand."
    )
    parser.add_argument(
        "--min",
        type=float,
        default=Settings.DEFAULT_PRICE_MIN,
        dest="price_min",
        help="Minimum price in EUR (default: %(default)s).",
    )
    parser.add_argument(
        "--max",
        type=float,
        default=Settings.DEFAULT_PRICE_MAX,
        dest="price_max",
        help="Maximum price in EUR (default: %(default)s).",
    )
    parser.add_argument(
        "--no-western", action="store_true", help="Hide Western stores."
    )
    parser.add_argument(
        "--no-middle-east",
        action="store_true",
        help="Hide Middle-Eastern stores.",
    )
    parser.add_argument(
        "--no-original", action="store_true", help="Hide originals."
    )
    parser.add_argument(
        "--no-replica", action="store_true", help="Hide replicas."
    )
    parser.add_argument(
        "--sort",
        choices=[k.value for k in SortKey],
        default=SortKey.PRICE.value,
        help="Sort order (default: %(default)s).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Also write the visible list to results/.",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and reprint after every refresh.",
    )
    return parser


def _query_from_args(args: argparse.Namespace) -> CatalogQuery:
    """Translate CLI flags into a CatalogQuery."""
    return CatalogQuery(
        search_term=args.search,
        selected_brand=args.brand,
        price_min=args.price_min,
        price_max=args.price_max,
        western=not args.no_western,
        middle_east=not args.no_middle_east,
        original=not args.no_original,
        replica=not args.no_replica,
        sort_key=SortKey(args.sort),
    )


def _run_tui() -> None:
    """Launch the interactive Textual dashboard."""
    from src.ui.app import PerfumeCompareApp

    try:
        PerfumeCompareApp().run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("perfume_compare TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run one of the headless modes and exit with its status."""
    from src.cli.runner import cli_brands, cli_compare, cli_list

    if args.brands:
        coro = cli_brands()
    elif args.compare:
        coro = cli_compare(args.compare, args.output_format)
    else:
        coro = cli_list(
            _query_from_args(args),
            args.output_format,
            save=args.save,
            watch=args.watch,
        )

    try:
        exit_code = asyncio.run(coro)
    except KeyboardInterrupt:
        exit_code = 0
    sys.exit(exit_code)


def main() -> None:
    """Route to the TUI (no mode flag) or the headless CLI."""
    log_file = setup_logging()
    logger.info("perfume_compare starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    if args.list or args.brands or args.compare:
        _run_cli(args)
    else:
        _run_tui()


if __name__ == "__main__":
    main()
