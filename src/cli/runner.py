# src/cli/runner.py

"""Headless catalog runner: load, filter, print."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.filters.catalog_filter import (
    CatalogQuery,
    available_brands,
    filter_catalog,
)
from src.filters.catalog_stats import summarize
from src.filters.comparison_matcher import find_comparison, find_product
from src.models.product import CanonicalProduct, Category, format_price
from src.services.catalog_loader import CatalogLoader

logger = logging.getLogger("perfume_compare.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_CATEGORY_LABELS: dict[Category, str] = {
    Category.MIDDLE_EASTERN: "Middle Eastern",
    Category.WESTERN: "Western",
    Category.REPLICA: "Replica",
}


def _print_table(products: list[CanonicalProduct], title: str) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="dim")
    table.add_column("Brand", style="bold")
    table.add_column("Name", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Category", style="magenta")
    table.add_column("Link", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.id,
            p.brand or "—",
            p.name[:50],
            format_price(p),
            _CATEGORY_LABELS[p.category],
            p.source_url,
        )

    Console().print(table)


def _dump_json(data: object) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def save_catalog(
    products: list[CanonicalProduct], results_dir: Path | None = None,
) -> Path:
    """Write *products* to a timestamped JSON file and return its path."""
    target = results_dir or Settings.RESULTS_DIR
    target.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = target / f"catalog_{stamp}.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(
            [p.to_dict() for p in products],
            f,
            ensure_ascii=False,
            indent=2,
        )
    logger.info("Saved %d products to %s", len(products), path)
    return path


def _print_summary(products: list[CanonicalProduct], total: int) -> None:
    stats = summarize(products)
    _err.print(
        f"[green]✓ {stats.total_products} of {total} products[/green]  "
        f"[dim]avg €{stats.average_price:.2f} · "
        f"western={stats.western_count} · "
        f"middle-east={stats.middle_eastern_count}[/dim]"
    )


def render_catalog(
    loader: CatalogLoader,
    query: CatalogQuery,
    output_format: str,
    save: bool = False,
) -> int:
    """Filter the loaded catalog and print it; returns an exit code."""
    if loader.error:
        _err.print(f"[red]{loader.error}[/red]")
        if not loader.has_loaded:
            return 1

    visible = filter_catalog(loader.products, query)
    if not visible:
        _err.print("[yellow]No products match the current filters.[/yellow]")
        return 1

    _print_summary(visible, len(loader.products))

    if save:
        try:
            path = save_catalog(visible)
            _err.print(f"[dim]Saved → {path}[/dim]")
        except OSError as exc:
            logger.error("Save failed: %s", exc, exc_info=True)
            _err.print(f"[red]Save failed: {exc}[/red]")

    if output_format == "table":
        _print_table(visible, "Perfume Catalog")
    else:
        _dump_json([p.to_dict() for p in visible])
    return 0


def render_brands(loader: CatalogLoader) -> int:
    """Print the selectable brand list."""
    if not loader.has_loaded:
        _err.print(f"[red]{loader.error}[/red]")
        return 1
    _dump_json(available_brands(loader.products))
    return 0


def render_comparison(
    loader: CatalogLoader, product_id: str, output_format: str,
) -> int:
    """Print the comparison triple for *product_id*."""
    if not loader.has_loaded:
        _err.print(f"[red]{loader.error}[/red]")
        return 1

    selected = find_product(loader.products, product_id)
    if selected is None:
        _err.print(f"[red]Unknown product id: {product_id}[/red]")
        return 1

    pair = find_comparison(selected, loader.products)
    if output_format == "json":
        _dump_json(
            {
                "middleEastern": (
                    pair.middle_eastern.to_dict()
                    if pair.middle_eastern
                    else None
                ),
                "western": pair.western.to_dict() if pair.western else None,
                "replica": pair.replica.to_dict() if pair.replica else None,
            }
        )
        return 0

    table = Table(
        title=f"Comparison for {selected.name}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("")
    for category in Category:
        table.add_column(_CATEGORY_LABELS[category])

    slots = [pair.slot(category) for category in Category]
    table.add_row("Name", *[p.name if p else "—" for p in slots])
    table.add_row("Brand", *[p.brand if p else "—" for p in slots])
    table.add_row("Price", *[format_price(p) for p in slots])
    table.add_row("Link", *[p.source_url if p else "—" for p in slots])
    Console().print(table)
    return 0


async def cli_list(
    query: CatalogQuery,
    output_format: str,
    save: bool = False,
    watch: bool = False,
) -> int:
    """Load the catalog once (or every refresh interval) and print it."""
    loader = CatalogLoader()
    _err.print("[bold]Loading catalog...[/bold]")

    if not watch:
        await loader.load()
        return render_catalog(loader, query, output_format, save)

    async def _on_cycle(current: CatalogLoader) -> None:
        render_catalog(current, query, output_format, save)
        _err.print(
            f"[dim]Next refresh in {Settings.REFRESH_INTERVAL}s "
            f"(Ctrl+C to stop)[/dim]"
        )

    await loader.refresh_forever(on_cycle=_on_cycle)
    return 0


async def cli_brands() -> int:
    """Load the catalog and print its brand list."""
    loader = CatalogLoader()
    await loader.load()
    return render_brands(loader)


async def cli_compare(product_id: str, output_format: str) -> int:
    """Load the catalog and print the comparison for one product."""
    loader = CatalogLoader()
    await loader.load()
    return render_comparison(loader, product_id, output_format)
