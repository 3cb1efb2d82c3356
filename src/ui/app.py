# src/ui/app.py

"""Terminal dashboard for browsing and comparing the perfume catalog."""

import logging
import webbrowser
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from src.config.settings import Settings
from src.filters.catalog_filter import (
    CatalogQuery,
    SortKey,
    filter_catalog,
)
from src.filters.catalog_stats import summarize
from src.filters.comparison_matcher import (
    ComparisonSet,
    find_comparison,
    find_product,
)
from src.models.product import CanonicalProduct, Category, format_price
from src.services.catalog_loader import CatalogLoader

logger = logging.getLogger("perfume_compare.ui")

_TOGGLES: dict[str, str] = {
    "check_western": "western",
    "check_middle_east": "middle_east",
    "check_original": "original",
    "check_replica": "replica",
}

_CATEGORY_LABELS: dict[Category, str] = {
    Category.MIDDLE_EASTERN: "Middle Eastern",
    Category.WESTERN: "Western",
    Category.REPLICA: "Replica",
}


def _parse_bound(raw: str, default: float) -> float:
    """Parse a price input, falling back to *default* when blank/bad."""
    try:
        return float(raw) if raw.strip() else default
    except ValueError:
        return default


def describe_comparison(pair: ComparisonSet) -> str:
    """Plain-text summary of a comparison, one line per category."""
    lines: list[str] = []
    for category in Category:
        product = pair.slot(category)
        label = _CATEGORY_LABELS[category]
        if product is None:
            lines.append(f"{label}: no match")
            continue
        line = f"{label}: {product.name} ({product.brand}) {format_price(product)}"
        if product.add_to_cart_url:
            line += f"  cart: {product.add_to_cart_url}"
        lines.append(line)
    return "\n".join(lines)


class PerfumeCompareApp(App[object]):
    """Terminal dashboard for the perfume price comparison catalog."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("p", "sort('price')", "Price Sort"),
        Binding("n", "sort('name')", "Name Sort"),
        Binding("w", "sort('newest')", "Newest"),
        Binding("o", "open_url", "Open Listing"),
        Binding("a", "region('all')", "All Regions"),
        Binding("1", "region('western')", "Western"),
        Binding("2", "region('middle-east')", "Middle East"),
    ]

    def __init__(self, loader: CatalogLoader | None = None) -> None:
        super().__init__()
        self.settings = Settings()
        self.loader = loader or CatalogLoader()
        self.sort_key: SortKey = SortKey.PRICE
        self.visible: list[CanonicalProduct] = []
        self.selected: CanonicalProduct | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🧴 Perfume Price Tracker", id="title"),
            Horizontal(
                Input(
                    placeholder="Search by brand, name, or notes...",
                    id="search_input",
                ),
                Input(placeholder="Brand", id="brand_input"),
                Input(
                    placeholder=f"Min €{self.settings.DEFAULT_PRICE_MIN:g}",
                    id="min_input",
                ),
                Input(
                    placeholder=f"Max €{self.settings.DEFAULT_PRICE_MAX:g}",
                    id="max_input",
                ),
                id="search_bar",
            ),
            Horizontal(
                Checkbox("Western", value=True, id="check_western"),
                Checkbox("Middle East", value=True, id="check_middle_east"),
                Checkbox("Original", value=True, id="check_original"),
                Checkbox("Replica", value=True, id="check_replica"),
                id="toggles",
            ),
            Static("Loading catalog...", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Static("Select a product to compare.", id="comparison"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Set up the table, start the first load and the refresh timer."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.add_columns("Brand", "Name", "Price", "Category", "Store")
        self.run_worker(self.refresh_catalog(), exclusive=True)
        self.set_interval(
            self.settings.REFRESH_INTERVAL, self.refresh_catalog
        )

    # ── Loading ──────────────────────────────────────────

    async def refresh_catalog(self) -> None:
        """Reload the catalog unless a load is already running."""
        if self.loader.is_loading:
            return
        status = self.query_one("#status", Static)
        status.update("🔄 Refreshing..." if self.loader.has_loaded else "Loading catalog...")
        await self.loader.load()
        if self.loader.error:
            self.notify(self.loader.error, severity="error")
        self.apply_filters()

    # ── Filtering ────────────────────────────────────────

    def current_query(self) -> CatalogQuery:
        """Read every filter widget into a CatalogQuery."""
        toggles = {
            field: self.query_one(f"#{widget_id}", Checkbox).value
            for widget_id, field in _TOGGLES.items()
        }
        price_min = _parse_bound(
            self.query_one("#min_input", Input).value,
            self.settings.DEFAULT_PRICE_MIN,
        )
        price_max = _parse_bound(
            self.query_one("#max_input", Input).value,
            self.settings.DEFAULT_PRICE_MAX,
        )
        if price_min > price_max:
            # A minimum above the maximum is not applied
            logger.debug(
                "Ignoring min %.2f above max %.2f", price_min, price_max
            )
            price_min = self.settings.DEFAULT_PRICE_MIN
        return CatalogQuery(
            search_term=self.query_one("#search_input", Input).value,
            selected_brand=self.query_one("#brand_input", Input).value.strip(),
            price_min=price_min,
            price_max=price_max,
            sort_key=self.sort_key,
            **toggles,
        )

    def apply_filters(self) -> None:
        """Recompute the visible list and redraw the table."""
        self.visible = filter_catalog(self.loader.products, self.current_query())
        self.populate_table()

        status = self.query_one("#status", Static)
        if self.loader.error and not self.loader.has_loaded:
            status.update(f"❌ {self.loader.error}")
            return
        stats = summarize(self.visible)
        status.update(
            f"{stats.total_products} products · "
            f"avg €{stats.average_price:.2f} · "
            f"Western {stats.western_count} · "
            f"Middle Eastern {stats.middle_eastern_count}"
        )

    def populate_table(self) -> None:
        """Fill the DataTable with the visible products."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.clear()
        for p in self.visible:
            style = "magenta" if p.is_replica else ""
            table.add_row(
                p.brand,
                p.name[:60],
                Text(format_price(p), style="bold green"),
                Text(_CATEGORY_LABELS[p.category], style=style),
                p.source,
                key=p.id,
            )

    def on_input_changed(self, event: Input.Changed) -> None:
        self.apply_filters()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        self.apply_filters()

    # ── Comparison ───────────────────────────────────────

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Show the cross-category comparison for the selected row."""
        product_id = event.row_key.value
        if product_id is None:
            return
        product = find_product(self.loader.products, product_id)
        if product is None:
            return
        self.selected = product
        pair = find_comparison(product, self.loader.products)
        self.query_one("#comparison", Static).update(
            describe_comparison(pair)
        )

    # ── Actions ──────────────────────────────────────────

    async def action_refresh(self) -> None:
        """Manual refresh; ignored while one is in flight."""
        if self.loader.is_loading:
            self.notify("Refresh already running", severity="warning")
            return
        await self.refresh_catalog()

    def action_region(self, shortcut: str) -> None:
        """Region shortcut: show all regions or only one of them."""
        query = self.current_query().with_region_shortcut(shortcut)
        self.query_one("#check_western", Checkbox).value = query.western
        self.query_one(
            "#check_middle_east", Checkbox
        ).value = query.middle_east
        self.apply_filters()

    def action_sort(self, key: str) -> None:
        """Change the sort order."""
        self.sort_key = SortKey(key)
        self.apply_filters()

    def action_open_url(self) -> None:
        """Open the selected product's listing in the browser."""
        if self.selected is None:
            self.notify("Select a product first", severity="warning")
            return
        webbrowser.open(self.selected.source_url)
