# src/services/aggregation_orchestrator.py

"""Runs one aggregation cycle: rates + all sources, concurrently."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings
from src.models.errors import (
    AggregationError,
    SourceTimeoutError,
    SourceUnavailableError,
)
from src.models.exchange_rate import ExchangeRate
from src.models.product import CanonicalProduct
from src.sources.product_normalizer import normalize_products
from src.sources.rate_provider import CurrencyRateProvider
from src.sources.source_fetcher import SourceFetcher, extract_products

logger = logging.getLogger("perfume_compare.orchestrator")


@dataclass
class AggregationResult:
    """Outcome of one aggregation cycle."""

    products: list[CanonicalProduct] = field(
        default_factory=lambda: list[CanonicalProduct]()
    )
    rates: dict[str, ExchangeRate] = field(
        default_factory=lambda: dict[str, ExchangeRate]()
    )
    source_counts: dict[str, int] = field(
        default_factory=lambda: dict[str, int]()
    )
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @property
    def degraded_rates(self) -> list[ExchangeRate]:
        """Rates that fell back to their fixed constant."""
        return [r for r in self.rates.values() if r.is_degraded]


class AggregationOrchestrator:
    """Coordinates rate resolution, source fetches and normalisation.

    Every rate lookup and every source fetch is started at once and the
    cycle waits for all of them to settle.  A failing source contributes
    nothing and is recorded in ``AggregationResult.errors``; only a
    failure in the orchestration itself raises :class:`AggregationError`.
    """

    def __init__(
        self,
        rate_provider: CurrencyRateProvider | None = None,
        fetcher: SourceFetcher | None = None,
        sources: list[dict[str, str]] | None = None,
    ) -> None:
        self.settings = Settings()
        self.rate_provider = rate_provider or CurrencyRateProvider()
        self.fetcher = fetcher or SourceFetcher()
        self.sources = (
            sources
            if sources is not None
            else self.settings.CATALOG_SOURCES
        )

    def _foreign_currencies(self) -> list[str]:
        """Source currencies that need converting, in source order."""
        reference = self.settings.REFERENCE_CURRENCY
        currencies: list[str] = []
        for src in self.sources:
            currency = src["currency"]
            if currency != reference and currency not in currencies:
                currencies.append(currency)
        return currencies

    def _collect_source(
        self,
        source: dict[str, str],
        outcome: Any,
        rates: dict[str, ExchangeRate],
        result: AggregationResult,
    ) -> None:
        """Fold one settled fetch into *result*."""
        source_id = source["id"]

        if isinstance(outcome, SourceTimeoutError):
            logger.error("Source timed out: %s", outcome)
            result.errors.append(str(outcome))
            result.source_counts[source_id] = 0
            return
        if isinstance(outcome, SourceUnavailableError):
            logger.error("Source unavailable: %s", outcome)
            result.errors.append(str(outcome))
            result.source_counts[source_id] = 0
            return
        if isinstance(outcome, BaseException):
            logger.error(
                "[%s] Unexpected fetch failure: %s",
                source_id,
                outcome,
                exc_info=outcome,
            )
            result.errors.append(f"[{source_id}] {outcome}")
            result.source_counts[source_id] = 0
            return

        try:
            items = extract_products(source_id, outcome)
        except SourceUnavailableError as exc:
            logger.error("Malformed payload: %s", exc)
            result.errors.append(str(exc))
            result.source_counts[source_id] = 0
            return

        rate = rates.get(source["currency"])
        products = normalize_products(items, source, rate)
        result.products.extend(products)
        result.source_counts[source_id] = len(products)
        logger.info(
            "[%s] Normalised %d products", source_id, len(products)
        )

    async def run_cycle(self) -> AggregationResult:
        """Fetch, normalise and concatenate every source's catalog."""
        reference = self.settings.REFERENCE_CURRENCY
        try:
            currencies = self._foreign_currencies()
            rate_tasks = [
                asyncio.to_thread(
                    self.rate_provider.get_rate, currency, reference
                )
                for currency in currencies
            ]
            fetch_tasks = [
                asyncio.to_thread(self.fetcher.fetch_source, src)
                for src in self.sources
            ]
            settled = await asyncio.gather(
                *rate_tasks, *fetch_tasks, return_exceptions=True
            )
        except Exception as exc:
            logger.error(
                "Aggregation cycle failed to start: %s",
                exc,
                exc_info=True,
            )
            raise AggregationError(str(exc)) from exc

        rate_outcomes = settled[: len(currencies)]
        fetch_outcomes = settled[len(currencies):]

        result = AggregationResult()
        for currency, outcome in zip(currencies, rate_outcomes):
            # The provider degrades instead of raising; anything else
            # is a broken pipeline rather than a bad rate
            if isinstance(outcome, BaseException):
                raise AggregationError(
                    f"rate lookup for {currency} crashed: {outcome}"
                ) from outcome
            result.rates[currency] = outcome

        try:
            for source, outcome in zip(self.sources, fetch_outcomes):
                self._collect_source(
                    source, outcome, result.rates, result
                )
        except (KeyError, ValueError) as exc:
            # Bad source registry entry (unknown category, missing rate)
            logger.error(
                "Aggregation cycle failed: %s", exc, exc_info=True
            )
            raise AggregationError(str(exc)) from exc

        logger.info(
            "Aggregation cycle complete: %d products (%s), %d errors",
            len(result.products),
            ", ".join(
                f"{sid}={count}"
                for sid, count in result.source_counts.items()
            ),
            len(result.errors),
        )
        return result

    async def aggregate(self) -> list[CanonicalProduct]:
        """Return the unified catalog in source order."""
        result = await self.run_cycle()
        return result.products
