# src/sources/rate_provider.py

"""Live currency rates with a fixed per-pair fallback."""

import json
import logging
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.exchange_rate import ExchangeRate, RateProvenance


class CurrencyRateProvider:
    """Resolve conversion rates against the Frankfurter API.

    A lookup never fails from the caller's point of view: transport
    errors, non-200 answers and payloads without a numeric
    ``rates.<quote>`` field all degrade to the configured fallback
    constant for that pair.
    """

    def __init__(
        self,
        session: curl_requests.Session | None = None,
    ) -> None:
        self.logger = logging.getLogger("perfume_compare.rates")
        self.settings = Settings()
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def fallback_rate(self, base: str, quote: str) -> float:
        """Configured constant for the pair; unknown pairs raise KeyError."""
        return self.settings.FALLBACK_RATES[(base, quote)]

    def _fallback(
        self, base: str, quote: str, cause: str,
    ) -> ExchangeRate:
        rate = self.fallback_rate(base, quote)
        self.logger.warning(
            "[%s->%s] Live rate unavailable (%s), using fallback %.4f",
            base,
            quote,
            cause,
            rate,
        )
        return ExchangeRate(
            base=base,
            quote=quote,
            rate=rate,
            provenance=RateProvenance.FALLBACK,
        )

    @staticmethod
    def _extract_rate(data: Any, quote: str) -> float | None:
        """Pull ``rates[quote]`` out of a payload, or None if malformed."""
        if not isinstance(data, dict):
            return None
        rates = data.get("rates")
        if not isinstance(rates, dict):
            return None
        value = rates.get(quote)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if value <= 0:
            return None
        return float(value)

    def get_rate(self, base: str, quote: str) -> ExchangeRate:
        """Return the live ``base``->``quote`` rate, or the fallback."""
        # Resolve the fallback first so a missing pair surfaces immediately
        self.fallback_rate(base, quote)
        url = f"{self.settings.RATE_API_URL}?from={base}&to={quote}"

        try:
            resp = self.session.get(
                url, headers=self.settings.DEFAULT_HEADERS
            )
        except Exception as exc:
            return self._fallback(base, quote, f"request error: {exc}")

        if resp.status_code != 200:
            return self._fallback(
                base, quote, f"HTTP {resp.status_code}"
            )

        try:
            data: Any = json.loads(resp.text)
        except ValueError:
            return self._fallback(base, quote, "response is not JSON")

        rate = self._extract_rate(data, quote)
        if rate is None:
            return self._fallback(
                base, quote, f"no numeric rates.{quote} field"
            )

        self.logger.info("[%s->%s] Live rate %.4f", base, quote, rate)
        return ExchangeRate(
            base=base,
            quote=quote,
            rate=rate,
            provenance=RateProvenance.LIVE,
        )
