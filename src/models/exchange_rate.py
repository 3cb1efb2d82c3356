# src/models/exchange_rate.py

"""Transient exchange-rate value resolved once per aggregation cycle."""

from dataclasses import dataclass
from enum import Enum


class RateProvenance(Enum):
    """Where a rate came from."""

    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ExchangeRate:
    """Conversion factor from ``base`` to ``quote`` currency."""

    base: str
    quote: str
    rate: float
    provenance: RateProvenance

    @property
    def is_degraded(self) -> bool:
        """True when the live lookup failed and a fallback was used."""
        return self.provenance is RateProvenance.FALLBACK

    def convert(self, amount: float) -> float:
        """Convert *amount* from ``base`` into ``quote``."""
        return amount * self.rate
