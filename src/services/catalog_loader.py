# src/services/catalog_loader.py

"""Consumer side of the catalog boundary; owns the displayed catalog."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from src.config.settings import Settings
from src.models.errors import (
    CatalogError,
    RequestTimeoutError,
    ResponseFormatError,
)
from src.models.product import CanonicalProduct
from src.services.catalog_endpoint import CatalogEndpoint

logger = logging.getLogger("perfume_compare.loader")

TIMEOUT_MESSAGE = "Data loading timed out. Please try refreshing the page."
GENERIC_ERROR_MESSAGE = (
    "An error occurred while fetching data. Please try again."
)


def _decode_catalog(body: str) -> list[CanonicalProduct]:
    """Decode a boundary body into products, or raise ResponseFormatError."""
    try:
        data: Any = json.loads(body)
    except ValueError as exc:
        raise ResponseFormatError("response is not JSON") from exc
    if not isinstance(data, list):
        raise ResponseFormatError("response is not a JSON array")
    try:
        return [CanonicalProduct.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as exc:
        raise ResponseFormatError(f"bad product entry: {exc}") from exc


class CatalogLoader:
    """Loads the catalog through the endpoint and keeps the last good copy.

    ``products`` is only ever replaced as a whole, and only after a
    successful load.  A failed load keeps the previous catalog unless
    nothing has loaded yet, in which case the catalog stays empty and
    ``error`` carries the user-facing message.
    """

    def __init__(
        self,
        endpoint: CatalogEndpoint | None = None,
        timeout: float | None = None,
    ) -> None:
        self.settings = Settings()
        self.endpoint = endpoint or CatalogEndpoint()
        self.timeout: float = timeout or self.settings.REQUEST_TIMEOUT
        self.products: list[CanonicalProduct] = []
        self.error: str | None = None
        self.is_loading: bool = False
        self.loaded_at: datetime | None = None

    @property
    def has_loaded(self) -> bool:
        return self.loaded_at is not None

    async def request_catalog(self) -> list[CanonicalProduct]:
        """Call the endpoint under the outer timeout and decode the result.

        Raises:
            RequestTimeoutError: the call exceeded ``self.timeout``; the
                in-flight request is cancelled.
            ResponseFormatError: the body is not a JSON array of products.
            CatalogError: the endpoint answered with a non-200 status.
        """
        try:
            response = await asyncio.wait_for(
                self.endpoint.fetch_products(), timeout=self.timeout
            )
        except asyncio.TimeoutError as exc:
            raise RequestTimeoutError(
                f"catalog request exceeded {self.timeout:g}s"
            ) from exc

        if not response.ok:
            raise CatalogError(
                f"catalog request failed with HTTP {response.status}"
            )
        return _decode_catalog(response.body)

    async def load(self) -> bool:
        """Refresh the catalog; returns True when it was replaced.

        A call made while another load is in flight is ignored.
        """
        if self.is_loading:
            logger.info("Load already in flight, ignoring request")
            return False

        self.is_loading = True
        self.error = None
        try:
            products = await self.request_catalog()
        except RequestTimeoutError as exc:
            logger.error("Catalog load timed out: %s", exc)
            self._fail(TIMEOUT_MESSAGE)
            return False
        except CatalogError as exc:
            logger.error("Catalog load failed: %s", exc, exc_info=True)
            self._fail(GENERIC_ERROR_MESSAGE)
            return False
        finally:
            self.is_loading = False

        self.products = products
        self.loaded_at = datetime.now()
        logger.info("Catalog replaced with %d products", len(products))
        return True

    def _fail(self, message: str) -> None:
        self.error = message
        if not self.has_loaded:
            self.products = []

    async def refresh_forever(
        self,
        on_cycle: Callable[["CatalogLoader"], Awaitable[None]] | None = None,
        interval: float | None = None,
        max_cycles: int | None = None,
    ) -> None:
        """Load immediately, then again every *interval* seconds.

        *on_cycle* is awaited after every attempt, successful or not.
        """
        period = interval if interval is not None else (
            self.settings.REFRESH_INTERVAL
        )
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            await self.load()
            if on_cycle is not None:
                await on_cycle(self)
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            await asyncio.sleep(period)
