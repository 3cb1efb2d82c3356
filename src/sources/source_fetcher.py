# src/sources/source_fetcher.py

"""Bounded-time fetch of one Shopify storefront catalog."""

import json
import logging
from typing import Any

from curl_cffi import requests as curl_requests
from curl_cffi.requests.exceptions import RequestException, Timeout

from src.config.settings import Settings
from src.models.errors import (
    MalformedPayloadError,
    SourceTimeoutError,
    SourceUnavailableError,
)


class SourceFetcher:
    """Fetch a source's ``products.json`` with a hard per-call timeout.

    No retries: a failed call raises immediately and the orchestrator
    decides what to do with it.  curl aborts the transfer itself once
    the timeout elapses, so an expired request does not linger.
    """

    def __init__(
        self,
        session: curl_requests.Session | None = None,
        timeout: int | None = None,
    ) -> None:
        self.logger = logging.getLogger("perfume_compare.fetcher")
        self.settings = Settings()
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self.timeout: int = timeout or self.settings.SOURCE_TIMEOUT

    def fetch_source(self, source: dict[str, str]) -> Any:
        """GET the source's catalog URL and return the decoded JSON body.

        Raises:
            SourceTimeoutError: the call exceeded ``self.timeout``.
            SourceUnavailableError: transport error or non-200 status.
            MalformedPayloadError: the body is not JSON.
        """
        source_id = source["id"]
        url = source["products_url"]
        self.logger.debug("[%s] GET %s", source_id, url)

        try:
            resp = self.session.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self.timeout,
            )
        except Timeout as exc:
            raise SourceTimeoutError(
                source_id, f"timed out after {self.timeout}s"
            ) from exc
        except RequestException as exc:
            raise SourceUnavailableError(
                source_id, f"request error: {exc}"
            ) from exc

        if resp.status_code != 200:
            raise SourceUnavailableError(
                source_id, f"HTTP {resp.status_code}"
            )

        try:
            return json.loads(resp.text)
        except ValueError as exc:
            raise MalformedPayloadError(
                source_id, "response is not JSON"
            ) from exc


def extract_products(
    source_id: str, payload: Any,
) -> list[dict[str, Any]]:
    """Return the ``products`` list of a storefront payload.

    Raises:
        MalformedPayloadError: the payload is not ``{"products": [...]}``.
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            source_id, "payload is not a JSON object"
        )
    products = payload.get("products")
    if not isinstance(products, list):
        raise MalformedPayloadError(
            source_id, "payload has no 'products' list"
        )
    return products
