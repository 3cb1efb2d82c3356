# src/services/catalog_endpoint.py

"""Request/response boundary between the UI layer and the aggregator."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from src.services.aggregation_orchestrator import AggregationOrchestrator

logger = logging.getLogger("perfume_compare.endpoint")

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


@dataclass(frozen=True)
class EndpointResponse:
    """A status code plus a JSON-encoded body."""

    status: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status == 200

    def json(self) -> Any:
        return json.loads(self.body)


class CatalogEndpoint:
    """Serves the unified catalog as a JSON array.

    Source-level failures are absorbed by the orchestrator; anything
    that still escapes becomes a 500 with a fixed message so the raw
    error never reaches the client.
    """

    def __init__(
        self, orchestrator: AggregationOrchestrator | None = None,
    ) -> None:
        self.orchestrator = orchestrator or AggregationOrchestrator()

    async def fetch_products(self) -> EndpointResponse:
        """Run one aggregation cycle and encode its products."""
        try:
            products = await self.orchestrator.aggregate()
        except Exception:
            logger.error("Internal error while aggregating", exc_info=True)
            return EndpointResponse(
                status=500,
                body=json.dumps({"message": INTERNAL_ERROR_MESSAGE}),
            )

        return EndpointResponse(
            status=200,
            body=json.dumps(
                [p.to_dict() for p in products], ensure_ascii=False
            ),
        )
