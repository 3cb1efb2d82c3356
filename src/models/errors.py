# src/models/errors.py

"""Error taxonomy for catalog aggregation and loading."""


class CatalogError(Exception):
    """Base class for every catalog pipeline failure."""


class SourceUnavailableError(CatalogError):
    """A single catalog source could not be fetched."""

    def __init__(self, source_id: str, reason: str) -> None:
        super().__init__(f"[{source_id}] {reason}")
        self.source_id = source_id
        self.reason = reason


class SourceTimeoutError(SourceUnavailableError):
    """A source fetch exceeded its time bound and was aborted."""


class MalformedPayloadError(SourceUnavailableError):
    """A source answered, but not with a ``{"products": [...]}`` body."""


class AggregationError(CatalogError):
    """Failure outside per-source isolation; aborts the whole cycle."""


class RequestTimeoutError(CatalogError):
    """The end-to-end catalog request exceeded its outer bound."""


class ResponseFormatError(CatalogError):
    """The aggregation boundary returned something other than a JSON array."""
