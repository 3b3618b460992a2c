"""Error taxonomy for search requests.

Every failure a search request can surface derives from ``SearchError``.
``InvalidQuery`` is a client error; the rest are server errors that a caller
may retry as a whole.
"""


class SearchError(Exception):
    """Base class for all search failures."""


class InvalidQuery(SearchError):
    """The request failed validation (query text or limit)."""


class EmbeddingUnavailable(SearchError):
    """The embedding provider could not be reached, failed, or timed out."""


class CatalogUnavailable(SearchError):
    """The catalog source could not be read or parsed."""


class InternalError(SearchError):
    """Any other failure while computing a search result."""
