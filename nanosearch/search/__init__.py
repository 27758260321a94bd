"""Web search: provider adapters, result extraction and the resolving client."""

from nanosearch.search.client import (
    WebSearchClient,
    search_and_fetch,
    search_web,
    search_web_multiple,
)
from nanosearch.search.errors import ProviderError, WebSearchError
from nanosearch.search.models import (
    EnrichedResult,
    EnrichmentEnvelope,
    MultiQueryEnvelope,
    SearchEnvelope,
    SearchResult,
)

__all__ = [
    "EnrichedResult",
    "EnrichmentEnvelope",
    "MultiQueryEnvelope",
    "ProviderError",
    "SearchEnvelope",
    "SearchResult",
    "WebSearchClient",
    "WebSearchError",
    "search_and_fetch",
    "search_web",
    "search_web_multiple",
]
