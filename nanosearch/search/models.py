"""Shared web search models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

SearchSource = Literal["perplexity", "duckduckgo", "none"]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class SearchResult:
    """Normalized search result item."""

    title: str
    url: str
    snippet: str = ""
    rank: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "rank": self.rank,
        }


@dataclass(slots=True)
class SearchEnvelope:
    """Response wrapper for a single query, returned even on failure."""

    query: str
    results: list[SearchResult]
    source: SearchSource
    timestamp: datetime = field(default_factory=_utc_now)
    error: str | None = None

    @property
    def total(self) -> int:
        return len(self.results)

    @classmethod
    def failed(cls, query: str, error: str) -> "SearchEnvelope":
        return cls(query=query, results=[], source="none", error=error)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "query": self.query,
            "results": [r.to_dict() for r in self.results],
            "total": self.total,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(slots=True)
class MultiQueryEnvelope:
    """Envelopes for a batch of queries, aligned with the input order."""

    queries: list[str]
    results: list[SearchEnvelope]
    timestamp: datetime = field(default_factory=_utc_now)

    @property
    def total_results(self) -> int:
        return sum(envelope.total for envelope in self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "queries": list(self.queries),
            "results": [e.to_dict() for e in self.results],
            "totalResults": self.total_results,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(slots=True)
class EnrichedResult:
    """Search result paired with its fetched page text or the fetch error."""

    result: SearchResult
    content: str | None = None
    fetch_error: str | None = None

    def __post_init__(self) -> None:
        if (self.content is None) == (self.fetch_error is None):
            raise ValueError("exactly one of content or fetch_error must be set")

    @property
    def ok(self) -> bool:
        return self.fetch_error is None

    def to_dict(self) -> dict[str, Any]:
        payload = self.result.to_dict()
        payload["content"] = self.content
        if self.fetch_error is not None:
            payload["fetchError"] = self.fetch_error
        return payload


@dataclass(slots=True)
class EnrichmentEnvelope:
    """Search results plus fetched content for the top results."""

    query: str
    search_results: list[SearchResult]
    fetched_content: list[EnrichedResult]
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "searchResults": [r.to_dict() for r in self.search_results],
            "fetchedContent": [e.to_dict() for e in self.fetched_content],
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(slots=True)
class StageResult:
    """Outcome of one provider stage: an envelope or a tagged failure."""

    stage: SearchSource
    envelope: SearchEnvelope | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.envelope is not None
