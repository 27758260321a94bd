"""Web search client with provider fallback and content enrichment."""

import asyncio
from collections.abc import Awaitable, Sequence

from loguru import logger

from nanosearch.config.schema import WebSearchConfig
from nanosearch.search.duckduckgo import search_duckduckgo
from nanosearch.search.fetch import fetch_page_text
from nanosearch.search.models import (
    EnrichedResult,
    EnrichmentEnvelope,
    MultiQueryEnvelope,
    SearchEnvelope,
    SearchResult,
    SearchSource,
    StageResult,
)
from nanosearch.search.perplexity import search_perplexity
from nanosearch.utils.redaction import SecretRedactor

DEFAULT_LIMIT = 10
DEFAULT_REGION = "us-en"
DEFAULT_FETCH_COUNT = 3


class WebSearchClient:
    """Resolve queries against Perplexity when configured, else DuckDuckGo.

    ``search`` always returns an envelope. Provider failures are recorded on
    the envelope (``source="none"`` plus ``error``) instead of being raised.
    """

    def __init__(self, config: WebSearchConfig | None = None):
        self.config = config or WebSearchConfig()
        self._redactor = SecretRedactor(
            secrets=[self.config.providers.perplexity.api_key],
        )

    async def search(
        self,
        query: str,
        *,
        limit: int = DEFAULT_LIMIT,
        region: str = DEFAULT_REGION,
    ) -> SearchEnvelope:
        """Search with the best available provider."""
        n = self._clamp_limit(limit)

        if self.config.providers.perplexity.api_key:
            api = await self._run_stage("perplexity", query, self._search_api(query, n))
            if api.ok:
                return api.envelope
            logger.warning("Perplexity search failed, falling back to DuckDuckGo: {}", api.error)

        markup = await self._run_stage("duckduckgo", query, self._search_markup(query, n, region))
        if markup.ok:
            return markup.envelope

        logger.error("Web search failed for {!r}: {}", query, markup.error)
        return SearchEnvelope.failed(query, markup.error or "search failed")

    async def search_multiple(
        self,
        queries: Sequence[str],
        *,
        limit: int = DEFAULT_LIMIT,
        region: str = DEFAULT_REGION,
    ) -> MultiQueryEnvelope:
        """Search every query concurrently; results keep the input order."""
        envelopes = await asyncio.gather(
            *(self.search(query, limit=limit, region=region) for query in queries)
        )
        return MultiQueryEnvelope(queries=list(queries), results=list(envelopes))

    async def search_and_fetch(
        self,
        query: str,
        *,
        fetch_count: int = DEFAULT_FETCH_COUNT,
    ) -> EnrichmentEnvelope:
        """Search, then fetch and flatten page text for the top results."""
        envelope = await self.search(query, limit=fetch_count)
        top = envelope.results[: max(fetch_count, 0)]
        fetched = await asyncio.gather(*(self._fetch_result(result) for result in top))
        return EnrichmentEnvelope(
            query=query,
            search_results=envelope.results,
            fetched_content=list(fetched),
        )

    async def _run_stage(
        self,
        stage: SearchSource,
        query: str,
        pending: Awaitable[list[SearchResult]],
    ) -> StageResult:
        try:
            results = await pending
        except Exception as e:
            return StageResult(stage=stage, error=self._redactor.redact(f"{stage} search failed: {e}"))

        return StageResult(
            stage=stage,
            envelope=SearchEnvelope(query=query, results=results, source=stage),
        )

    def _search_api(self, query: str, limit: int) -> Awaitable[list[SearchResult]]:
        cfg = self.config.providers.perplexity
        return search_perplexity(
            query=query,
            limit=limit,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            model=cfg.model,
            max_tokens=cfg.max_tokens,
            timeout=cfg.timeout,
        )

    def _search_markup(self, query: str, limit: int, region: str) -> Awaitable[list[SearchResult]]:
        cfg = self.config.providers.duckduckgo
        return search_duckduckgo(
            query=query,
            limit=limit,
            region=region,
            base_url=cfg.base_url,
            user_agent=cfg.user_agent,
            accept_language=cfg.accept_language,
            timeout=cfg.timeout,
        )

    async def _fetch_result(self, result: SearchResult) -> EnrichedResult:
        cfg = self.config.fetch
        try:
            text = await asyncio.wait_for(
                fetch_page_text(
                    result.url,
                    user_agent=cfg.user_agent,
                    timeout=cfg.timeout,
                    max_chars=cfg.max_page_chars,
                ),
                timeout=cfg.timeout,
            )
        except asyncio.TimeoutError:
            logger.debug("Fetch timed out: {}", result.url)
            return EnrichedResult(
                result=result,
                fetch_error=f"Failed to fetch {result.url}: timed out after {cfg.timeout:g}s",
            )
        except Exception as e:
            logger.debug("Fetch failed: {}: {}", result.url, e)
            return EnrichedResult(
                result=result,
                fetch_error=f"Failed to fetch {result.url}: {str(e) or type(e).__name__}",
            )
        return EnrichedResult(result=result, content=text[: cfg.max_content_chars])

    def _clamp_limit(self, limit: int) -> int:
        return min(max(limit, 1), self.config.max_limit)


async def search_web(
    query: str,
    *,
    limit: int = DEFAULT_LIMIT,
    region: str = DEFAULT_REGION,
    config: WebSearchConfig | None = None,
) -> SearchEnvelope:
    """Search once with a throwaway client."""
    return await WebSearchClient(config).search(query, limit=limit, region=region)


async def search_web_multiple(
    queries: Sequence[str],
    *,
    limit: int = DEFAULT_LIMIT,
    region: str = DEFAULT_REGION,
    config: WebSearchConfig | None = None,
) -> MultiQueryEnvelope:
    return await WebSearchClient(config).search_multiple(queries, limit=limit, region=region)


async def search_and_fetch(
    query: str,
    *,
    fetch_count: int = DEFAULT_FETCH_COUNT,
    config: WebSearchConfig | None = None,
) -> EnrichmentEnvelope:
    return await WebSearchClient(config).search_and_fetch(query, fetch_count=fetch_count)
