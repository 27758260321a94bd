"""DuckDuckGo HTML search adapter."""

import httpx

from nanosearch.search.extractors import extract_html_results
from nanosearch.search.models import SearchResult


async def search_duckduckgo(
    *,
    query: str,
    limit: int,
    region: str,
    base_url: str,
    user_agent: str,
    accept_language: str,
    timeout: float,
) -> list[SearchResult]:
    """Scrape DuckDuckGo's HTML endpoint and normalize results."""
    async with httpx.AsyncClient() as client:
        response = await client.get(
            f"{base_url.rstrip('/')}/html/",
            params={"q": query, "kl": region},
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": accept_language,
            },
            timeout=timeout,
        )
        response.raise_for_status()

    return extract_html_results(response.text, limit)
