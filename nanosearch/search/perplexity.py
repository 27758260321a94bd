"""Perplexity chat completions adapter."""

from typing import Any

import httpx

from nanosearch.search.errors import ProviderError
from nanosearch.search.extractors import extract_citation_results
from nanosearch.search.models import SearchResult

SYSTEM_PROMPT = (
    "You are a helpful assistant that provides web search results in a structured format."
)


def build_payload(*, query: str, limit: int, model: str, max_tokens: int) -> dict[str, Any]:
    """Chat completion request body asking for ``limit`` cited results."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Search the web for: {query}. "
                    f"Provide {limit} results with titles, URLs, and snippets."
                ),
            },
        ],
        "max_tokens": max_tokens,
    }


def parse_response(data: dict[str, Any], limit: int) -> list[SearchResult]:
    """Pull results out of a chat completion response.

    Inline ``[n]`` citations in the answer text are preferred. When the answer
    carries none, the top-level ``citations`` URL list is used instead.
    """
    choices = data.get("choices") or [{}]
    content = (choices[0].get("message") or {}).get("content") or ""
    results = extract_citation_results(content, limit)
    if results:
        return results

    urls = [u for u in data.get("citations") or [] if isinstance(u, str) and u.startswith("http")]
    return [
        SearchResult(title=f"Result {rank}", url=url, rank=rank)
        for rank, url in enumerate(urls[:limit], start=1)
    ]


async def search_perplexity(
    *,
    query: str,
    limit: int,
    api_key: str,
    base_url: str,
    model: str,
    max_tokens: int,
    timeout: float,
) -> list[SearchResult]:
    """Ask Perplexity for cited results and normalize them."""
    if not api_key:
        raise ProviderError("perplexity", "perplexity api key not configured")

    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{base_url.rstrip('/')}/chat/completions",
            json=build_payload(query=query, limit=limit, model=model, max_tokens=max_tokens),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )
        if response.is_error:
            raise ProviderError(
                "perplexity",
                f"API error {response.status_code}: {response.text[:300]}",
            )

    return parse_response(response.json(), limit)
