"""Fetch a result page and flatten it to plain text."""

import re

import httpx
from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")


def html_to_text(html: str, max_chars: int) -> str:
    """Drop script/style blocks and markup, collapse whitespace, truncate."""
    soup = BeautifulSoup(html, "html.parser")
    for node in soup(["script", "style"]):
        node.decompose()
    text = _WHITESPACE_RE.sub(" ", soup.get_text(" ")).strip()
    return text[:max_chars]


async def fetch_page_text(
    url: str,
    *,
    user_agent: str,
    timeout: float,
    max_chars: int,
) -> str:
    """Fetch ``url`` and return its flattened text.

    Raises ``httpx.HTTPError`` on transport failures, timeouts and non-2xx
    responses.
    """
    async with httpx.AsyncClient(follow_redirects=True) as client:
        response = await client.get(
            url,
            headers={"User-Agent": user_agent},
            timeout=timeout,
        )
        response.raise_for_status()

    return html_to_text(response.text, max_chars)
