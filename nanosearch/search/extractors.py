"""Result extraction from DuckDuckGo HTML and citation-style answer text.

HTML extraction runs a list of named strategies in priority order. Each
strategy returns a possibly-empty list of candidate links; the first
non-empty list wins. Snippets are paired with links by position, which is a
best-effort heuristic and can mismatch if the provider reorders its markup.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup
from loguru import logger

from nanosearch.search.models import SearchResult

PROVIDER_DOMAIN = "duckduckgo.com"

HTML_SNIPPET_CHARS = 300
CITATION_SNIPPET_CHARS = 200

_CITATION_RE = re.compile(r"\[(\d+)\]\s*(.+?)(?=\[|$)", re.S)
_URL_RE = re.compile(r"https?://[^\s)]+")
_WHITESPACE_RE = re.compile(r"\s+")

# Anchors examined per accepted candidate before a strategy gives up.
SCAN_FACTOR = 4


@dataclass(slots=True)
class LinkCandidate:
    """Raw link found by an extraction strategy."""

    url: str
    title: str


Strategy = Callable[[BeautifulSoup, int], list[LinkCandidate]]


def canonicalize_url(url: str) -> str:
    """Strip tracking suffixes by truncating at the first '&', then '?'."""
    return url.split("&", 1)[0].split("?", 1)[0]


def unwrap_redirect(href: str) -> str:
    """Return the target of a DuckDuckGo '/l/?uddg=' redirect, else href unchanged."""
    if "uddg=" not in href:
        return href
    parsed = urlparse(href if "//" in href else f"https://{PROVIDER_DOMAIN}{href}")
    targets = parse_qs(parsed.query).get("uddg")
    return targets[0] if targets else href


def _is_provider_link(url: str) -> bool:
    return PROVIDER_DOMAIN in url


def _text(node) -> str:
    return _WHITESPACE_RE.sub(" ", node.get_text(" ", strip=True)).strip()


def result_links(soup: BeautifulSoup, cap: int) -> list[LinkCandidate]:
    """Anchors carrying DuckDuckGo's canonical 'result__a' class."""
    links: list[LinkCandidate] = []
    anchors = soup.find_all("a", class_="result__a", href=True, limit=cap * SCAN_FACTOR)
    for anchor in anchors:
        if len(links) >= cap:
            break
        url = unwrap_redirect(anchor["href"])
        if _is_provider_link(url) or not url.startswith("http"):
            continue
        links.append(LinkCandidate(url=url, title=_text(anchor)))
    return links


def generic_links(soup: BeautifulSoup, cap: int) -> list[LinkCandidate]:
    """Any absolute http(s) anchor that does not point back at the provider."""
    links: list[LinkCandidate] = []
    anchors = soup.find_all("a", href=re.compile(r"^https?://"), limit=cap * SCAN_FACTOR)
    for anchor in anchors:
        if len(links) >= cap:
            break
        url = anchor["href"]
        if _is_provider_link(url) or "javascript:" in url:
            continue
        title = _text(anchor)
        if not title:
            continue
        links.append(LinkCandidate(url=url, title=title))
    return links


def result_snippets(soup: BeautifulSoup, cap: int) -> list[str]:
    """Snippet blocks carrying the 'result__snippet' class, in document order."""
    nodes = soup.find_all(["a", "div"], class_="result__snippet", limit=cap)
    return [_text(node) for node in nodes]


LINK_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("result_links", result_links),
    ("generic_links", generic_links),
)


def _snippet_for(snippets: list[str], index: int) -> str:
    # Snippets often trail their link in the markup, so fall back to the previous one.
    for i in (index, index - 1):
        if 0 <= i < len(snippets) and snippets[i]:
            return snippets[i]
    return ""


def combine(
    links: list[LinkCandidate],
    snippets: list[str],
    limit: int,
) -> list[SearchResult]:
    """Pair links with snippets by position and assign contiguous ranks."""
    results: list[SearchResult] = []
    for i, link in enumerate(links[:limit]):
        snippet = _snippet_for(snippets, i)
        rank = i + 1
        results.append(
            SearchResult(
                title=link.title or f"Result {rank}",
                url=canonicalize_url(link.url),
                snippet=snippet[:HTML_SNIPPET_CHARS],
                rank=rank,
            )
        )
    return results


def extract_html_results(html: str, limit: int) -> list[SearchResult]:
    """Extract up to ``limit`` results from a DuckDuckGo HTML page.

    Never raises: any parse failure is logged and yields an empty list.
    """
    if limit < 1 or not html:
        return []

    cap = limit * 2
    try:
        soup = BeautifulSoup(html, "html.parser")
        links: list[LinkCandidate] = []
        for name, strategy in LINK_STRATEGIES:
            links = strategy(soup, cap)
            if links:
                logger.debug("HTML extraction: strategy {} found {} links", name, len(links))
                break
        snippets = result_snippets(soup, cap)
        return combine(links, snippets, limit)
    except Exception as e:
        logger.warning("HTML result extraction failed: {}", e)
        return []


def extract_citation_results(text: str, limit: int) -> list[SearchResult]:
    """Extract results from text with inline ``[n]`` citations.

    Each citation span is the text after the marker up to the next '[' or the
    end. The first URL in the span splits it into title and snippet. Spans
    without a URL are skipped and do not consume a rank.
    """
    results: list[SearchResult] = []
    if limit < 1 or not text:
        return results

    for match in _CITATION_RE.finditer(text):
        if len(results) >= limit:
            break
        span = match.group(2).strip()
        url_match = _URL_RE.search(span)
        if not url_match:
            continue
        url = url_match.group(0)
        rank = len(results) + 1
        title = span[: url_match.start()].strip()
        snippet = span[url_match.end() :].strip()
        results.append(
            SearchResult(
                title=title or f"Result {rank}",
                url=url,
                snippet=snippet[:CITATION_SNIPPET_CHARS],
                rank=rank,
            )
        )
    return results
