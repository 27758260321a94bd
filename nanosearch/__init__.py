"""nanosearch - web search with provider fallback and content enrichment."""

__version__ = "0.1.0"
