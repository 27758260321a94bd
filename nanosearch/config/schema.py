"""Configuration schema using Pydantic."""

from pydantic import BaseModel, Field

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class PerplexityConfig(BaseModel):
    """Perplexity chat completions provider."""

    api_key: str = ""
    base_url: str = "https://api.perplexity.ai"
    model: str = "llama-3.1-sonar-small-128k-online"
    max_tokens: int = 2000
    timeout: float = 30.0


class DuckDuckGoConfig(BaseModel):
    """DuckDuckGo HTML provider."""

    base_url: str = "https://html.duckduckgo.com"
    user_agent: str = BROWSER_USER_AGENT
    accept_language: str = "en-US,en;q=0.5"
    timeout: float = 10.0


class SearchProvidersConfig(BaseModel):
    perplexity: PerplexityConfig = Field(default_factory=PerplexityConfig)
    duckduckgo: DuckDuckGoConfig = Field(default_factory=DuckDuckGoConfig)


class FetchConfig(BaseModel):
    """Page fetching for search_and_fetch."""

    timeout: float = 10.0
    max_page_chars: int = 10000
    max_content_chars: int = 5000
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class WebSearchConfig(BaseModel):
    """Web search configuration."""

    providers: SearchProvidersConfig = Field(default_factory=SearchProvidersConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    max_limit: int = 20


class Config(BaseModel):
    """Root configuration for nanosearch."""

    search: WebSearchConfig = Field(default_factory=WebSearchConfig)
