"""Web search exceptions."""


class WebSearchError(Exception):
    """Raised when search provider selection or execution fails."""


class ProviderError(WebSearchError):
    """Raised by a provider adapter that could not produce results."""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider
