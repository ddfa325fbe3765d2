"""Error taxonomy for the news aggregation pipeline.

- FetchError: a source could not be fetched (network, timeout, non-2xx)
  or its listing page was unusable. Isolated to that source's result.
- ParseError: a page lacks the structure an adapter relies on.
- ConfigError: keyword or scoring configuration is unusable. Fatal for
  the whole aggregation run.
"""

from typing import Optional


class BetFinderError(Exception):
    """Base class for all BetFinder errors."""


class FetchError(BetFinderError):
    """A source adapter failed as a whole."""

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source
        self.message = message

    def __str__(self) -> str:
        return self.message


class ParseError(BetFinderError):
    """A page is missing the markup an adapter needs."""

    def __init__(self, message: str, url: Optional[str] = None):
        if url:
            message = f"{message} ({url})"
        super().__init__(message)
        self.url = url


class ConfigError(BetFinderError):
    """Keyword or scoring configuration is missing or malformed."""
