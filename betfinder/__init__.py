"""BetFinder: daily digest of Brazilian betting-industry news."""

from .news.aggregator import Aggregator, aggregate_news
from .news.models import NewsCandidate, ScoredNews, SourceResult

__all__ = [
    "Aggregator",
    "NewsCandidate",
    "ScoredNews",
    "SourceResult",
    "aggregate_news",
]
