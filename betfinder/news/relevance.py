"""Keyword relevance scoring and ranking of news candidates.

Each keyword is tested once per field (case-insensitive substring).
A title hit weighs more than a summary hit and the two accumulate:
with weights 2/1, "aposta" in the title and "bet" in the summary
scores 3. Ranking drops zero scores, sorts by score (ties keep the
source's listing order) and keeps the top N.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..errors import ConfigError
from .models import NewsCandidate, ScoredNews

DEFAULT_TOP_N = 10


@dataclass(frozen=True)
class ScoringWeights:
    """Points added per keyword found in the title or summary."""

    title: int = 2
    summary: int = 1

    def __post_init__(self) -> None:
        if self.title < 0 or self.summary < 0:
            raise ConfigError("scoring weights must be non-negative")
        if self.title <= self.summary:
            raise ConfigError(
                f"title weight ({self.title}) must exceed summary weight ({self.summary})"
            )


DEFAULT_WEIGHTS = ScoringWeights()


def score_candidate(
    candidate: NewsCandidate,
    keywords: Iterable[str],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> int:
    """Relevance score of a single candidate."""
    title = (candidate.title or "").lower()
    summary = (candidate.summary or "").lower()
    score = 0
    for keyword in keywords:
        keyword = keyword.lower()
        if not keyword:
            continue
        if keyword in title:
            score += weights.title
        if keyword in summary:
            score += weights.summary
    return score


def rank(scored: Iterable[ScoredNews], limit: int = DEFAULT_TOP_N) -> list[ScoredNews]:
    """Drop unscored items, sort by score descending (stable) and truncate."""
    relevant = [item for item in scored if item.score > 0]
    relevant.sort(key=lambda item: item.score, reverse=True)
    return relevant[:limit]


def score_and_rank(
    candidates: Sequence[NewsCandidate],
    keywords: Iterable[str],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    limit: int = DEFAULT_TOP_N,
) -> list[ScoredNews]:
    """Score every candidate and return the ranked top ``limit``."""
    keywords = tuple(keywords)
    scored = [
        ScoredNews.from_candidate(candidate, score_candidate(candidate, keywords, weights))
        for candidate in candidates
    ]
    return rank(scored, limit)
