"""Aggregate today's news from every source into a ranked digest.

All sources are scraped concurrently and the run waits for every one of
them. A source that fails is reported through its own ``SourceResult``
error and never affects the others.
"""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence

from ..config.settings import Settings, settings
from ..scrapers import SourceAdapter, build_default_sources
from .keywords import KeywordSet, load_keywords
from .models import NewsCandidate, SourceResult
from .relevance import DEFAULT_TOP_N, DEFAULT_WEIGHTS, ScoringWeights, score_and_rank

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDIDATES = 30

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_by_link(candidates: Iterable[NewsCandidate]) -> list[NewsCandidate]:
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        if candidate.link not in seen:
            seen.add(candidate.link)
            unique.append(candidate)
    return unique


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class Aggregator:
    """
    Runs every source once and scores, ranks and caps what each returns.

    Sources are ``SourceAdapter`` instances, or any object exposing an
    async ``fetch(reference_now)`` returning news candidates.
    """

    def __init__(
        self,
        keywords: KeywordSet,
        weights: Optional[ScoringWeights] = None,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        top_n: int = DEFAULT_TOP_N,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            keywords: Keywords to score against
            weights: Title/summary weights unless a source sets its own
            max_candidates: Candidates scored per source (listing order)
            top_n: Ranked items kept per source
            clock: Returns the reference time for "today" (default: UTC now)
        """
        self.keywords = keywords
        self.weights = weights or DEFAULT_WEIGHTS
        self.max_candidates = max_candidates
        self.top_n = top_n
        self.clock = clock or _utc_now

    async def run(self, sources: Sequence[tuple[str, Any]]) -> list[SourceResult]:
        """
        Scrape all sources concurrently.

        Args:
            sources: (name, adapter) pairs

        Returns:
            One SourceResult per source, in input order
        """
        reference_now = self.clock()
        results = await asyncio.gather(
            *(self._run_source(name, adapter, reference_now) for name, adapter in sources)
        )

        failed = sum(1 for result in results if not result.ok)
        logger.info(
            "[AGGREGATOR] %d sources done (%d failed), %d items ranked",
            len(results),
            failed,
            sum(len(result.top_items) for result in results),
        )
        return list(results)

    async def _run_source(
        self, name: str, adapter: Any, reference_now: datetime
    ) -> SourceResult:
        skipped: dict[str, int] = {}
        try:
            if isinstance(adapter, SourceAdapter):
                report = await adapter.collect(reference_now)
                candidates = report.candidates
                skipped = dict(report.skipped)
            else:
                candidates = list(await adapter.fetch(reference_now))
        except Exception as exc:
            logger.warning("[AGGREGATOR] %s failed: %s", name, _describe(exc))
            return SourceResult.failed(name, _describe(exc))

        candidates = _unique_by_link(candidates)
        weights = getattr(adapter, "weights", None) or self.weights
        top_items = score_and_rank(
            candidates[: self.max_candidates], self.keywords, weights, self.top_n
        )

        logger.info(
            "[AGGREGATOR] %s: %d found, %d relevant",
            name,
            len(candidates),
            len(top_items),
        )
        return SourceResult(
            source_name=name,
            total_found=len(candidates),
            top_items=tuple(top_items),
            skipped=skipped,
        )


async def aggregate_news(
    config: Optional[Settings] = None,
    sources: Optional[Sequence[tuple[str, Any]]] = None,
    keywords_file: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> list[SourceResult]:
    """
    Fetch, filter, score and rank today's news from every configured site.

    Args:
        config: Settings (default: global settings)
        sources: (name, adapter) pairs (default: all built-in sites)
        keywords_file: Keyword JSON file (default: config.keywords_file)
        now: Reference time for "today" (default: current time)

    Returns:
        One SourceResult per source, in source order

    Raises:
        ConfigError: If the keywords or scoring weights are unusable; no
            source is contacted in that case
    """
    config = config or settings
    keywords = load_keywords(keywords_file or config.keywords_file)
    weights = ScoringWeights(title=config.title_weight, summary=config.summary_weight)

    if sources is None:
        sources = build_default_sources(config)

    aggregator = Aggregator(
        keywords=keywords,
        weights=weights,
        max_candidates=config.max_candidates,
        top_n=config.top_n,
        clock=(lambda: now) if now is not None else None,
    )
    return await aggregator.run(sources)
