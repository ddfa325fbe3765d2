"""Data models for news candidates, scored items and per-source results."""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class NewsCandidate:
    """News item extracted from a source, before scoring."""

    title: str
    link: str  # absolute URL, unique within one source's batch
    summary: str = ""
    published_at: Optional[date] = None  # None when the source gave no usable date


@dataclass(frozen=True)
class ScoredNews:
    """News candidate with its keyword relevance score."""

    title: str
    link: str
    summary: str
    published_at: Optional[date]
    score: int

    def __post_init__(self) -> None:
        if self.score < 0:
            raise ValueError(f"score must be non-negative, got {self.score}")

    @classmethod
    def from_candidate(cls, candidate: NewsCandidate, score: int) -> "ScoredNews":
        return cls(
            title=candidate.title,
            link=candidate.link,
            summary=candidate.summary,
            published_at=candidate.published_at,
            score=score,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "title": self.title,
            "link": self.link,
            "summary": self.summary,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
            "score": self.score,
        }


@dataclass(frozen=True)
class SourceResult:
    """Outcome of one aggregation run for a single source.

    A failed source carries ``error`` with ``total_found == 0`` and no
    items; the other sources of the same run are unaffected.
    """

    source_name: str
    total_found: int = 0  # adapter count before capping and ranking
    top_items: tuple[ScoredNews, ...] = ()
    error: Optional[str] = None
    skipped: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "skipped", MappingProxyType(dict(self.skipped)))

    @classmethod
    def failed(cls, source_name: str, error: str) -> "SourceResult":
        return cls(source_name=source_name, error=error or "unknown error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization."""
        data: dict[str, Any] = {
            "sourceName": self.source_name,
            "totalFound": self.total_found,
            "topItems": [item.to_dict() for item in self.top_items],
            "skipped": dict(self.skipped),
        }
        if self.error is not None:
            data["error"] = self.error
        return data
