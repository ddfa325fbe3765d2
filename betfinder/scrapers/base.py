"""Shared machinery for the per-site news scrapers.

A scraper only knows how to walk its site's markup: it turns each
listing entry into an ``ItemOutcome`` (a found item or a skip with a
reason). The base class owns everything the sites have in common:
the HTTP client, absolute links, the same-day filter, the policy for
items without a usable date, de-duplication by link and translating
transport or page-level failures into ``FetchError``.
"""

import logging
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Iterable, Optional
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup
from bs4.element import Tag

from ..config.settings import LENIENT, Settings, settings
from ..errors import FetchError, ParseError
from ..news.dates import is_today, local_today
from ..news.models import NewsCandidate
from ..news.relevance import ScoringWeights

logger = logging.getLogger(__name__)


class SkipReason(str, Enum):
    """Why a listing entry did not become a candidate."""

    MALFORMED = "malformed"
    MISSING_TITLE = "missing_title"
    MISSING_LINK = "missing_link"
    NOT_TODAY = "not_today"
    UNKNOWN_DATE = "unknown_date"
    DUPLICATE = "duplicate"
    ARTICLE_UNAVAILABLE = "article_unavailable"


@dataclass(frozen=True)
class ItemOutcome:
    """Result of extracting one listing entry."""

    candidate: Optional[NewsCandidate] = None
    reason: Optional[SkipReason] = None
    detail: str = ""

    @classmethod
    def found(
        cls,
        title: str,
        link: str,
        summary: str = "",
        published_at: Optional[date] = None,
    ) -> "ItemOutcome":
        return cls(
            candidate=NewsCandidate(
                title=title or "",
                link=link or "",
                summary=summary or "",
                published_at=published_at,
            )
        )

    @classmethod
    def skipped(cls, reason: SkipReason, detail: str = "") -> "ItemOutcome":
        return cls(reason=reason, detail=detail)


@dataclass
class ExtractionReport:
    """Candidates kept from one scrape, plus counts of what was dropped."""

    source: str
    candidates: list[NewsCandidate] = field(default_factory=list)
    skipped: Counter = field(default_factory=Counter)

    def skip(self, reason: SkipReason, detail: str = "") -> None:
        self.skipped[reason.value] += 1
        logger.debug("[SCRAPER:%s] Skipped item (%s) %s", self.source, reason.value, detail)

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())


def clean_text(value: Optional[str]) -> str:
    """Collapse whitespace runs into single spaces."""
    if not value:
        return ""
    return " ".join(value.split())


def text_of(node: Optional[Tag]) -> str:
    """Visible text of a node, whitespace-collapsed; '' when missing."""
    if node is None:
        return ""
    return clean_text(node.get_text(" ", strip=True))


class SourceAdapter(ABC):
    """
    Scraper for one news site.

    Subclasses set ``name`` and ``base_url`` and implement ``_extract``.
    A fresh HTTP client is opened per ``collect`` call, so adapters share
    no state and can run concurrently.
    """

    name: str = "base"
    base_url: str = ""
    weights: Optional[ScoringWeights] = None  # None: use the configured weights

    def __init__(
        self,
        config: Optional[Settings] = None,
        timeout: Optional[float] = None,
        timezone: Optional[str] = None,
        unknown_date_policy: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Args:
            config: Settings to read defaults from (default: global settings)
            timeout: Per-request timeout in seconds
            timezone: Zoneinfo key of the site's local day
            unknown_date_policy: "strict" drops undated items, "lenient" keeps them
            transport: httpx transport override (tests use httpx.MockTransport)
        """
        config = config or settings
        self.config = config
        self.timeout = timeout if timeout is not None else config.request_timeout
        self.timezone = timezone or config.timezone
        self.unknown_date_policy = (unknown_date_policy or config.unknown_date_policy).lower()
        self.transport = transport

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def reference_day(self, reference_now: datetime) -> date:
        """The site's local calendar day at ``reference_now``."""
        return local_today(reference_now, self.timezone)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.timeout,
            headers={"User-Agent": self.config.user_agent},
            transport=self.transport,
        )

    async def fetch(self, reference_now: datetime) -> list[NewsCandidate]:
        """Today's candidates from this source, in listing order."""
        report = await self.collect(reference_now)
        return report.candidates

    async def collect(self, reference_now: datetime) -> ExtractionReport:
        """
        Scrape the site and filter the result down to today's news.

        Args:
            reference_now: The moment "today" is judged against

        Returns:
            ExtractionReport with the kept candidates and skip counts

        Raises:
            FetchError: On network failure, timeout, non-2xx status or an
                unusable listing page
        """
        try:
            async with self._client() as client:
                outcomes = await self._extract(client, reference_now)
            return self._finalize(outcomes, reference_now)
        except FetchError:
            raise
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                self.name,
                f"HTTP {exc.response.status_code} from {exc.response.url}",
            ) from exc
        except httpx.TimeoutException as exc:
            raise FetchError(self.name, f"request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(self.name, f"request failed: {str(exc) or type(exc).__name__}") from exc
        except ParseError as exc:
            raise FetchError(self.name, str(exc)) from exc
        except Exception as exc:
            raise FetchError(self.name, f"{type(exc).__name__}: {exc}") from exc

    @abstractmethod
    async def _extract(
        self, client: httpx.AsyncClient, reference_now: datetime
    ) -> list[ItemOutcome]:
        """Walk the site's pages and return one outcome per listing entry."""

    def _finalize(
        self, outcomes: Iterable[ItemOutcome], reference_now: datetime
    ) -> ExtractionReport:
        report = ExtractionReport(source=self.name)
        seen: set[str] = set()
        lenient = self.unknown_date_policy == LENIENT

        for outcome in outcomes:
            if outcome.candidate is None:
                report.skip(outcome.reason or SkipReason.MALFORMED, outcome.detail)
                continue

            raw = outcome.candidate
            title = clean_text(raw.title)
            link = self.absolute_url(raw.link)
            if not title:
                report.skip(SkipReason.MISSING_TITLE, link)
                continue
            if not link:
                report.skip(SkipReason.MISSING_LINK, title)
                continue

            if raw.published_at is None:
                if not lenient:
                    report.skip(SkipReason.UNKNOWN_DATE, link)
                    continue
            elif not is_today(raw.published_at, reference_now, self.timezone):
                report.skip(SkipReason.NOT_TODAY, link)
                continue

            if link in seen:
                report.skip(SkipReason.DUPLICATE, link)
                continue
            seen.add(link)

            report.candidates.append(
                NewsCandidate(
                    title=title,
                    link=link,
                    summary=clean_text(raw.summary),
                    published_at=raw.published_at,
                )
            )

        logger.info(
            "[SCRAPER:%s] Kept %d items (%d skipped)",
            self.name,
            len(report.candidates),
            report.skipped_total,
        )
        return report

    def absolute_url(self, href: Optional[str]) -> str:
        """Resolve ``href`` against the site's base URL; '' unless http(s)."""
        if not href or not href.strip():
            return ""
        try:
            url = urljoin(self.base_url, href.strip())
            scheme = urlparse(url).scheme
        except ValueError:
            return ""
        if scheme not in ("http", "https"):
            return ""
        return url

    async def get_page(self, client: httpx.AsyncClient, url: str) -> BeautifulSoup:
        """GET a page and parse it; non-2xx raises httpx.HTTPStatusError."""
        resp = await client.get(url)
        resp.raise_for_status()
        return BeautifulSoup(resp.text, "html.parser")

    def parse_each(
        self, nodes: Iterable[Tag], parse: Callable[[Tag], ItemOutcome]
    ) -> list[ItemOutcome]:
        """Apply ``parse`` to each node; a node that breaks it becomes a skip."""
        outcomes = []
        for node in nodes:
            try:
                outcomes.append(parse(node))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                outcomes.append(ItemOutcome.skipped(SkipReason.MALFORMED, repr(exc)))
        return outcomes

    @staticmethod
    def require(nodes: list[Any], url: str, what: str) -> list[Any]:
        """Fail the page when its listing markup is gone entirely."""
        if not nodes:
            raise ParseError(f"no {what} found on listing page", url=url)
        return nodes
