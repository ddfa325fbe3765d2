"""Scraper for GamesBras (gamesbras.com).

The homepage only lists headlines, so every article page is visited to
read its publication date and summary. Article pages are fetched
concurrently (bounded by ``article_concurrency``); a page that fails
only drops its own headline.
"""

import asyncio
from datetime import date, datetime
from typing import Optional

import httpx
from bs4 import BeautifulSoup
from bs4.element import Tag

from ..news.dates import normalize_date
from ..news.models import NewsCandidate
from .base import ItemOutcome, SkipReason, SourceAdapter, text_of


class GamesBrasAdapter(SourceAdapter):
    name = "GamesBras"
    base_url = "https://www.gamesbras.com/"

    async def _extract(
        self, client: httpx.AsyncClient, reference_now: datetime
    ) -> list[ItemOutcome]:
        home = await self.get_page(client, self.base_url)
        headlines = self.require(home.select("h2.tituloM"), self.base_url, "headlines")

        outcomes: list[ItemOutcome] = []
        to_visit: list[NewsCandidate] = []
        seen: set[str] = set()
        for outcome in self.parse_each(headlines, self._parse_headline):
            headline = outcome.candidate
            if headline is None or not headline.title or not headline.link:
                outcomes.append(outcome)
            elif headline.link in seen:
                outcomes.append(ItemOutcome.skipped(SkipReason.DUPLICATE, headline.link))
            else:
                seen.add(headline.link)
                to_visit.append(headline)

        today = self.reference_day(reference_now)
        semaphore = asyncio.Semaphore(max(1, self.config.article_concurrency))
        visited = await asyncio.gather(
            *(self._visit(client, semaphore, headline, today) for headline in to_visit)
        )
        return list(visited) + outcomes

    def _parse_headline(self, h2: Tag) -> ItemOutcome:
        anchor = h2.find_parent("a")
        return ItemOutcome.found(
            title=text_of(h2),
            link=self.absolute_url(anchor.get("href")) if anchor else "",
        )

    async def _visit(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        headline: NewsCandidate,
        today: date,
    ) -> ItemOutcome:
        async with semaphore:
            try:
                article = await self.get_page(client, headline.link)
            except httpx.HTTPError as exc:
                return ItemOutcome.skipped(
                    SkipReason.ARTICLE_UNAVAILABLE, f"{headline.link}: {exc!r}"
                )

        try:
            published_at = self._article_date(article, today)
            summary = self._article_summary(article)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            return ItemOutcome.skipped(SkipReason.MALFORMED, f"{headline.link}: {exc!r}")

        return ItemOutcome.found(
            title=headline.title,
            link=headline.link,
            summary=summary,
            published_at=published_at,
        )

    @staticmethod
    def _article_date(article: BeautifulSoup, today: date) -> Optional[date]:
        stamp = article.select_one('h6.fecha_interna[itemprop="datePublished"]')
        if stamp is None:
            return None
        return normalize_date(stamp.get("content"), reference=today) or normalize_date(
            text_of(stamp), reference=today
        )

    @staticmethod
    def _article_summary(article: BeautifulSoup) -> str:
        summary = text_of(article.select_one('h3[itemprop="description"]'))
        if not summary:
            summary = " ".join(text_of(p) for p in article.select("div.nota p"))
        return summary
