"""Scraper for BNLData (bnldata.com.br).

Reads the homepage highlights first, then the latest cards on the
editorias page. Cards carry their date at the end of the category line,
e.g. "Loterias I 09.06.25".
"""

import re
from datetime import date, datetime
from functools import partial
from typing import Optional

import httpx
from bs4.element import Tag

from ..news.dates import normalize_date
from .base import ItemOutcome, SourceAdapter, text_of

_CARD_DATE_RE = re.compile(r"I\s*(\d{2}\.\d{2}\.\d{2,4})\s*$")


class BnldataAdapter(SourceAdapter):
    name = "BNLData"
    base_url = "https://bnldata.com.br/"
    editorias_url = "https://bnldata.com.br/editorias/"

    async def _extract(
        self, client: httpx.AsyncClient, reference_now: datetime
    ) -> list[ItemOutcome]:
        home = await self.get_page(client, self.base_url)
        highlights = self.require(home.select(".list-posts .card"), self.base_url, "highlight cards")

        editorias = await self.get_page(client, self.editorias_url)
        latest = self.require(
            editorias.select("#cards-area article.card"), self.editorias_url, "news cards"
        )

        parse = partial(self._parse_card, today=self.reference_day(reference_now))
        return self.parse_each(highlights, parse) + self.parse_each(latest, parse)

    def _parse_card(self, card: Tag, today: date) -> ItemOutcome:
        anchor = card.find("a", href=True)
        return ItemOutcome.found(
            title=text_of(card.select_one(".card__title")),
            link=anchor["href"] if anchor else "",
            summary=text_of(card.find("p")),
            published_at=self._card_date(card, today),
        )

    @staticmethod
    def _card_date(card: Tag, today: date) -> Optional[date]:
        category = text_of(card.select_one("small.card__category"))
        match = _CARD_DATE_RE.search(category)
        if match:
            return normalize_date(match.group(1), reference=today)
        return None
