"""Scraper for iGamingBrazil's "Todas as Notícias" listing."""

from datetime import date, datetime
from functools import partial

import httpx
from bs4.element import Tag

from ..news.dates import normalize_date
from .base import ItemOutcome, SourceAdapter, text_of


class IgamingBrazilAdapter(SourceAdapter):
    name = "iGamingBrazil"
    base_url = "https://igamingbrazil.com/"
    listing_url = "https://igamingbrazil.com/todas-as-noticias/"

    async def _extract(
        self, client: httpx.AsyncClient, reference_now: datetime
    ) -> list[ItemOutcome]:
        page = await self.get_page(client, self.listing_url)
        modules = self.require(
            page.select("div.td-module-container.td-category-pos-image"),
            self.listing_url,
            "news modules",
        )
        return self.parse_each(
            modules, partial(self._parse_module, today=self.reference_day(reference_now))
        )

    def _parse_module(self, module: Tag, today: date) -> ItemOutcome:
        anchor = module.select_one("h3.entry-title a")
        time_tag = module.select_one("time.entry-date")
        # datetime attribute is ISO with the site's own offset
        published_at = (
            normalize_date(time_tag.get("datetime"), reference=today) if time_tag else None
        )
        return ItemOutcome.found(
            title=text_of(anchor),
            link=anchor.get("href", "") if anchor else "",
            summary=text_of(module.select_one(".td-excerpt")),
            published_at=published_at,
        )
