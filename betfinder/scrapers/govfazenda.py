"""Scraper for the Secretaria de Prêmios e Apostas news on gov.br.

The listing is paginated; "próximo" links are followed until they run
out, repeat, or ``max_pages`` is reached.
"""

import logging
from datetime import date, datetime
from functools import partial

import httpx
from bs4.element import Tag

from ..news.dates import normalize_date
from .base import ItemOutcome, SourceAdapter, text_of

logger = logging.getLogger(__name__)


class GovFazendaAdapter(SourceAdapter):
    name = "GovFazenda"
    base_url = "https://www.gov.br"
    listing_url = (
        "https://www.gov.br/fazenda/pt-br/composicao/orgaos/"
        "secretaria-de-premios-e-apostas/copy_of_noticias"
    )

    async def _extract(
        self, client: httpx.AsyncClient, reference_now: datetime
    ) -> list[ItemOutcome]:
        outcomes: list[ItemOutcome] = []
        visited: set[str] = set()
        url = self.listing_url
        parse = partial(self._parse_tile, today=self.reference_day(reference_now))

        while url and url not in visited and len(visited) < self.config.max_pages:
            visited.add(url)
            page = await self.get_page(client, url)
            tiles = page.select("article.tileItem")
            if len(visited) == 1:
                self.require(tiles, url, "news tiles")
            outcomes.extend(self.parse_each(tiles, parse))

            next_link = page.select_one("ul.paginacao li a.proximo")
            url = self.absolute_url(next_link.get("href")) if next_link else ""

        if url and url not in visited:
            logger.info("[SCRAPER:%s] Stopped after %d pages", self.name, len(visited))
        return outcomes

    def _parse_tile(self, tile: Tag, today: date) -> ItemOutcome:
        anchor = tile.select_one("h2.tileHeadline a")
        return ItemOutcome.found(
            title=text_of(anchor),
            link=anchor.get("href", "") if anchor else "",
            summary=text_of(tile.select_one("p.tileBody span.description")),
            # icon glyph followed by "03/06/2025"
            published_at=normalize_date(
                text_of(tile.select_one("span.summary-view-icon")), reference=today
            ),
        )
