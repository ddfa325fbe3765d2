import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from betfinder.config.settings import Settings
from betfinder.errors import FetchError
from betfinder.scrapers import (
    BnldataAdapter,
    GamesBrasAdapter,
    GovFazendaAdapter,
    IgamingBrazilAdapter,
    build_default_sources,
)
from betfinder.scrapers.base import SourceAdapter

from conftest import REFERENCE_NOW, TODAY, PageTransport, load_fixture

BNL_HOME = "https://bnldata.com.br/"
BNL_EDITORIAS = "https://bnldata.com.br/editorias/"
IGAMING = "https://igamingbrazil.com/todas-as-noticias/"
GAMESBRAS = "https://www.gamesbras.com/"
GOV_PAGE1 = (
    "https://www.gov.br/fazenda/pt-br/composicao/orgaos/"
    "secretaria-de-premios-e-apostas/copy_of_noticias"
)
GOV_PAGE2 = GOV_PAGE1 + "?b_start=30"


def collect(adapter):
    return asyncio.run(adapter.collect(REFERENCE_NOW))


def bnldata_routes():
    return {
        BNL_HOME: load_fixture("bnldata_home.html"),
        BNL_EDITORIAS: load_fixture("bnldata_editorias.html"),
    }


def gamesbras_routes():
    return {
        GAMESBRAS: load_fixture("gamesbras_home.html"),
        GAMESBRAS + "legislacion/camara-apostas": load_fixture("gamesbras_article_today.html"),
        GAMESBRAS + "loterias/loteria-mineira": load_fixture("gamesbras_article_text_date.html"),
        GAMESBRAS + "mercado/artigo-indisponivel": 500,
        GAMESBRAS + "mercado/noticia-de-ontem": load_fixture("gamesbras_article_old.html"),
    }


def govfazenda_routes():
    return {
        GOV_PAGE1: load_fixture("govfazenda_page1.html"),
        GOV_PAGE2: load_fixture("govfazenda_page2.html"),
    }


class TestBnldata:
    def test_keeps_todays_cards_from_both_pages(self):
        report = collect(BnldataAdapter(transport=PageTransport(bnldata_routes())))

        assert [c.link for c in report.candidates] == [
            "https://bnldata.com.br/2025/06/09/governo-publica-portaria/",
            "https://bnldata.com.br/2025/06/09/loteria-estadual/",
        ]
        first = report.candidates[0]
        assert first.title == "Governo publica nova portaria sobre apostas"
        assert first.summary == "Texto trata das bets licenciadas."
        assert first.published_at == TODAY

    def test_skip_reasons_are_counted(self):
        report = collect(BnldataAdapter(transport=PageTransport(bnldata_routes())))

        assert report.skipped == {
            "not_today": 1,
            "unknown_date": 1,
            "missing_link": 1,
            "duplicate": 1,
        }

    def test_lenient_policy_keeps_undated_cards(self):
        adapter = BnldataAdapter(
            unknown_date_policy="lenient", transport=PageTransport(bnldata_routes())
        )
        report = collect(adapter)

        undated = [c for c in report.candidates if c.published_at is None]
        assert [c.link for c in undated] == ["https://bnldata.com.br/coluna-sem-data/"]
        assert len(report.candidates) == 3
        assert "unknown_date" not in report.skipped

    def test_fetch_returns_candidates_only(self):
        adapter = BnldataAdapter(transport=PageTransport(bnldata_routes()))
        candidates = asyncio.run(adapter.fetch(REFERENCE_NOW))
        assert len(candidates) == 2

    def test_missing_editorias_page_fails_adapter(self):
        routes = bnldata_routes()
        routes[BNL_EDITORIAS] = 503
        with pytest.raises(FetchError) as excinfo:
            collect(BnldataAdapter(transport=PageTransport(routes)))
        assert excinfo.value.source == "BNLData"
        assert "503" in str(excinfo.value)

    def test_listing_without_cards_is_parse_failure(self):
        routes = bnldata_routes()
        routes[BNL_HOME] = "<html><body><p>Em manutenção</p></body></html>"
        with pytest.raises(FetchError, match="no highlight cards found"):
            collect(BnldataAdapter(transport=PageTransport(routes)))


class TestIgamingBrazil:
    def test_keeps_todays_module_with_excerpt(self):
        report = collect(IgamingBrazilAdapter(transport=PageTransport({IGAMING: load_fixture("igamingbrazil.html")})))

        assert len(report.candidates) == 1
        item = report.candidates[0]
        assert item.title == "SPA divulga lista de bets autorizadas"
        assert item.link == "https://igamingbrazil.com/legislacao/2025/06/09/spa-lista-bets/"
        assert item.summary.startswith("A Secretaria de Prêmios e Apostas")
        assert item.published_at == TODAY
        assert report.skipped == {"not_today": 1, "unknown_date": 1, "missing_title": 1}

    def test_lenient_resolves_relative_link(self):
        adapter = IgamingBrazilAdapter(
            unknown_date_policy="lenient",
            transport=PageTransport({IGAMING: load_fixture("igamingbrazil.html")}),
        )
        links = [c.link for c in collect(adapter).candidates]
        assert "https://igamingbrazil.com/patrocinado/cassino-online/" in links

    def test_unparseable_link_skips_only_that_module(self):
        broken = (
            '<div class="td-module-container td-category-pos-image">'
            '<h3 class="entry-title"><a href="http://[quebrado/x">Link quebrado sobre apostas</a></h3>'
            '<time class="entry-date" datetime="2025-06-09T08:00:00-03:00"></time>'
            "</div>"
        )
        page = load_fixture("igamingbrazil.html").replace("</body>", broken + "</body>")
        report = collect(IgamingBrazilAdapter(transport=PageTransport({IGAMING: page})))

        assert [c.title for c in report.candidates] == ["SPA divulga lista de bets autorizadas"]
        assert report.skipped["missing_link"] == 1

    def test_network_error_becomes_fetch_error(self):
        transport = PageTransport({IGAMING: httpx.ConnectError("connection refused")})
        with pytest.raises(FetchError, match="connection refused"):
            collect(IgamingBrazilAdapter(transport=transport))

    def test_timeout_becomes_fetch_error(self):
        transport = PageTransport({IGAMING: httpx.ReadTimeout("too slow")})
        with pytest.raises(FetchError, match="timed out"):
            collect(IgamingBrazilAdapter(transport=transport))


class TestGamesBras:
    def test_visits_articles_for_date_and_summary(self):
        report = collect(GamesBrasAdapter(transport=PageTransport(gamesbras_routes())))

        assert [(c.title, c.link) for c in report.candidates] == [
            ("Câmara discute apostas esportivas", GAMESBRAS + "legislacion/camara-apostas"),
            ("Loteria mineira lança produto", GAMESBRAS + "loterias/loteria-mineira"),
        ]
        assert report.candidates[0].summary == "Projeto muda regras de publicidade das bets."
        assert report.candidates[1].summary == "Primeiro parágrafo. Segundo parágrafo."
        assert all(c.published_at == TODAY for c in report.candidates)

    def test_broken_article_only_drops_itself(self):
        report = collect(GamesBrasAdapter(transport=PageTransport(gamesbras_routes())))

        assert report.skipped == {
            "duplicate": 1,
            "article_unavailable": 1,
            "not_today": 1,
            "missing_link": 1,
        }

    def test_duplicate_headline_visited_once(self):
        transport = PageTransport(gamesbras_routes())
        collect(GamesBrasAdapter(transport=transport))
        assert transport.requested.count(GAMESBRAS + "legislacion/camara-apostas") == 1

    def test_bounded_concurrency_still_visits_everything(self):
        config = Settings(article_concurrency=1)
        transport = PageTransport(gamesbras_routes())
        report = collect(GamesBrasAdapter(config=config, transport=transport))
        assert len(report.candidates) == 2
        assert len(transport.requested) == 5

    def test_yearless_article_date_uses_reference_year(self):
        home = '<a href="/mercado/sem-ano"><h2 class="tituloM">Bets no Congresso</h2></a>'
        article = (
            '<h6 class="fecha_interna" itemprop="datePublished" content="">9 de junho</h6>'
            '<h3 itemprop="description">Votação adiada.</h3>'
        )
        routes = {GAMESBRAS: home, GAMESBRAS + "mercado/sem-ano": article}
        report = collect(GamesBrasAdapter(transport=PageTransport(routes)))

        assert [c.title for c in report.candidates] == ["Bets no Congresso"]
        assert report.candidates[0].published_at == TODAY

    def test_homepage_failure_fails_adapter(self):
        with pytest.raises(FetchError, match="HTTP 500"):
            collect(GamesBrasAdapter(transport=PageTransport({GAMESBRAS: 500})))


class TestGovFazenda:
    def test_follows_pagination_until_it_repeats(self):
        transport = PageTransport(govfazenda_routes())
        report = collect(GovFazendaAdapter(transport=transport))

        assert transport.requested == [GOV_PAGE1, GOV_PAGE2]
        assert [c.link for c in report.candidates] == [
            "https://www.gov.br/fazenda/pt-br/assuntos/noticias/2025/junho/spa-publica-portaria",
            "https://www.gov.br/fazenda/pt-br/assuntos/noticias/2025/junho/bloqueio-sites",
        ]
        assert report.candidates[0].summary == "Norma trata da publicidade das bets."
        assert report.skipped == {"not_today": 1}

    def test_page_limit(self):
        transport = PageTransport(govfazenda_routes())
        report = collect(GovFazendaAdapter(config=Settings(max_pages=1), transport=transport))

        assert transport.requested == [GOV_PAGE1]
        assert len(report.candidates) == 1

    def test_failing_later_page_fails_adapter(self):
        routes = govfazenda_routes()
        routes[GOV_PAGE2] = 502
        with pytest.raises(FetchError, match="HTTP 502"):
            collect(GovFazendaAdapter(transport=PageTransport(routes)))


def test_default_sources_in_display_order():
    names = [name for name, _ in build_default_sources()]
    assert names == ["BNLData", "iGamingBrazil", "GamesBras", "GovFazenda"]


def test_absolute_url_rejects_non_http_links():
    adapter = BnldataAdapter()
    assert adapter.absolute_url("/x/") == "https://bnldata.com.br/x/"
    assert adapter.absolute_url("javascript:void(0)") == ""
    assert adapter.absolute_url("  ") == ""
    assert adapter.absolute_url("http://[quebrado/x") == ""


class ExplodingAdapter(SourceAdapter):
    name = "Explosivo"
    base_url = "https://explosivo.example/"

    async def _extract(self, client, reference_now):
        raise RuntimeError("layout inesperado")


def test_unexpected_extraction_error_is_tagged_with_source():
    with pytest.raises(FetchError) as excinfo:
        collect(ExplodingAdapter(transport=PageTransport({})))
    assert excinfo.value.source == "Explosivo"
    assert "RuntimeError" in str(excinfo.value)
    assert "layout inesperado" in str(excinfo.value)


def test_reference_day_is_local_to_the_site():
    adapter = GovFazendaAdapter(timezone="America/Sao_Paulo")
    # 01:00 UTC on the 10th is still the 9th in Brasília
    assert adapter.reference_day(datetime(2025, 6, 10, 1, 0, tzinfo=timezone.utc)) == TODAY
