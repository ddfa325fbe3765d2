"""Shared fixtures: a fixed "today" and an offline HTTP transport."""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Union

import httpx

FIXTURES = Path(__file__).parent / "fixtures"

# Noon in Brasília on 9 June 2025
BRT = timezone(timedelta(hours=-3))
REFERENCE_NOW = datetime(2025, 6, 9, 12, 0, tzinfo=BRT)
TODAY = date(2025, 6, 9)

Route = Union[str, int, Exception]


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class PageTransport(httpx.MockTransport):
    """Serves canned pages by exact URL and records what was requested.

    A route maps to HTML text, an HTTP status code, or an exception to
    raise. Unknown URLs get a 404.
    """

    def __init__(self, routes: dict[str, Route]):
        self.routes = routes
        self.requested: list[str] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        route = self.routes.get(url, 404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, int):
            return httpx.Response(route, text="error")
        return httpx.Response(
            200, text=route, headers={"content-type": "text/html; charset=utf-8"}
        )
