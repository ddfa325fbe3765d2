"""Per-site news scrapers.

Each site is one ``SourceAdapter`` subclass; adding a site means adding a
subclass and listing it in ``AVAILABLE_SOURCES``.
"""

from typing import Optional

import httpx

from ..config.settings import Settings
from .base import ExtractionReport, ItemOutcome, SkipReason, SourceAdapter
from .bnldata import BnldataAdapter
from .gamesbras import GamesBrasAdapter
from .govfazenda import GovFazendaAdapter
from .igamingbrazil import IgamingBrazilAdapter

# Display order of the digest
AVAILABLE_SOURCES: tuple[type[SourceAdapter], ...] = (
    BnldataAdapter,
    IgamingBrazilAdapter,
    GamesBrasAdapter,
    GovFazendaAdapter,
)


def build_default_sources(
    config: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[tuple[str, SourceAdapter]]:
    """(name, adapter) pairs for every configured site, in display order."""
    adapters = [cls(config=config, transport=transport) for cls in AVAILABLE_SOURCES]
    return [(adapter.name, adapter) for adapter in adapters]


__all__ = [
    "AVAILABLE_SOURCES",
    "BnldataAdapter",
    "ExtractionReport",
    "GamesBrasAdapter",
    "GovFazendaAdapter",
    "IgamingBrazilAdapter",
    "ItemOutcome",
    "SkipReason",
    "SourceAdapter",
    "build_default_sources",
]
