#!/usr/bin/env python3
"""
BetFinder - Betting News Aggregator

Fetches today's news from the configured Brazilian betting-news sites,
ranks them by keyword relevance and prints a digest per site.

Usage:
    python -m betfinder.main                    # Digest for today
    python -m betfinder.main --json             # Machine-readable output
    python -m betfinder.main --keywords k.json  # Custom keyword list
    python -m betfinder.main --lenient-dates    # Keep items without a date
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from .config.settings import LENIENT, settings
from .errors import ConfigError
from .news.aggregator import aggregate_news
from .news.dates import resolve_timezone
from .news.models import SourceResult


def parse_args(argv: Any = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Daily digest of Brazilian betting-industry news"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of a digest",
    )

    parser.add_argument(
        "--keywords",
        type=Path,
        default=None,
        help=f"Keyword JSON file (default: {settings.keywords_file})",
    )

    parser.add_argument(
        "--lenient-dates",
        action="store_true",
        help="Keep items whose publication date cannot be read",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.request_timeout,
        help=f"Per-request timeout in seconds (default: {settings.request_timeout})",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Debug logging, including every skipped item",
    )

    return parser.parse_args(argv)


def format_digest(results: list[SourceResult], now: datetime) -> str:
    """Render results as the plain-text digest shown to the user."""
    lines = [f"Notícias encontradas em {now:%d/%m/%Y}, às {now:%H:%M}", ""]

    for result in results:
        lines.append(f"== {result.source_name} ({result.total_found} de hoje)")
        if result.error:
            lines.append(f"   Nenhuma notícia encontrada, falha na busca: {result.error}")
        elif not result.top_items:
            lines.append("   Nenhuma notícia encontrada.")
        for item in result.top_items:
            day = f"[{item.published_at:%d/%m/%Y}] " if item.published_at else ""
            lines.append(f"   {day}{item.title}")
            lines.append(f"      {item.link}")
        lines.append("")

    links = [item.link for result in results for item in result.top_items]
    if links:
        lines.append("Todos os links:")
        lines.extend(links)
    else:
        lines.append("Nenhum link para copiar.")
    return "\n".join(lines)


async def main(argv: Any = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    update: dict[str, Any] = {"request_timeout": args.timeout}
    if args.lenient_dates:
        update["unknown_date_policy"] = LENIENT
    config = settings.model_copy(update=update)

    now = datetime.now(resolve_timezone(config.timezone))

    if not args.json:
        print("📰 Buscando notícias...")

    try:
        results = await aggregate_news(config=config, keywords_file=args.keywords, now=now)
    except ConfigError as exc:
        print(f"❌ Erro de configuração: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([result.to_dict() for result in results], ensure_ascii=False, indent=2))
    else:
        print(format_digest(results, now))

    return 0


def cli() -> None:
    """CLI entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
