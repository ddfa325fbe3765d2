"""Date normalization for the date formats the news sources publish.

Sources mix ISO timestamps (``2025-06-09T10:15:00-03:00``), dotted
(``09.06.25``) and slashed (``09/06/2025``) day-first dates, and the
occasional Portuguese free-form string (``9 de junho de 2025``). All of
them normalize to a plain ``datetime.date``, compared against an
injected reference time in the source's local timezone.
"""

import re
from datetime import date, datetime, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

DEFAULT_TIMEZONE = "America/Sao_Paulo"

_ISO_RE = re.compile(r"(?<!\d)(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)")
_DAY_FIRST_RE = re.compile(r"(?<!\d)(\d{1,2})[./](\d{1,2})[./](\d{4}|\d{2})(?!\d)")
_DIGITS_ONLY_RE = re.compile(r"^[\d\s]+$")


class PortugueseParserInfo(date_parser.parserinfo):
    """dateutil vocabulary for Brazilian Portuguese dates."""

    JUMP = date_parser.parserinfo.JUMP + ["de", "às", "as", "em", "feira"]
    PERTAIN = ["de", "of"]
    WEEKDAYS = [
        ("seg", "segunda", "Mon", "Monday"),
        ("ter", "terça", "terca", "Tue", "Tuesday"),
        ("qua", "quarta", "Wed", "Wednesday"),
        ("qui", "quinta", "Thu", "Thursday"),
        ("sex", "sexta", "Fri", "Friday"),
        ("sáb", "sab", "sábado", "sabado", "Sat", "Saturday"),
        ("dom", "domingo", "Sun", "Sunday"),
    ]
    MONTHS = [
        ("jan", "janeiro", "January"),
        ("fev", "fevereiro", "Feb", "February"),
        ("mar", "março", "marco", "March"),
        ("abr", "abril", "Apr", "April"),
        ("mai", "maio", "May"),
        ("jun", "junho", "June"),
        ("jul", "julho", "July"),
        ("ago", "agosto", "Aug", "August"),
        ("set", "setembro", "Sep", "Sept", "September"),
        ("out", "outubro", "Oct", "October"),
        ("nov", "novembro", "November"),
        ("dez", "dezembro", "Dec", "December"),
    ]


_PARSER_INFO = PortugueseParserInfo(dayfirst=True)

DateLike = Union[date, datetime, str, None]


def _full_year(year_text: str) -> int:
    year = int(year_text)
    return 2000 + year if year < 100 else year


def _build(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_date(raw: DateLike, reference: Optional[date] = None) -> Optional[date]:
    """Normalize a raw date representation into a ``date``.

    Args:
        raw: Date text as scraped, or an already parsed date/datetime
        reference: Fills fields a free-form string leaves out (e.g. the
            year in "9 de junho"); dateutil uses the current date otherwise

    Returns:
        The calendar day, or None when nothing recognisable was found.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    text = str(raw).strip()
    if not text:
        return None

    match = _ISO_RE.search(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _build(year, month, day)

    match = _DAY_FIRST_RE.search(text)
    if match:
        day, month, year_text = match.groups()
        return _build(_full_year(year_text), int(month), int(day))

    # Bare numbers ("2025", "15") would be completed from the default date
    if _DIGITS_ONLY_RE.match(text):
        return None

    default = datetime.combine(reference, datetime.min.time()) if reference else None
    try:
        parsed = date_parser.parse(text, parserinfo=_PARSER_INFO, default=default)
    except (ValueError, OverflowError):
        return None
    return parsed.date()


def resolve_timezone(tz: Union[str, tzinfo, None]) -> Optional[tzinfo]:
    """Turn a zoneinfo key into a tzinfo; unknown keys resolve to None."""
    if tz is None or isinstance(tz, tzinfo):
        return tz
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def local_today(reference_now: datetime, tz: Union[str, tzinfo, None] = None) -> date:
    """Calendar day of ``reference_now`` as seen in ``tz``.

    Naive reference times are taken to already be local.
    """
    zone = resolve_timezone(tz)
    if zone is not None and reference_now.tzinfo is not None:
        reference_now = reference_now.astimezone(zone)
    return reference_now.date()


def is_today(
    candidate: Union[date, datetime, None],
    reference_now: datetime,
    tz: Union[str, tzinfo, None] = DEFAULT_TIMEZONE,
) -> bool:
    """Whether ``candidate`` falls on the same local day as ``reference_now``."""
    if candidate is None:
        return False
    if isinstance(candidate, datetime):
        candidate = local_today(candidate, tz)
    today = local_today(reference_now, tz)
    return (candidate.year, candidate.month, candidate.day) == (
        today.year,
        today.month,
        today.day,
    )
