"""Load the keyword list used for relevance scoring."""

import logging
from pathlib import Path
from typing import Iterable, Iterator

from pydantic import TypeAdapter, ValidationError

from ..errors import ConfigError

logger = logging.getLogger(__name__)

_KEYWORD_LIST = TypeAdapter(list[str])


class KeywordSet:
    """Ordered, read-only set of lower-cased keywords.

    Blank entries are dropped (an empty keyword would match every text)
    and repeats keep their first position.
    """

    def __init__(self, keywords: Iterable[str] = ()):
        seen: dict[str, None] = {}
        for keyword in keywords:
            normalized = keyword.strip().lower()
            if normalized:
                seen.setdefault(normalized, None)
        self._keywords = tuple(seen)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keywords)

    def __len__(self) -> int:
        return len(self._keywords)

    def __contains__(self, keyword: object) -> bool:
        return isinstance(keyword, str) and keyword.strip().lower() in self._keywords

    def __repr__(self) -> str:
        return f"KeywordSet({list(self._keywords)!r})"


def load_keywords(path: Path) -> KeywordSet:
    """
    Load keywords from a JSON file holding an array of strings.

    Args:
        path: Path to keywords.json

    Returns:
        KeywordSet in file order

    Raises:
        ConfigError: If the file is missing, unreadable or not a list of strings
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read keyword file {path}: {exc}") from exc

    try:
        keywords = _KEYWORD_LIST.validate_json(raw)
    except ValidationError as exc:
        raise ConfigError(
            f"keyword file {path} must contain a JSON array of strings: {exc}"
        ) from exc

    keyword_set = KeywordSet(keywords)
    logger.info("[KEYWORDS] Loaded %d keywords from %s", len(keyword_set), path.name)
    return keyword_set
