"""Configuration settings for the BetFinder news aggregator."""

from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

# Load .env file
load_dotenv()

STRICT = "strict"
LENIENT = "lenient"


class Settings(BaseSettings):
    """Application settings loaded from environment variables (BETFINDER_*)."""

    # Paths
    project_root: Path = Path(__file__).parent.parent.parent
    data_dir: Path = project_root / "data"
    keywords_file: Path = data_dir / "keywords.json"

    # Relevance scoring
    title_weight: int = 2
    summary_weight: int = 1

    # Ranking
    max_candidates: int = 30  # scored per source
    top_n: int = 10  # returned per source

    # Scraping
    request_timeout: float = 15.0  # seconds, per request
    article_concurrency: int = 5  # article pages fetched at once per source
    max_pages: int = 5  # listing pages followed per paginated source
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )

    # Dates
    timezone: str = "America/Sao_Paulo"
    unknown_date_policy: str = STRICT  # "strict" drops undated items, "lenient" keeps them

    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value!r}") from exc
        return value

    @field_validator("unknown_date_policy")
    @classmethod
    def _check_policy(cls, value: str) -> str:
        value = value.lower().strip()
        if value not in (STRICT, LENIENT):
            raise ValueError(f"unknown_date_policy must be '{STRICT}' or '{LENIENT}'")
        return value

    class Config:
        env_file = ".env"
        env_prefix = "BETFINDER_"
        extra = "ignore"


# Global settings instance
settings = Settings()
