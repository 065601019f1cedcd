"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY_HOST = "homeless-shelters-and-foodbanks-api.p.rapidapi.com"
DEFAULT_RADIUS_MILES = 1.4


@dataclass(frozen=True)
class ScoringWeights:
    """Point budgets and rates used by the scoring engine."""

    distance: float = 30
    type_match: float = 20
    availability: float = 15
    reputation: float = 20
    contact: float = 15
    service_needs: float = 20
    miles_penalty: float = 2
    points_per_contact: float = 5
    max_rating: float = 5


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class Settings:
    rapidapi_key: str
    database_url: str
    directory_host: str = DEFAULT_DIRECTORY_HOST
    request_timeout: float = 10
    default_radius: float = DEFAULT_RADIUS_MILES
    rating_lookup_concurrency: int = 5


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    rapidapi_key = os.getenv("RAPIDAPI_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    directory_host = os.getenv("DIRECTORY_HOST", "").strip() or DEFAULT_DIRECTORY_HOST
    request_timeout = float(os.getenv("DIRECTORY_TIMEOUT", "10"))
    default_radius = float(os.getenv("DEFAULT_RADIUS_MILES", str(DEFAULT_RADIUS_MILES)))
    rating_lookup_concurrency = max(int(os.getenv("RATING_LOOKUP_CONCURRENCY", "5")), 1)

    if not rapidapi_key:
        logger.warning("RAPIDAPI_KEY is not configured; directory requests will fail.")
    if not database_url:
        logger.warning("DATABASE_URL is not set; ratings will default to zero.")

    return Settings(
        rapidapi_key=rapidapi_key,
        database_url=database_url,
        directory_host=directory_host,
        request_timeout=request_timeout,
        default_radius=default_radius,
        rating_lookup_concurrency=rating_lookup_concurrency,
    )
