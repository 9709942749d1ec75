"""Client configuration helpers.

Credentials only come from the environment (or a local ``.env`` file):
`YELP_API_KEY` is a private key and must never be hardcoded.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.yelp.com/v3"


@dataclass(frozen=True)
class Settings:
    yelp_api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("YELP_TIMEOUT=%r is not a number; requests will have no deadline.", raw)
        return None
    if value <= 0:
        logger.warning("YELP_TIMEOUT must be positive, got %s; requests will have no deadline.", value)
        return None
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    yelp_api_key = os.getenv("YELP_API_KEY", "").strip()
    base_url = (os.getenv("YELP_BASE_URL") or DEFAULT_BASE_URL).strip().rstrip("/")
    timeout = _parse_timeout(os.getenv("YELP_TIMEOUT"))

    if not yelp_api_key:
        logger.warning("YELP_API_KEY is not configured; Yelp Fusion requests will fail.")

    return Settings(yelp_api_key=yelp_api_key, base_url=base_url, timeout=timeout)
