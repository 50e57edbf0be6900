import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# OMDb accepts this key for a handful of lookups before rejecting requests
OMDB_DEMO_KEY = "demo"


def _read_key(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


@dataclass(frozen=True)
class MovieServerConfig:
    """API keys for the two upstream movie databases"""
    omdb_api_key: str = OMDB_DEMO_KEY
    tmdb_api_key: Optional[str] = None

    @property
    def omdb_is_demo(self) -> bool:
        return self.omdb_api_key == OMDB_DEMO_KEY

    @property
    def tmdb_enabled(self) -> bool:
        return bool(self.tmdb_api_key)


def load_config() -> MovieServerConfig:
    """Read API keys from the environment (and a .env file, if present)"""
    load_dotenv()

    return MovieServerConfig(
        omdb_api_key=_read_key('OMDB_API_KEY') or OMDB_DEMO_KEY,
        tmdb_api_key=_read_key('TMDB_API_KEY'),
    )
