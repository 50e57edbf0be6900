from dataclasses import dataclass
from enum import Enum
from typing import Optional

NOT_AVAILABLE = "N/A"


class Source(str, Enum):
    OMDB = "omdb"
    TMDB = "tmdb"


@dataclass(frozen=True)
class SearchHit:
    """Lightweight search result from either upstream.

    ``id`` only identifies a movie together with ``source``: an IMDb id for
    OMDb hits, a numeric string for TMDb hits.
    """
    title: str
    year: str
    id: str
    media_type: str
    poster_url: str
    source: Source


@dataclass(frozen=True)
class MovieDetail:
    """Full movie record.

    Optional fields are None when the upstream did not supply them, which is
    different from the "N/A" sentinel some upstream fields carry.
    """
    title: str
    year: str
    plot: str
    genre: str
    rating: str
    poster_url: str
    source: Source
    director: Optional[str] = None
    actors: Optional[str] = None
    runtime: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None
    awards: Optional[str] = None
    box_office: Optional[str] = None
    imdb_id: Optional[str] = None
