import asyncio
import logging
from typing import List, Optional, Union

from movie_api import OMDbClient, TMDbClient
from movie_config import MovieServerConfig
from movie_models import MovieDetail, SearchHit, Source

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20

# TMDb genre ids, keyed by lower-cased genre name
GENRE_CODES = {
    'action': 28, 'adventure': 12, 'animation': 16, 'comedy': 35, 'crime': 80,
    'documentary': 99, 'drama': 18, 'family': 10751, 'fantasy': 14, 'history': 36,
    'horror': 27, 'music': 10402, 'mystery': 9648, 'romance': 10749,
    'science fiction': 878, 'sci-fi': 878,
    'thriller': 53, 'war': 10752, 'western': 37,
}


def genre_code(genre: str) -> Optional[int]:
    return GENRE_CODES.get(genre.lower())


def dedupe_by_title(hits: List[SearchHit]) -> List[SearchHit]:
    """Keep the first hit for each title, compared case-insensitively.

    Different movies sharing a title collapse into one entry.
    """
    seen_titles = set()
    unique_hits = []
    for hit in hits:
        key = hit.title.lower()
        if key not in seen_titles:
            seen_titles.add(key)
            unique_hits.append(hit)
    return unique_hits


class MovieAggregator:
    """Combines OMDb and TMDb behind the operations the MCP tools expose.

    The clients are blocking, so every call runs in a worker thread. None of
    the methods raise: failed upstreams show up as empty results.
    """

    def __init__(self, omdb: OMDbClient, tmdb: TMDbClient):
        self.omdb = omdb
        self.tmdb = tmdb

    @classmethod
    def from_config(cls, config: MovieServerConfig) -> "MovieAggregator":
        return cls(OMDbClient(config), TMDbClient(config))

    async def search(self, title: str, year: Optional[str] = None) -> List[SearchHit]:
        """Search both upstreams at once, OMDb hits first"""
        omdb_task = asyncio.create_task(asyncio.to_thread(self.omdb.search_by_title, title, year))
        tmdb_task = asyncio.create_task(asyncio.to_thread(self.tmdb.search_by_title, title, year))
        omdb_hits, tmdb_hits = await asyncio.gather(omdb_task, tmdb_task)

        logger.info(f"Search '{title}': {len(omdb_hits)} OMDb hits, {len(tmdb_hits)} TMDb hits")
        return dedupe_by_title(omdb_hits + tmdb_hits)[:SEARCH_LIMIT]

    async def detail(self, movie_id: str, source: Union[Source, str] = Source.OMDB) -> Optional[MovieDetail]:
        """Look up one movie in the upstream that produced its id"""
        if Source(source) is Source.TMDB:
            return await asyncio.to_thread(self.tmdb.fetch_detail_by_id, movie_id)
        return await asyncio.to_thread(self.omdb.fetch_detail_by_id, movie_id)

    async def recommendations(self, genre: Optional[str] = None) -> List[SearchHit]:
        """Movies in a genre, or the popular list when the genre is missing or unknown"""
        code = genre_code(genre) if genre else None
        if code is None:
            return await asyncio.to_thread(self.tmdb.fetch_popular)
        return await asyncio.to_thread(self.tmdb.fetch_by_genre, code)

    async def trending(self) -> List[SearchHit]:
        return await asyncio.to_thread(self.tmdb.fetch_trending)
