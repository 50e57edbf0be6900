import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from movie_config import MovieServerConfig
from movie_models import MovieDetail, SearchHit
from movie_normalizer import (
    omdb_movie_detail,
    omdb_search_hit,
    tmdb_movie_detail,
    tmdb_search_hit,
)

logger = logging.getLogger(__name__)

# Errors raised while mapping an upstream payload with an unexpected shape
PAYLOAD_ERRORS = (KeyError, TypeError, AttributeError, ValueError)

TMDB_SEARCH_LIMIT = 10
TMDB_POPULAR_LIMIT = 10
TMDB_GENRE_LIMIT = 10
TMDB_TRENDING_LIMIT = 15


def _map_hits(raw: List[Dict], mapper: Callable[[Dict], SearchHit], label: str) -> List[SearchHit]:
    try:
        return [mapper(movie) for movie in raw]
    except PAYLOAD_ERRORS as e:
        logger.warning(f"{label}: unexpected response format: {e!r}")
        return []


class OMDbClient:
    """Title/IMDb-id lookups against OMDb"""

    def __init__(self, config: MovieServerConfig):
        self.api_key = config.omdb_api_key
        self.base_url = "http://www.omdbapi.com/"

    def _make_request(self, params: Dict) -> Optional[Dict]:
        """Make a request to OMDb API"""
        params['apikey'] = self.api_key

        try:
            response = requests.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"OMDb API request failed: {e}")
            return None

        if not isinstance(data, dict) or data.get('Response') == 'False':
            return None
        return data

    def search_by_title(self, title: str, year: Optional[str] = None) -> List[SearchHit]:
        """Search OMDb movies by title"""
        params = {'s': title, 'type': 'movie'}
        if year:
            params['y'] = year

        data = self._make_request(params)
        if not data:
            return []
        return _map_hits(data.get('Search') or [], omdb_search_hit, "OMDb search")

    def fetch_detail_by_id(self, imdb_id: str) -> Optional[MovieDetail]:
        """Get full movie details (with the long plot) by IMDb id"""
        data = self._make_request({'i': imdb_id, 'plot': 'full'})
        if not data:
            return None

        try:
            return omdb_movie_detail(data)
        except PAYLOAD_ERRORS as e:
            logger.warning(f"OMDb details for {imdb_id}: unexpected response format: {e!r}")
            return None


class TMDbClient:
    """Search, details and discovery lists from TMDb.

    TMDb is optional: without an API key every method returns an empty
    result without touching the network.
    """

    def __init__(self, config: MovieServerConfig):
        self.api_key = config.tmdb_api_key
        self.base_url = "https://api.themoviedb.org/3"

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _make_request(self, endpoint: str, params: Dict = None) -> Optional[Dict[str, Any]]:
        """Make a request to TMDB API"""
        if params is None:
            params = {}
        params['api_key'] = self.api_key
        params['language'] = 'en-US'

        try:
            response = requests.get(f"{self.base_url}{endpoint}", params=params)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"TMDB API request failed: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"TMDB API returned unexpected JSON for {endpoint}")
            return None
        return data

    def _fetch_list(self, endpoint: str, limit: int, params: Dict = None) -> List[SearchHit]:
        if not self.enabled:
            return []

        data = self._make_request(endpoint, params)
        if not data:
            return []
        return _map_hits((data.get('results') or [])[:limit], tmdb_search_hit, f"TMDB {endpoint}")

    def search_by_title(self, title: str, year: Optional[str] = None) -> List[SearchHit]:
        """Search TMDB movies by title"""
        params = {'query': title}
        if year:
            params['year'] = year
        return self._fetch_list("/search/movie", TMDB_SEARCH_LIMIT, params)

    def fetch_detail_by_id(self, tmdb_id: str) -> Optional[MovieDetail]:
        """Get movie details with credits embedded in the same response"""
        if not self.enabled:
            return None

        data = self._make_request(f"/movie/{tmdb_id}", {'append_to_response': 'credits'})
        if not data:
            return None

        try:
            return tmdb_movie_detail(data)
        except PAYLOAD_ERRORS as e:
            logger.warning(f"TMDB details for {tmdb_id}: unexpected response format: {e!r}")
            return None

    def fetch_popular(self) -> List[SearchHit]:
        return self._fetch_list("/movie/popular", TMDB_POPULAR_LIMIT, {'page': 1})

    def fetch_trending(self) -> List[SearchHit]:
        """Movies trending this week"""
        return self._fetch_list("/trending/movie/week", TMDB_TRENDING_LIMIT)

    def fetch_by_genre(self, genre_code: int) -> List[SearchHit]:
        return self._fetch_list("/discover/movie", TMDB_GENRE_LIMIT, {'with_genres': genre_code, 'page': 1})
