"""
Map raw OMDb and TMDb payloads onto the unified SearchHit/MovieDetail records.

Everything here is pure: no requests, no logging. Shape problems surface as
KeyError/TypeError and are handled by the clients.
"""
from typing import Any, Dict, Iterable, Optional

from movie_models import NOT_AVAILABLE, MovieDetail, SearchHit, Source

TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
TMDB_POSTER_WIDTH = "w500"

MAX_BILLED_ACTORS = 5


def release_year(release_date: Optional[str]) -> str:
    """'2010-07-15' -> '2010'; missing dates give an empty string"""
    if not release_date:
        return ""
    return release_date.split('-')[0]


def tmdb_poster_url(poster_path: Optional[str]) -> str:
    if not poster_path:
        return NOT_AVAILABLE
    return f"{TMDB_IMAGE_BASE_URL}/{TMDB_POSTER_WIDTH}{poster_path}"


def format_runtime(minutes: Optional[int]) -> str:
    if not minutes:
        return NOT_AVAILABLE
    return f"{minutes} min"


def format_box_office(revenue: Optional[int]) -> str:
    if not revenue:
        return NOT_AVAILABLE
    return f"${revenue:,}"


def join_names(items: Optional[Iterable[Dict[str, Any]]], limit: Optional[int] = None) -> str:
    """Join the 'name' of each item with ', ', keeping at most `limit` items"""
    names = [item['name'] for item in (items or [])]
    if limit is not None:
        names = names[:limit]
    return ", ".join(names)


def find_director(crew: Optional[Iterable[Dict[str, Any]]]) -> str:
    for person in crew or []:
        if person.get('job') == 'Director':
            return person.get('name') or NOT_AVAILABLE
    return NOT_AVAILABLE


# OMDb

def omdb_search_hit(movie: Dict[str, Any]) -> SearchHit:
    return SearchHit(
        title=movie['Title'],
        year=movie.get('Year', ''),
        id=movie['imdbID'],
        media_type=movie.get('Type', 'movie'),
        poster_url=movie.get('Poster') or NOT_AVAILABLE,
        source=Source.OMDB,
    )


def omdb_movie_detail(data: Dict[str, Any]) -> MovieDetail:
    """Build a MovieDetail from an OMDb `i=` lookup.

    OMDb already returns display strings ("148 min", "$292,587,330"), so the
    values are passed through untouched. Keys missing from the payload stay
    None.
    """
    return MovieDetail(
        title=data['Title'],
        year=data.get('Year', ''),
        plot=data.get('Plot', NOT_AVAILABLE),
        genre=data.get('Genre', NOT_AVAILABLE),
        rating=data.get('imdbRating', NOT_AVAILABLE),
        poster_url=data.get('Poster') or NOT_AVAILABLE,
        source=Source.OMDB,
        director=data.get('Director'),
        actors=data.get('Actors'),
        runtime=data.get('Runtime'),
        language=data.get('Language'),
        country=data.get('Country'),
        awards=data.get('Awards'),
        box_office=data.get('BoxOffice'),
        imdb_id=data.get('imdbID'),
    )


# TMDb

def tmdb_search_hit(movie: Dict[str, Any]) -> SearchHit:
    return SearchHit(
        title=movie['title'],
        year=release_year(movie.get('release_date')),
        id=str(movie['id']),
        media_type='movie',
        poster_url=tmdb_poster_url(movie.get('poster_path')),
        source=Source.TMDB,
    )


def tmdb_movie_detail(data: Dict[str, Any]) -> MovieDetail:
    """Build a MovieDetail from `/movie/{id}?append_to_response=credits`.

    TMDb never reports awards, so that field is always the "N/A" sentinel.
    """
    credits = data.get('credits') or {}

    return MovieDetail(
        title=data['title'],
        year=release_year(data.get('release_date')),
        plot=data.get('overview', ''),
        genre=join_names(data.get('genres')),
        rating=str(data.get('vote_average', 0)),
        poster_url=tmdb_poster_url(data.get('poster_path')),
        source=Source.TMDB,
        director=find_director(credits.get('crew')),
        actors=join_names(credits.get('cast'), limit=MAX_BILLED_ACTORS) or NOT_AVAILABLE,
        runtime=format_runtime(data.get('runtime')),
        language=data.get('original_language'),
        country=join_names(data.get('production_countries')),
        awards=NOT_AVAILABLE,
        box_office=format_box_office(data.get('revenue')),
        imdb_id=data.get('imdb_id') or None,
    )
