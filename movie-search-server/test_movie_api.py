import pytest
import requests

import movie_api
from movie_api import OMDbClient, TMDbClient
from movie_config import MovieServerConfig
from movie_models import NOT_AVAILABLE, Source


class FakeResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


@pytest.fixture
def requests_get(monkeypatch):
    """Replace requests.get; set `.response` (or `.error`) before calling the client"""
    calls = []

    def fake_get(url, params=None, **kwargs):
        calls.append({"url": url, "params": dict(params or {})})
        if fake_get.error is not None:
            raise fake_get.error
        return fake_get.response

    fake_get.calls = calls
    fake_get.response = FakeResponse({})
    fake_get.error = None
    monkeypatch.setattr(movie_api.requests, "get", fake_get)
    return fake_get


def tmdb_movies(count):
    return [
        {"id": i, "title": f"Movie {i}", "release_date": "2020-01-01", "poster_path": f"/{i}.jpg"}
        for i in range(count)
    ]


CONFIG = MovieServerConfig(omdb_api_key="omdb-key", tmdb_api_key="tmdb-key")


# OMDb

def test_omdb_search_maps_hits(requests_get):
    requests_get.response = FakeResponse({
        "Search": [
            {"Title": "Batman Begins", "Year": "2005", "imdbID": "tt0372784", "Type": "movie", "Poster": "N/A"},
            {"Title": "The Batman", "Year": "2022", "imdbID": "tt1877830", "Type": "movie", "Poster": "https://x/p.jpg"},
        ],
        "totalResults": "2",
        "Response": "True",
    })

    hits = OMDbClient(CONFIG).search_by_title("Batman", "2005")

    assert [hit.id for hit in hits] == ["tt0372784", "tt1877830"]
    assert all(hit.source is Source.OMDB for hit in hits)
    params = requests_get.calls[0]["params"]
    assert params == {"s": "Batman", "type": "movie", "y": "2005", "apikey": "omdb-key"}


def test_omdb_search_no_result_signal_is_empty(requests_get):
    requests_get.response = FakeResponse({"Response": "False", "Error": "Movie not found!"})

    assert OMDbClient(CONFIG).search_by_title("zzzzzz") == []


def test_omdb_detail_no_result_signal_is_absent(requests_get):
    requests_get.response = FakeResponse({"Response": "False", "Error": "Incorrect IMDb ID."})

    assert OMDbClient(CONFIG).fetch_detail_by_id("tt0468569") is None
    params = requests_get.calls[0]["params"]
    assert params["i"] == "tt0468569"
    assert params["plot"] == "full"


def test_omdb_uses_demo_key_when_unconfigured(requests_get):
    requests_get.response = FakeResponse({"Response": "False"})

    OMDbClient(MovieServerConfig()).search_by_title("Inception")

    assert requests_get.calls[0]["params"]["apikey"] == "demo"


@pytest.mark.parametrize(
    "response, error",
    [
        (None, requests.exceptions.ConnectionError("connection refused")),
        (FakeResponse({}, status_code=401), None),
        (FakeResponse(invalid_json=True), None),
        (FakeResponse({"Response": "True", "Search": [{"Year": "2010"}]}), None),
    ],
)
def test_omdb_failures_degrade_to_empty(requests_get, response, error):
    requests_get.response = response
    requests_get.error = error

    client = OMDbClient(CONFIG)

    assert client.search_by_title("Inception") == []
    assert client.fetch_detail_by_id("tt1375666") is None


def test_omdb_failures_are_logged(requests_get, caplog):
    requests_get.error = requests.exceptions.Timeout("read timed out")

    with caplog.at_level("WARNING", logger="movie_api"):
        OMDbClient(CONFIG).search_by_title("Inception")

    assert "OMDb API request failed" in caplog.text


# TMDb

def test_tmdb_without_key_never_calls_upstream(requests_get):
    client = TMDbClient(MovieServerConfig(omdb_api_key="omdb-key"))

    assert client.search_by_title("Inception") == []
    assert client.fetch_detail_by_id("27205") is None
    assert client.fetch_popular() == []
    assert client.fetch_trending() == []
    assert client.fetch_by_genre(28) == []
    assert requests_get.calls == []


def test_tmdb_search_caps_raw_hits(requests_get):
    requests_get.response = FakeResponse({"results": tmdb_movies(20)})

    hits = TMDbClient(CONFIG).search_by_title("Movie", "2020")

    assert len(hits) == 10
    assert hits[0].poster_url == "https://image.tmdb.org/t/p/w500/0.jpg"
    call = requests_get.calls[0]
    assert call["url"] == "https://api.themoviedb.org/3/search/movie"
    assert call["params"] == {"query": "Movie", "year": "2020", "api_key": "tmdb-key", "language": "en-US"}


@pytest.mark.parametrize(
    "method, args, endpoint, limit",
    [
        ("fetch_popular", (), "/movie/popular", 10),
        ("fetch_trending", (), "/trending/movie/week", 15),
        ("fetch_by_genre", (28,), "/discover/movie", 10),
    ],
)
def test_tmdb_lists_are_capped(requests_get, method, args, endpoint, limit):
    requests_get.response = FakeResponse({"results": tmdb_movies(20)})

    hits = getattr(TMDbClient(CONFIG), method)(*args)

    assert len(hits) == limit
    assert requests_get.calls[0]["url"].endswith(endpoint)


def test_tmdb_genre_discovery_sends_genre_code(requests_get):
    requests_get.response = FakeResponse({"results": []})

    TMDbClient(CONFIG).fetch_by_genre(878)

    params = requests_get.calls[0]["params"]
    assert params["with_genres"] == 878
    assert params["page"] == 1


def test_tmdb_detail_without_director(requests_get):
    requests_get.response = FakeResponse({
        "id": 27205,
        "title": "Inception",
        "overview": "Cobb, a skilled thief...",
        "release_date": "2010-07-15",
        "poster_path": "/inception.jpg",
        "vote_average": 8.4,
        "genres": [{"id": 28, "name": "Action"}],
        "imdb_id": "tt1375666",
        "runtime": 148,
        "revenue": 825532764,
        "original_language": "en",
        "production_countries": [{"name": "United States of America"}],
        "credits": {"cast": [{"name": "Leonardo DiCaprio"}], "crew": [{"name": "Hans Zimmer", "job": "Composer"}]},
    })

    detail = TMDbClient(CONFIG).fetch_detail_by_id("27205")

    assert detail.director == NOT_AVAILABLE
    assert detail.actors == "Leonardo DiCaprio"
    assert detail.box_office == "$825,532,764"
    assert detail.source is Source.TMDB
    call = requests_get.calls[0]
    assert call["url"] == "https://api.themoviedb.org/3/movie/27205"
    assert call["params"]["append_to_response"] == "credits"


@pytest.mark.parametrize(
    "response, error",
    [
        (None, requests.exceptions.ConnectionError("connection refused")),
        (FakeResponse({"status_message": "Invalid API key"}, status_code=401), None),
        (FakeResponse(invalid_json=True), None),
        (FakeResponse({"results": [{"title": "No id"}]}), None),
        (FakeResponse(["not", "an", "object"]), None),
    ],
)
def test_tmdb_failures_degrade_to_empty(requests_get, response, error):
    requests_get.response = response
    requests_get.error = error

    client = TMDbClient(CONFIG)

    assert client.search_by_title("Inception") == []
    assert client.fetch_popular() == []
    assert client.fetch_trending() == []
    assert client.fetch_detail_by_id("27205") is None
