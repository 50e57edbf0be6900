#!/usr/bin/env python3
"""
Movie Search MCP Server
Search movies, get details and recommendations from OMDb and TMDb
"""
import asyncio
import logging
import re
import sys
from typing import List, Optional

from mcp.server.models import InitializationOptions
from mcp.server import NotificationOptions, Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool
import mcp.types as types

from movie_aggregator import GENRE_CODES, MovieAggregator
from movie_config import load_config
from movie_models import NOT_AVAILABLE, MovieDetail, SearchHit, Source

# stdout is reserved for the MCP stdio stream
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SERVER_NAME = "movie-search-server"
SERVER_VERSION = "1.0.0"

YEAR_PATTERN = re.compile(r"^\d{4}$")

# Load configuration and initialize the aggregator
config = load_config()
movie_api = MovieAggregator.from_config(config)

# Create a server instance
server = Server(SERVER_NAME)

HELP_TEXT = f"""
Movie Search MCP Server

Available tools:

1. search_movies - Search movies by title
   - title: Movie title (required)
   - year: Movie year (optional)

2. get_movie_details - Get complete movie information
   - id: Movie ID (IMDB ID or TMDb ID)
   - source: 'omdb' or 'tmdb' (default: omdb)

3. recommend_movies - Get movie recommendations
   - genre: Specific genre (optional)
   - Available genres: {', '.join(name for name in GENRE_CODES if name != 'sci-fi')}

4. popular_movies - Get the most popular movies of the week

5. movie_help - Show this help

APIs used:
- OMDb API: For detailed IMDB information
- TMDb API: For advanced searches and recommendations

Required configuration:
- Environment variable OMDB_API_KEY (get at: http://www.omdbapi.com/apikey.aspx)
- Environment variable TMDB_API_KEY (get at: https://www.themoviedb.org/settings/api)

Usage examples:
- "Search for Batman movies"
- "Get details for movie tt0468569"
- "Recommend action movies"
- "What are the popular movies?"
"""

TMDB_DETAILS_HINT = '\nUse "get_movie_details" with the ID and source "tmdb" for more information.'


@server.list_tools()
async def handle_list_tools() -> list[Tool]:
    """
    List available tools.
    Each tool specifies its arguments using JSON Schema validation.
    """
    return [
        Tool(
            name="search_movies",
            description="Search for movies by title in OMDb and TMDb, with optional year filter",
            inputSchema={
                "type": "object",
                "properties": {
                    "title": {
                        "type": "string",
                        "description": "Movie title to search for",
                    },
                    "year": {
                        "type": "string",
                        "description": "Optional release year (e.g., '2010')",
                        "pattern": r"^\d{4}$",
                    },
                },
                "required": ["title"],
            },
        ),
        Tool(
            name="get_movie_details",
            description="Get complete movie details (plot, cast, ratings, awards) from OMDb or TMDb",
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {
                        "type": "string",
                        "description": "Movie ID (IMDB ID for omdb, numeric ID for tmdb)",
                    },
                    "source": {
                        "type": "string",
                        "enum": [source.value for source in Source],
                        "description": "Data source the ID belongs to",
                        "default": Source.OMDB.value,
                    },
                },
                "required": ["id"],
            },
        ),
        Tool(
            name="recommend_movies",
            description="Get movie recommendations by genre, or popular movies when no genre is given",
            inputSchema={
                "type": "object",
                "properties": {
                    "genre": {
                        "type": "string",
                        "description": "Movie genre (optional). Examples: action, comedy, drama, horror, sci-fi, romance",
                    },
                },
                "required": [],
            },
        ),
        Tool(
            name="popular_movies",
            description="Get the most popular movies this week",
            inputSchema={"type": "object", "properties": {}, "required": []},
        ),
        Tool(
            name="movie_help",
            description="Explain how to use the movie search tools",
            inputSchema={"type": "object", "properties": {}, "required": []},
        ),
    ]


def _require_string(arguments: dict, name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{name}' must be a non-empty string")
    return value


def _optional_string(arguments: dict, name: str) -> Optional[str]:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{name}' must be a string")
    return value or None


def format_hit_list(header: str, hits: List[SearchHit], show_source: bool = False) -> str:
    response = f"{header}\n\n"
    for i, movie in enumerate(hits, 1):
        response += f"{i}. {movie.title} ({movie.year})\n"
        if show_source:
            response += f"   - ID: {movie.id}\n"
            response += f"   - Source: {movie.source.value.upper()}\n"
        else:
            response += f"   - TMDb ID: {movie.id}\n"
        if movie.poster_url != NOT_AVAILABLE:
            response += f"   - Poster: {movie.poster_url}\n"
        response += "\n"
    return response


def format_movie_detail(details: MovieDetail) -> str:
    response = f"{details.title} ({details.year})\n\n"
    response += f"Plot: {details.plot}\n\n"
    response += f"Genre: {details.genre}\n"
    response += f"Rating: {details.rating}\n"
    response += f"Runtime: {details.runtime or NOT_AVAILABLE}\n"

    if details.director:
        response += f"Director: {details.director}\n"
    if details.actors:
        response += f"Main Cast: {details.actors}\n"
    if details.language:
        response += f"Language: {details.language}\n"
    if details.country:
        response += f"Country: {details.country}\n"
    if details.awards and details.awards != NOT_AVAILABLE:
        response += f"Awards: {details.awards}\n"
    if details.box_office and details.box_office != NOT_AVAILABLE:
        response += f"Box Office: {details.box_office}\n"
    if details.imdb_id:
        response += f"IMDB ID: {details.imdb_id}\n"

    response += f"\nSource: {details.source.value.upper()}"

    if details.poster_url != NOT_AVAILABLE:
        response += f"\n\nPoster: {details.poster_url}"

    return response


@server.call_tool()
async def handle_call_tool(name: str, arguments: dict) -> list[types.TextContent]:
    """
    Handle tool execution requests.
    """
    arguments = arguments or {}

    try:
        if name == "search_movies":
            title = _require_string(arguments, "title")
            year = _optional_string(arguments, "year")
            if year and not YEAR_PATTERN.match(year):
                raise ValueError("'year' must be a 4-digit year")

            results = await movie_api.search(title, year)

            if results:
                response = format_hit_list(f'Found {len(results)} movies for "{title}":', results, show_source=True)
                response += '\nUse "get_movie_details" with the ID for more information.'
                return [types.TextContent(type="text", text=response)]
            else:
                year_text = f" from year {year}" if year else ""
                return [types.TextContent(type="text", text=f'No movies found with title "{title}"{year_text}.')]

        elif name == "get_movie_details":
            movie_id = _require_string(arguments, "id")
            source = Source(arguments.get("source") or Source.OMDB.value)

            details = await movie_api.detail(movie_id, source)

            if details:
                return [types.TextContent(type="text", text=format_movie_detail(details))]
            else:
                return [types.TextContent(
                    type="text",
                    text=f'No details found for movie with ID "{movie_id}" in {source.value.upper()}.',
                )]

        elif name == "recommend_movies":
            genre = _optional_string(arguments, "genre")
            recommendations = await movie_api.recommendations(genre)

            if recommendations:
                header = f"Movie recommendations for {genre}:" if genre else "Movie recommendations (popular):"
                response = format_hit_list(header, recommendations)
                response += TMDB_DETAILS_HINT
                return [types.TextContent(type="text", text=response)]
            else:
                genre_text = f' for genre "{genre}"' if genre else ""
                return [types.TextContent(type="text", text=f"No recommendations found{genre_text}.")]

        elif name == "popular_movies":
            popular = await movie_api.trending()

            if popular:
                response = format_hit_list("Most popular movies this week:", popular)
                response += TMDB_DETAILS_HINT
                return [types.TextContent(type="text", text=response)]
            else:
                return [types.TextContent(type="text", text="Could not get popular movies at this time.")]

        elif name == "movie_help":
            return [types.TextContent(type="text", text=HELP_TEXT)]

        else:
            return [types.TextContent(type="text", text=f"Unknown tool: {name}")]

    except Exception as e:
        logger.exception(f"Tool {name} failed")
        return [types.TextContent(type="text", text=f"Error executing {name}: {str(e)}")]


async def main():
    logger.info(
        f"Starting {SERVER_NAME} (OMDb key: {'demo' if config.omdb_is_demo else 'configured'}, "
        f"TMDb: {'enabled' if config.tmdb_enabled else 'disabled'})"
    )

    # Run the server using stdin/stdout streams
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=SERVER_NAME,
                server_version=SERVER_VERSION,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down MCP server...")


if __name__ == "__main__":
    run()
