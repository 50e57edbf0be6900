#!/usr/bin/env python3
"""
Live check of the OMDb + TMDb integration (hits the real APIs)
"""
import asyncio

from movie_aggregator import MovieAggregator
from movie_config import load_config


async def check_apis():
    config = load_config()

    if config.omdb_is_demo:
        print("Warning: OMDB_API_KEY not set, using the demo key (expect rejected requests)")
    if not config.tmdb_enabled:
        print("Warning: TMDB_API_KEY not set, TMDb results will be empty")

    api = MovieAggregator.from_config(config)

    print("Testing Movie APIs (OMDb + TMDb)...")
    print("=" * 60)

    # Test 1: Combined search
    print("1. Searching for 'Batman'...")
    results = await api.search("Batman")

    if not results:
        print("FAILED: No movies found. Check API keys and network access.")
        return

    print(f"SUCCESS: Found {len(results)} movies:")
    for i, movie in enumerate(results[:3], 1):
        print(f"   {i}. {movie.title} ({movie.year}) - {movie.source.value.upper()}")

    print("\n" + "=" * 60)

    # Test 2: Details for the first hit, from the upstream that returned it
    first_movie = results[0]
    print(f"2. Getting details for '{first_movie.title}'...")
    details = await api.detail(first_movie.id, first_movie.source)

    if details:
        print(f"SUCCESS: Details for: {details.title}")
        print(f"   Year: {details.year}")
        print(f"   Genre: {details.genre}")
        print(f"   Rating: {details.rating}")
        print(f"   Director: {details.director or 'N/A'}")
    else:
        print("FAILED: Could not get details")

    print("\n" + "=" * 60)

    # Test 3: TMDb lists
    print("3. Testing recommendations and trending...")
    recommendations = await api.recommendations("action")
    trending = await api.trending()
    print(f"   Action recommendations: {len(recommendations)}")
    print(f"   Trending this week: {len(trending)}")

    print("\n" + "=" * 60)
    print("Movie API check complete!")


if __name__ == "__main__":
    asyncio.run(check_apis())
