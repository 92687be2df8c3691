#!/usr/bin/env python3
"""
CLI for one-off event searches.

Usage:
    # Events near a point
    python -m api.cli.search 40.7128 -74.0060

    # With a category and start date
    python -m api.cli.search 40.7128 -74.0060 --q music --date 2024-03-15
"""

import argparse
import asyncio
import json
import logging
import sys

from api.config import configure_logging, get_settings
from api.models import SearchFailed, SearchResult
from api.services.eventbrite import EventbriteClient
from api.services.search import error_body, search_events

logger = logging.getLogger(__name__)


def result_to_dict(result: SearchResult) -> dict:
    """Convert a search result to the same JSON shape the HTTP API returns."""
    if isinstance(result, SearchFailed):
        return error_body(result)
    return {"events": [event.model_dump(by_alias=True) for event in result.events]}


async def run_search(
    latitude: str,
    longitude: str,
    category: str | None = None,
    date: str | None = None,
) -> SearchResult:
    """Run one search with a client built from process settings."""
    client = EventbriteClient(get_settings())
    try:
        return await search_events(latitude, longitude, category, date, client=client)
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Search Eventbrite for nearby events")
    parser.add_argument("latitude", help="Search center latitude")
    parser.add_argument("longitude", help="Search center longitude")
    parser.add_argument("--q", dest="category", help="Category or free-text filter")
    parser.add_argument("--date", help="Start date (YYYY-MM-DD)")
    args = parser.parse_args(argv)

    configure_logging()

    result = asyncio.run(
        run_search(args.latitude, args.longitude, args.category, args.date)
    )
    print(json.dumps(result_to_dict(result), indent=2))

    if isinstance(result, SearchFailed):
        logger.error("Search failed: %s", result.detail)
        return 1
    logger.info("Found %d events", len(result.events))
    return 0


if __name__ == "__main__":
    sys.exit(main())
