"""
Services for the Local Event Finder backend.

Searching from application code::

    from api.services import search_events

    result = await search_events("40.7128", "-74.0060", "music", "2024-03-15")
    if result.ok:
        for event in result.events:
            ...

Available Services
------------------
- search_events: Validates raw input and runs one upstream search
- EventbriteClient: Eventbrite events-search integration
"""

from .eventbrite import EventbriteClient, build_params, get_eventbrite_client, parse_events
from .search import InvalidSearchInput, build_request, error_body, search_events

__all__ = [
    "EventbriteClient",
    "build_params",
    "get_eventbrite_client",
    "parse_events",
    "InvalidSearchInput",
    "build_request",
    "error_body",
    "search_events",
]
