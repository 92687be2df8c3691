"""
Event search entry point.

search_events takes raw caller input (strings from a query string, or numbers
from a location provider), validates and normalizes it into a SearchRequest,
and hands it to the Eventbrite client. Invalid input never reaches the
network.
"""

import logging
import math
import re
from datetime import date
from typing import Any

from pydantic import ValidationError

from api.models import FailureKind, SearchFailed, SearchRequest, SearchResult
from api.services.eventbrite import EventbriteClient, get_eventbrite_client

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

USER_ERROR_MESSAGE = "Failed to fetch events"


class InvalidSearchInput(ValueError):
    """Raw search input that cannot be normalized."""

    def __init__(self, kind: FailureKind, message: str):
        super().__init__(message)
        self.kind = kind


def parse_coordinate(raw: Any, name: str) -> float:
    """Parse a raw latitude or longitude into a finite float."""
    if raw is None or isinstance(raw, bool):
        raise InvalidSearchInput(FailureKind.INVALID_INPUT, f"{name} is required")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise InvalidSearchInput(FailureKind.INVALID_INPUT, f"{name} is required")
        if not NUMBER_PATTERN.match(raw):
            raise InvalidSearchInput(FailureKind.INVALID_INPUT, f"{name} must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidSearchInput(
            FailureKind.INVALID_INPUT, f"{name} must be a number"
        ) from None
    if not math.isfinite(value):
        raise InvalidSearchInput(FailureKind.INVALID_INPUT, f"{name} must be finite")
    return value


def normalize_category(raw: str | None) -> str | None:
    """Blank categories mean no text filter."""
    if raw is None:
        return None
    category = raw.strip()
    return category or None


def parse_date(raw: str | None) -> date | None:
    """Parse a YYYY-MM-DD start date; blank means no date filter."""
    if raw is None or not raw.strip():
        return None
    text = raw.strip()
    if not DATE_PATTERN.match(text):
        raise InvalidSearchInput(
            FailureKind.INVALID_DATE, f"date must be YYYY-MM-DD, got {text[:32]!r}"
        )
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidSearchInput(
            FailureKind.INVALID_DATE, f"{text} is not a calendar date"
        ) from None


def build_request(
    raw_latitude: Any,
    raw_longitude: Any,
    raw_category: str | None = None,
    raw_date: str | None = None,
) -> SearchRequest:
    """Validate raw input into a SearchRequest.

    Raises:
        InvalidSearchInput: if coordinates or date cannot be used
    """
    latitude = parse_coordinate(raw_latitude, "latitude")
    longitude = parse_coordinate(raw_longitude, "longitude")
    start_date = parse_date(raw_date)
    try:
        return SearchRequest(
            latitude=latitude,
            longitude=longitude,
            category=normalize_category(raw_category),
            start_date=start_date,
        )
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise InvalidSearchInput(
            FailureKind.INVALID_INPUT, f"out of range: {fields}"
        ) from None


def error_body(failure: SearchFailed) -> dict:
    """Format a failed search for callers, without the raw upstream body."""
    return {
        "error": USER_ERROR_MESSAGE,
        "details": {
            "kind": failure.kind.value,
            "message": failure.detail,
            "status_code": failure.status_code,
            "upstream_message": failure.upstream_message,
        },
    }


async def search_events(
    raw_latitude: Any,
    raw_longitude: Any,
    raw_category: str | None = None,
    raw_date: str | None = None,
    *,
    client: EventbriteClient | None = None,
) -> SearchResult:
    """
    Search for events near a location.

    Args:
        raw_latitude: Latitude as received from the caller
        raw_longitude: Longitude as received from the caller
        raw_category: Optional free-text filter
        raw_date: Optional start date, YYYY-MM-DD
        client: Eventbrite client; defaults to the process-wide one

    Returns:
        The client's SearchOk/SearchFailed unchanged, or SearchFailed for
        invalid input
    """
    try:
        request = build_request(raw_latitude, raw_longitude, raw_category, raw_date)
    except InvalidSearchInput as e:
        logger.info("Rejected search input: %s (%s)", e, e.kind.value)
        return SearchFailed(kind=e.kind, detail=str(e))

    if client is None:
        client = get_eventbrite_client()
    return await client.fetch_upstream(request)
