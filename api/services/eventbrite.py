"""
Eventbrite API client for nearby event search.

Translates a normalized SearchRequest into the query parameters of the
Eventbrite events-search endpoint, issues exactly one GET, and maps the
response into EventSummary records.

Every failure (transport, non-2xx status, unexpected payload) is returned as
a SearchFailed result; nothing raised by the upstream call escapes
fetch_upstream. There is no retry and no caching: each call is
one outbound request.
"""

import logging
import math
import time
from decimal import Decimal
from typing import Any

import httpx

from api.config import Settings, get_settings
from api.models import (
    EventSummary,
    FailureKind,
    SearchFailed,
    SearchOk,
    SearchRequest,
    SearchResult,
)

logger = logging.getLogger(__name__)

# Upstream error summaries are cut to this length before reaching callers
MAX_UPSTREAM_MESSAGE = 200


class PayloadError(ValueError):
    """Raised while mapping a 2xx body that does not have the expected shape."""


def format_coordinate(value: float) -> str:
    """Plain decimal text for a coordinate; str() would give 1e-05."""
    return format(Decimal(repr(value)), "f")


def build_params(request: SearchRequest) -> dict[str, Any]:
    """Build the Eventbrite query parameters for a search (credential excluded)."""
    params: dict[str, Any] = {
        "location.latitude": format_coordinate(request.latitude),
        "location.longitude": format_coordinate(request.longitude),
        "expand": "venue",
    }
    if request.category:
        params["q"] = request.category
    if request.start_date is not None:
        params["start_date.range_start"] = request.range_start
    return params


def _parse_coordinate(value: Any) -> float | None:
    """Parse a venue coordinate; Eventbrite sends them as strings."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_event(data: Any) -> EventSummary:
    """Map one upstream event record into an EventSummary."""
    if not isinstance(data, dict):
        raise PayloadError("event entry is not an object")

    event_id = data.get("id")
    if isinstance(event_id, bool) or not isinstance(event_id, (str, int)):
        raise PayloadError("event has no id")

    name = data.get("name")
    title = name.get("text") if isinstance(name, dict) else None
    if not isinstance(title, str):
        raise PayloadError(f"event {event_id} has no name.text")

    start = data.get("start")
    start_local = start.get("local") if isinstance(start, dict) else None
    if not isinstance(start_local, str):
        raise PayloadError(f"event {event_id} has no start.local")

    # Zero venues is "no location marker", not an error
    venue_address = None
    venue_latitude = None
    venue_longitude = None
    venue = data.get("venue")
    if isinstance(venue, dict):
        address = venue.get("address")
        if isinstance(address, dict):
            display = address.get("localized_address_display")
            venue_address = display if isinstance(display, str) else None
        latitude = _parse_coordinate(venue.get("latitude"))
        longitude = _parse_coordinate(venue.get("longitude"))
        if latitude is not None and longitude is not None:
            venue_latitude, venue_longitude = latitude, longitude

    logo_url = None
    logo = data.get("logo")
    if isinstance(logo, dict) and isinstance(logo.get("url"), str):
        logo_url = logo["url"]

    url = data.get("url")

    return EventSummary(
        id=str(event_id),
        title=title,
        start_local=start_local,
        venue_address=venue_address,
        venue_latitude=venue_latitude,
        venue_longitude=venue_longitude,
        logo_url=logo_url,
        url=url if isinstance(url, str) else None,
    )


def parse_events(payload: Any) -> list[EventSummary]:
    """Map the upstream response body into EventSummary records, in order."""
    if not isinstance(payload, dict):
        raise PayloadError("response body is not an object")
    events = payload.get("events")
    if not isinstance(events, list):
        raise PayloadError("response body has no 'events' list")
    return [parse_event(item) for item in events]


def _upstream_message(response: httpx.Response) -> str | None:
    """Summarize an Eventbrite error body without relaying it wholesale."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or None
    if isinstance(body, dict):
        message = body.get("error_description") or body.get("error")
        if isinstance(message, str) and message:
            return message[:MAX_UPSTREAM_MESSAGE]
    return response.reason_phrase or None


class EventbriteClient:
    """Async client for the Eventbrite events-search endpoint.

    The credential comes from the Settings passed in; the client never reads
    the environment itself. An httpx.AsyncClient may be injected, otherwise a
    short-lived one is opened per search so concurrent searches share nothing.
    """

    SEARCH_PATH = "/events/search/"

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings
        self._http_client = http_client

    @property
    def search_url(self) -> str:
        return self.settings.eventbrite_base_url.rstrip("/") + self.SEARCH_PATH

    async def close(self) -> None:
        """Close the injected HTTP client, if any."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _redact(self, text: str) -> str:
        token = self.settings.eventbrite_api_key
        return text.replace(token, "***") if token else text

    def _auth(self, params: dict[str, Any]) -> dict[str, str]:
        """Attach the credential to params or headers; returns the headers."""
        headers = {"Accept": "application/json"}
        token = self.settings.eventbrite_api_key
        if self.settings.eventbrite_auth_mode == "query":
            params["token"] = token
        else:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get(
        self, params: dict[str, Any], headers: dict[str, str]
    ) -> httpx.Response:
        timeout = self.settings.request_timeout
        if self._http_client is not None:
            return await self._http_client.get(
                self.search_url, params=params, headers=headers, timeout=timeout
            )
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.get(self.search_url, params=params, headers=headers)

    async def fetch_upstream(self, request: SearchRequest) -> SearchResult:
        """
        Search Eventbrite for events near the requested coordinates.

        Args:
            request: Validated search request

        Returns:
            SearchOk with events in upstream order, or SearchFailed
        """
        if not self.settings.eventbrite_api_key:
            logger.warning("Eventbrite API: No API key configured")
            return SearchFailed(
                kind=FailureKind.UPSTREAM_REJECTED,
                detail="Eventbrite API key is not configured",
            )

        params = build_params(request)
        headers = self._auth(params)

        logger.debug(
            "📤 [Eventbrite] Outbound Query | lat=%s lon=%s q=%s range_start=%s",
            request.latitude,
            request.longitude,
            request.category,
            request.range_start,
        )
        start_time = time.perf_counter()

        try:
            response = await self._get(params, headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            elapsed = time.perf_counter() - start_time
            detail = self._redact(f"{type(e).__name__}: {e}")
            logger.warning(
                "Eventbrite API unreachable: %s (duration=%.2fs)", detail, elapsed
            )
            return SearchFailed(kind=FailureKind.UPSTREAM_UNAVAILABLE, detail=detail)

        elapsed = time.perf_counter() - start_time

        if not response.is_success:
            message = _upstream_message(response)
            logger.warning(
                "Eventbrite API rejected search: status=%d message=%s (duration=%.2fs)",
                response.status_code,
                self._redact(message) if message else None,
                elapsed,
            )
            return SearchFailed(
                kind=FailureKind.UPSTREAM_REJECTED,
                detail=f"Eventbrite returned HTTP {response.status_code}",
                status_code=response.status_code,
                upstream_message=self._redact(message) if message else None,
            )

        try:
            events = parse_events(response.json())
        except ValueError as e:
            # PayloadError and JSON decode errors are both ValueErrors
            logger.warning("Eventbrite API returned an unexpected payload: %s", e)
            return SearchFailed(
                kind=FailureKind.MALFORMED_UPSTREAM_PAYLOAD,
                detail=f"Unexpected Eventbrite response: {str(e)[:MAX_UPSTREAM_MESSAGE]}",
                status_code=response.status_code,
            )

        if events:
            logger.debug(
                "✅ [Eventbrite] Complete | events=%d duration=%.2fs",
                len(events),
                elapsed,
            )
        else:
            logger.debug("📭 [Eventbrite] No events found | duration=%.2fs", elapsed)
        return SearchOk(events=events)


# Singleton instance
_client: EventbriteClient | None = None


def get_eventbrite_client() -> EventbriteClient:
    """Get the singleton Eventbrite client, built from process settings."""
    global _client
    if _client is None:
        _client = EventbriteClient(get_settings())
    return _client
