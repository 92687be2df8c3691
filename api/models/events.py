"""Event search models: the normalized request, event summaries, and results."""

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SearchRequest(BaseModel):
    """A validated, normalized event search."""

    latitude: float = Field(ge=-90, le=90, description="Search center latitude")
    longitude: float = Field(ge=-180, le=180, description="Search center longitude")
    category: str | None = Field(
        default=None, description="Free-text filter (e.g., 'music', 'tech')"
    )
    start_date: date | None = Field(
        default=None, description="Only events starting on or after this day"
    )

    @property
    def range_start(self) -> str | None:
        """UTC midnight of ``start_date`` as an ISO-8601 instant."""
        if self.start_date is None:
            return None
        return f"{self.start_date.isoformat()}T00:00:00.000Z"


class EventSummary(BaseModel):
    """UI-facing projection of one upstream event."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    start_local: str = Field(description="Event-local start time, as sent upstream")
    venue_address: str | None = None
    venue_latitude: float | None = None
    venue_longitude: float | None = None
    logo_url: str | None = None
    url: str | None = None

    @property
    def has_location(self) -> bool:
        """Whether the event can be placed on a map."""
        return self.venue_latitude is not None and self.venue_longitude is not None


class FailureKind(str, Enum):
    """Why a search produced no events."""

    INVALID_INPUT = "invalid_input"
    INVALID_DATE = "invalid_date"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_REJECTED = "upstream_rejected"
    MALFORMED_UPSTREAM_PAYLOAD = "malformed_upstream_payload"


class SearchOk(BaseModel):
    """Successful search, events in upstream order."""

    ok: Literal[True] = True
    events: list[EventSummary] = Field(default_factory=list)


class SearchFailed(BaseModel):
    """Failed search. Never carries a partial event list."""

    ok: Literal[False] = False
    kind: FailureKind
    detail: str
    status_code: int | None = Field(
        default=None, description="Upstream HTTP status, when one was received"
    )
    upstream_message: str | None = Field(
        default=None, description="Short upstream error summary, when available"
    )


SearchResult = SearchOk | SearchFailed
