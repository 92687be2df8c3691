"""API endpoints for the Local Event Finder proxy."""

import logging

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.config import configure_logging, get_settings
from api.models import EventSummary, SearchFailed
from api.services.eventbrite import EventbriteClient, get_eventbrite_client
from api.services.search import error_body, search_events

load_dotenv()

# Configure logging from settings (uses LOG_LEVEL env var)
configure_logging()
logger = logging.getLogger(__name__)


class EventsResponse(BaseModel):
    """Response body for a successful search."""

    events: list[EventSummary]


app = FastAPI(
    title="Local Event Finder API",
    description="Nearby event search backed by Eventbrite",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    """Root endpoint."""
    return {"status": "ok"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "upstream_configured": get_settings().has_event_source,
    }


@app.get(
    "/events",
    response_model=EventsResponse,
    responses={500: {"description": "Search failed"}},
)
async def events(
    latitude: str | None = None,
    longitude: str | None = None,
    q: str | None = None,
    date: str | None = None,
    client: EventbriteClient = Depends(get_eventbrite_client),
):
    """Search for events near a location.

    Parameters arrive as raw strings; validation happens in search_events so
    that bad input is reported the same way as upstream failures.
    """
    result = await search_events(latitude, longitude, q, date, client=client)

    if isinstance(result, SearchFailed):
        logger.info(
            "Search failed | kind=%s status=%s",
            result.kind.value,
            result.status_code,
        )
        return JSONResponse(status_code=500, content=error_body(result))

    logger.debug(
        "Search complete | events=%d mappable=%d",
        len(result.events),
        sum(1 for event in result.events if event.has_location),
    )
    return EventsResponse(events=result.events)
