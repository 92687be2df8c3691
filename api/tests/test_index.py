"""Tests for FastAPI endpoints."""

import httpx
import pytest
from fastapi.testclient import TestClient

from api.config import Settings
from api.index import app
from api.models import FailureKind, SearchFailed
from api.services.eventbrite import EventbriteClient, get_eventbrite_client
from api.services.search import error_body

TOKEN = "very-secret-token"

EVENT = {
    "id": "42",
    "name": {"text": "Tech Meetup"},
    "start": {"local": "2024-03-15T18:30:00"},
    "logo": {"url": "https://img.evbuc.com/42.png"},
    "venue": {
        "latitude": "40.7",
        "longitude": "-74.0",
        "address": {"localized_address_display": "2 Broadway, New York, NY"},
    },
}


@pytest.fixture
def upstream_requests():
    return []


@pytest.fixture
def upstream_response():
    """Response the mocked Eventbrite endpoint will send; tests may replace it."""
    return {"status": 200, "json": {"events": [EVENT]}}


@pytest.fixture
def client(upstream_requests, upstream_response):
    """Create test client with Eventbrite mocked out."""

    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(request)
        return httpx.Response(upstream_response["status"], json=upstream_response["json"])

    eventbrite = EventbriteClient(
        Settings(_env_file=None, eventbrite_api_key=TOKEN),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    app.dependency_overrides[get_eventbrite_client] = lambda: eventbrite
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_returns_healthy(self, client):
        """Health endpoint should return healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_reports_upstream_configuration(self, client, monkeypatch):
        """Health endpoint reports whether the credential is set, not its value."""
        monkeypatch.setenv("EVENTBRITE_API_KEY", TOKEN)
        response = client.get("/health")
        assert response.json()["upstream_configured"] is True
        assert TOKEN not in response.text


class TestRootEndpoint:
    """Test root endpoint."""

    def test_root_returns_ok(self, client):
        """Root endpoint should return ok status."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestEventsEndpoint:
    """Test the /events search endpoint."""

    def test_success_shape(self, client):
        """A successful search returns camelCase event summaries."""
        response = client.get("/events", params={"latitude": "40.7", "longitude": "-74.0"})
        assert response.status_code == 200
        assert response.json() == {
            "events": [
                {
                    "id": "42",
                    "title": "Tech Meetup",
                    "startLocal": "2024-03-15T18:30:00",
                    "venueAddress": "2 Broadway, New York, NY",
                    "venueLatitude": 40.7,
                    "venueLongitude": -74.0,
                    "logoUrl": "https://img.evbuc.com/42.png",
                    "url": None,
                }
            ]
        }

    def test_logs_mappable_event_count(self, client, upstream_response, caplog):
        """The completion log counts events that can be placed on the map."""
        unplaced = {**EVENT, "id": "43", "venue": None}
        upstream_response["json"] = {"events": [EVENT, unplaced]}

        with caplog.at_level("DEBUG", logger="api.index"):
            client.get("/events", params={"latitude": "40.7", "longitude": "-74.0"})

        assert "events=2 mappable=1" in caplog.text

    def test_filters_are_forwarded(self, client, upstream_requests):
        """q and date are forwarded as Eventbrite parameters."""
        client.get(
            "/events",
            params={"latitude": "40.7", "longitude": "-74.0", "q": "music", "date": "2024-03-15"},
        )
        assert len(upstream_requests) == 1
        params = upstream_requests[0].url.params
        assert params["q"] == "music"
        assert params["start_date.range_start"] == "2024-03-15T00:00:00.000Z"
        assert params["expand"] == "venue"

    def test_empty_filters_are_dropped(self, client, upstream_requests):
        """Empty q and date query parameters are treated as absent."""
        client.get("/events", params={"latitude": "1", "longitude": "2", "q": "", "date": ""})
        params = upstream_requests[0].url.params
        assert "q" not in params
        assert "start_date.range_start" not in params

    def test_invalid_date(self, client, upstream_requests):
        """An invalid date is reported as a 500 error and never sent upstream."""
        response = client.get(
            "/events", params={"latitude": "1", "longitude": "2", "date": "not-a-date"}
        )
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to fetch events"
        assert body["details"]["kind"] == "invalid_date"
        assert upstream_requests == []

    def test_missing_coordinates(self, client, upstream_requests):
        """Missing coordinates are rejected locally."""
        response = client.get("/events")
        assert response.status_code == 500
        assert response.json()["details"]["kind"] == "invalid_input"
        assert upstream_requests == []

    def test_upstream_rejection(self, client, upstream_response):
        """An upstream 401 becomes a 500 with a status/message summary."""
        upstream_response["status"] = 401
        upstream_response["json"] = {
            "status_code": 401,
            "error": "INVALID_AUTH",
            "error_description": "The OAuth token you provided was invalid.",
        }

        response = client.get("/events", params={"latitude": "1", "longitude": "2"})

        assert response.status_code == 500
        details = response.json()["details"]
        assert details["kind"] == "upstream_rejected"
        assert details["status_code"] == 401
        assert details["upstream_message"] == "The OAuth token you provided was invalid."
        assert "events" not in response.json()
        assert TOKEN not in response.text

    def test_cors_allows_any_origin_by_default(self, client):
        """The default CORS policy allows any origin."""
        response = client.get(
            "/events",
            params={"latitude": "1", "longitude": "2"},
            headers={"Origin": "http://localhost:8081"},
        )
        assert response.headers["access-control-allow-origin"] == "*"


class TestErrorBody:
    """Test error_body helper."""

    def test_error_body(self):
        """Failures map onto the error/details shape."""
        failure = SearchFailed(
            kind=FailureKind.UPSTREAM_UNAVAILABLE,
            detail="ConnectTimeout: timed out",
        )
        assert error_body(failure) == {
            "error": "Failed to fetch events",
            "details": {
                "kind": "upstream_unavailable",
                "message": "ConnectTimeout: timed out",
                "status_code": None,
                "upstream_message": None,
            },
        }
