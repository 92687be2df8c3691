"""API data models for the Local Event Finder."""

from .events import (
    EventSummary,
    FailureKind,
    SearchFailed,
    SearchOk,
    SearchRequest,
    SearchResult,
)

__all__ = [
    "EventSummary",
    "FailureKind",
    "SearchFailed",
    "SearchOk",
    "SearchRequest",
    "SearchResult",
]
