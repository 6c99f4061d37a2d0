import os

from dotenv import load_dotenv

load_dotenv()

UNKNOWN_EVENT_MESSAGES = os.getenv("UNKNOWN_EVENT_MESSAGES", "empty")
EVENTS_UNDATED_POSITION = os.getenv("EVENTS_UNDATED_POSITION", "last")


def unknown_event_policy() -> str:
    """What GET /messages/{eventId} does for an unknown event: "empty" or "not_found"."""
    if UNKNOWN_EVENT_MESSAGES.strip().lower() == "not_found":
        return "not_found"
    return "empty"


def undated_position() -> str:
    """Where events without a date sort in GET /events: "last" or "first"."""
    if EVENTS_UNDATED_POSITION.strip().lower() == "first":
        return "first"
    return "last"
