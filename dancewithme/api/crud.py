"""
Query helpers for the three collections.

Every helper takes a request-scoped Session, raises the HTTP-mapped errors
from ``exceptions`` and returns plain dicts shaped like the response models.
Store failures are rolled back, logged with their traceback and surfaced as
UnavailableError with a generic message.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dancewithme.api.database import Event, Message, User
from dancewithme.api.exceptions import NotFoundError, UnavailableError, ValidationError
from dancewithme.log import get_logger

logger = get_logger("api.crud")


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _to_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def _fail(db: Session, message: str) -> UnavailableError:
    db.rollback()
    logger.exception(message)
    return UnavailableError(message)


# ── Serializers ───────────────────────────────────────────────────────────────

def event_to_dict(event: Event) -> dict:
    return {
        "id": event.id,
        "name": event.name,
        "description": event.description,
        "date": _as_utc(event.date),
    }


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "bio": user.bio,
        "events": [e.id for e in user.events],
    }


def message_to_dict(message: Message) -> dict:
    return {
        "id": message.id,
        "text": message.text,
        "sender": {"id": message.sender.id, "name": message.sender.name},
        "event": message.event_id,
        "createdAt": _as_utc(message.created_at),
    }


# ── Events ────────────────────────────────────────────────────────────────────

def list_events(db: Session, undated: str = "last") -> list:
    # False sorts before True, so this key decides which side undated events land on.
    if undated == "first":
        dated_key = Event.date.is_not(None)
    else:
        dated_key = Event.date.is_(None)

    try:
        rows = (
            db.query(Event)
            .order_by(dated_key, Event.date.desc(), Event.created_at.desc())
            .all()
        )
    except SQLAlchemyError:
        raise _fail(db, "Failed to fetch events")
    return [event_to_dict(row) for row in rows]


def create_event(
    db: Session,
    name: Optional[str],
    description: Optional[str] = None,
    date: Optional[datetime] = None,
) -> dict:
    if _blank(name):
        raise ValidationError("Event name is required")

    event = Event(name=name, description=description, date=_to_utc_naive(date))
    try:
        db.add(event)
        db.commit()
        db.refresh(event)
    except SQLAlchemyError:
        raise _fail(db, "Failed to create event")

    logger.debug("Created event %s (%s)", event.id, event.name)
    return event_to_dict(event)


# ── Users ─────────────────────────────────────────────────────────────────────

def list_users(db: Session) -> list:
    try:
        rows = db.query(User).all()
    except SQLAlchemyError:
        raise _fail(db, "Failed to fetch users")
    return [user_to_dict(row) for row in rows]


def create_user(db: Session, name: Optional[str], bio: Optional[str] = None) -> dict:
    if _blank(name):
        raise ValidationError("User name is required")

    user = User(name=name, bio=bio)
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError:
        raise _fail(db, "Failed to create user")

    logger.debug("Created user %s (%s)", user.id, user.name)
    return user_to_dict(user)


# ── Messages ──────────────────────────────────────────────────────────────────

def list_messages(db: Session, event_id: str, unknown_event: str = "empty") -> list:
    try:
        if unknown_event == "not_found" and db.get(Event, event_id) is None:
            raise NotFoundError("Event not found")
        rows = (
            db.query(Message)
            .filter(Message.event_id == event_id)
            .order_by(Message.created_at.asc(), Message.seq.asc())
            .all()
        )
    except SQLAlchemyError:
        raise _fail(db, "Failed to fetch messages")
    return [message_to_dict(row) for row in rows]


def post_message(
    db: Session,
    event_id: Optional[str],
    user_id: Optional[str],
    text: Optional[str],
) -> dict:
    if _blank(event_id) or _blank(user_id) or _blank(text):
        raise ValidationError("Missing eventId, userId or text")

    try:
        if db.get(Event, event_id) is None:
            raise ValidationError("Unknown eventId")
        if db.get(User, user_id) is None:
            raise ValidationError("Unknown userId")

        message = Message(text=text, sender_id=user_id, event_id=event_id)
        db.add(message)
        db.commit()
        db.refresh(message)
    except SQLAlchemyError:
        raise _fail(db, "Failed to create message")

    logger.debug("Message %s posted to event %s", message.id, event_id)
    return message_to_dict(message)
