import os
import uuid
from datetime import datetime, timezone

from dotenv import load_dotenv
from sqlalchemy import create_engine, Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import sessionmaker, declarative_base, relationship

from dancewithme.log import get_logger

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///dancewithme.db")

logger = get_logger("api.database")

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp; every datetime column stores UTC without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Populated nowhere in the current flows, kept so users can reference events.
# Keyed by position so the list keeps its order and may repeat an event.
user_events = Table(
    "user_events",
    Base.metadata,
    Column("user_id", String, ForeignKey("users.id"), primary_key=True),
    Column("position", Integer, primary_key=True),
    Column("event_id", String, ForeignKey("events.id"), nullable=False),
)


class Event(Base):
    __tablename__ = "events"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, nullable=False)
    bio = Column(Text, nullable=True)

    events = relationship(
        "Event",
        secondary=user_events,
        order_by=user_events.c.position,
        lazy="selectin",
        viewonly=True,
    )


class Message(Base):
    __tablename__ = "messages"

    # Insertion sequence, breaks created_at ties in posted order.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False, default=new_id)
    text = Column(Text, nullable=False)
    sender_id = Column(String, ForeignKey("users.id"), nullable=False)
    event_id = Column(String, ForeignKey("events.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    sender = relationship("User", lazy="joined")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session():
    """Returns a direct session for non-request contexts like init_db and tests."""
    return SessionLocal()


def init_db():
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized (%s)", engine.url.render_as_string(hide_password=True))
