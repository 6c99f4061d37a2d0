from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventCreate(BaseModel):
    name: str
    description: Optional[str] = None
    date: Optional[datetime] = None


class UserCreate(BaseModel):
    name: str
    bio: Optional[str] = None


class MessageCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional so a missing field gets the same 400 as an empty one.
    event_id: Optional[str] = Field(None, alias="eventId")
    user_id: Optional[str] = Field(None, alias="userId")
    text: Optional[str] = None


class EventItem(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    date: Optional[datetime] = None


class UserItem(BaseModel):
    id: str
    name: str
    bio: Optional[str] = None
    events: List[str] = []


class SenderItem(BaseModel):
    id: str
    name: str


class MessageItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: str
    sender: SenderItem
    event: str
    created_at: datetime = Field(alias="createdAt")


class HealthResponse(BaseModel):
    status: str
    service: str
