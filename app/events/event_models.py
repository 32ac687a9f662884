from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime, timezone
from enum import Enum


class EventMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EventRole(str, Enum):
    HOST = "host"
    ANCHOR = "anchor"
    SUMMARIZER = "summarizer"
    OPENER = "opener"
    CLOSER = "closer"
    LECTURER = "lecturer"
    LISTENER = "listener"


# roles held by exactly one user
SINGLE_ROLES = {EventRole.HOST, EventRole.ANCHOR, EventRole.SUMMARIZER, EventRole.OPENER, EventRole.CLOSER}

MAX_LECTURERS = 5


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: str = Field(..., min_length=1)
    mode: EventMode
    start_time: datetime
    end_time: datetime
    location: str = ""
    meeting_link: str = ""

    @validator("start_time", "end_time")
    def as_naive_utc(cls, v):
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @validator("end_time")
    def ends_after_start(cls, v, values):
        start = values.get("start_time")
        if start and v <= start:
            raise ValueError("End time must be after start time")
        return v


class EventJoin(BaseModel):
    role: EventRole
    topic: Optional[str] = None
    duration: int = Field(2, ge=1, le=60)  # minutes

    @validator("topic", always=True)
    def lecturers_need_topic(cls, v, values):
        if values.get("role") == EventRole.LECTURER and not (v and v.strip()):
            raise ValueError("Topic is required for lecturers")
        return v
