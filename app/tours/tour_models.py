from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime, timezone
from enum import Enum


class TourPrivacy(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    TEAM = "team"


class TourStatus(str, Enum):
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ParticipantStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    DECLINED = "declined"


def _naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is not None and v.tzinfo is not None:
        v = v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


class TourCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    destination: str
    departure_location: str = ""
    banner_url: str = ""
    description: str = ""
    start_date: datetime
    end_date: datetime
    budget: float = Field(0, ge=0)
    privacy: TourPrivacy = TourPrivacy.PUBLIC
    team_id: Optional[str] = None

    @validator("start_date", "end_date")
    def dates_as_naive_utc(cls, v):
        return _naive_utc(v)

    @validator("end_date")
    def ends_after_start(cls, v, values):
        start = values.get("start_date")
        if start and v < start:
            raise ValueError("End date must be after start date")
        return v


class TourUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    destination: Optional[str] = None
    departure_location: Optional[str] = None
    banner_url: Optional[str] = None
    description: Optional[str] = None
    budget: Optional[float] = Field(None, ge=0)
    status: Optional[TourStatus] = None
    reslug: bool = False
