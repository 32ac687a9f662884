from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime, timezone
from enum import Enum

# ==================== ENUMS ====================

class CourseMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"

# ==================== COURSE MODELS ====================

class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str
    banner: str
    fee: float = Field(..., ge=0)
    last_date_registration: datetime
    class_start_date: datetime
    mode: CourseMode
    total_classes: int = Field(..., ge=1)

    @validator("last_date_registration", "class_start_date")
    def as_naive_utc(cls, v):
        # Mongo hands back naive UTC datetimes
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @validator("class_start_date")
    def starts_after_registration(cls, v, values):
        deadline = values.get("last_date_registration")
        if deadline and v < deadline:
            raise ValueError("Classes cannot start before registration closes")
        return v
