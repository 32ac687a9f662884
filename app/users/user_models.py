from pydantic import BaseModel, Field
from typing import Optional


class UserProfileUpsert(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)
    username: Optional[str] = None
    image: Optional[str] = None
    institution: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
