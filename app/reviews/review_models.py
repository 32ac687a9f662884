from pydantic import BaseModel, Field
from typing import Optional


class ReviewCreate(BaseModel):
    book_title: str
    book_id: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., max_length=70)
    content: str = Field(..., min_length=1)
    video_url: Optional[str] = None
    image: Optional[str] = None
