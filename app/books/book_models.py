from pydantic import BaseModel, Field, validator
from typing import List, Optional


class BookCreate(BaseModel):
    title: str = Field(..., max_length=200)
    author: Optional[str] = Field(None, max_length=120)
    publisher: str = ""
    isbn: Optional[str] = None
    category: List[str] = []
    cover_image: str = ""

    @validator("title")
    def title_required(cls, v):
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()

    @validator("author")
    def blank_author_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v
