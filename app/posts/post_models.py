from pydantic import BaseModel, Field, validator
from typing import List, Optional
from enum import Enum


class PostType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    LINK = "link"


class PostPrivacy(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class PostCreate(BaseModel):
    title: str = Field(..., max_length=200)
    content: str
    type: PostType = PostType.TEXT
    privacy: PostPrivacy = PostPrivacy.PUBLIC
    media: List[str] = []

    @validator("content")
    def content_required(cls, v):
        if not v.strip():
            raise ValueError("Content is required")
        return v


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = None
    privacy: Optional[PostPrivacy] = None
    media: Optional[List[str]] = None
    reslug: bool = False


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
