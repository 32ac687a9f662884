from pydantic import BaseModel, Field
from enum import Enum


class TeamType(str, Enum):
    UNIVERSITY = "University"
    THANA = "Thana"
    SPECIAL = "Special"


class TeamPrivacy(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class MemberRole(str, Enum):
    LEADER = "leader"
    DEPUTY = "deputy"
    MEMBER = "member"


class JoinRequestAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    type: TeamType
    privacy: TeamPrivacy = TeamPrivacy.PUBLIC
    university: str = ""
    location: str = ""
    category: str = "General"
    cover_image: str = ""
    logo: str = ""


class JoinRequestDecision(BaseModel):
    action: JoinRequestAction

