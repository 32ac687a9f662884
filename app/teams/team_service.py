"""
Team membership
Every membership change is a single conditional update_one, so two
requests for the same user can never both succeed
"""

import logging
from datetime import datetime

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import insert_with_unique_slug
from app.teams.team_models import JoinRequestAction, MemberRole, TeamPrivacy

logger = logging.getLogger(__name__)


def _member(user_id: str, role: MemberRole = MemberRole.MEMBER) -> dict:
    return {"user_id": user_id, "role": role.value, "joined_at": datetime.utcnow()}


def _not_involved(user_id: str) -> dict:
    return {
        "members.user_id": {"$ne": user_id},
        "join_requests.user_id": {"$ne": user_id},
    }


async def create_team(db: AsyncIOMotorDatabase, team_data: dict, leader_id: str) -> dict:
    now = datetime.utcnow()
    team = {
        **team_data,
        "leader_id": leader_id,
        "members": [_member(leader_id, MemberRole.LEADER)],
        "join_requests": [],
        "created_at": now,
        "updated_at": now,
    }
    return await insert_with_unique_slug(db.teams, team, team_data["name"])


async def join_team(db: AsyncIOMotorDatabase, team: dict, user_id: str) -> dict:
    """
    Public teams: join immediately. Private teams: file a join request.
    """
    if team["privacy"] == TeamPrivacy.PUBLIC.value:
        update = {"$push": {"members": _member(user_id)}}
    else:
        update = {"$push": {"join_requests": {"user_id": user_id, "requested_at": datetime.utcnow()}}}

    result = await db.teams.update_one({"_id": team["_id"], **_not_involved(user_id)}, update)

    if result.matched_count == 0:
        current = await db.teams.find_one({"_id": team["_id"]})
        if not current:
            raise HTTPException(status_code=404, detail="Team not found")
        if any(m["user_id"] == user_id for m in current.get("members", [])):
            raise HTTPException(status_code=400, detail="Already a member of this team")
        raise HTTPException(status_code=400, detail="Join request already pending")

    if team["privacy"] == TeamPrivacy.PUBLIC.value:
        return {"message": "Joined team successfully", "joined": True}
    return {"message": "Join request sent", "requested": True}


async def leave_team(db: AsyncIOMotorDatabase, team: dict, user_id: str) -> dict:
    if team.get("leader_id") == user_id:
        raise HTTPException(status_code=400, detail="Team leader cannot leave the team")

    result = await db.teams.update_one(
        {"_id": team["_id"], "members.user_id": user_id, "leader_id": {"$ne": user_id}},
        {"$pull": {"members": {"user_id": user_id}}},
    )
    if result.modified_count == 0:
        raise HTTPException(status_code=400, detail="Not a member of this team")

    return {"message": "Left team successfully"}


async def decide_join_request(
    db: AsyncIOMotorDatabase,
    team: dict,
    leader_id: str,
    user_id: str,
    action: JoinRequestAction,
) -> dict:
    if team.get("leader_id") != leader_id:
        raise HTTPException(status_code=403, detail="Only team leaders can approve join requests")

    pending = {"_id": team["_id"], "leader_id": leader_id, "join_requests.user_id": user_id}
    pull_request = {"join_requests": {"user_id": user_id}}

    if action == JoinRequestAction.APPROVE:
        result = await db.teams.update_one(
            {**pending, "members.user_id": {"$ne": user_id}},
            {"$pull": pull_request, "$push": {"members": _member(user_id)}},
        )
        message = "Join request approved"
    else:
        result = await db.teams.update_one(pending, {"$pull": pull_request})
        message = "Join request rejected"

    if result.modified_count == 0:
        raise HTTPException(status_code=404, detail="Join request not found")

    logger.info("Team %s: %s for user %s", team.get("slug"), message.lower(), user_id)
    return {"message": message, "success": True}
