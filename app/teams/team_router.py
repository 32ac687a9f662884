from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import find_by_slug_or_id, serialize_many, serialize_mongo
from app.core.dependencies import get_db, get_current_user_id, page_params, pagination
from app.teams.team_models import JoinRequestDecision, TeamCreate, TeamType
from app.teams.team_service import create_team, decide_join_request, join_team, leave_team

router = APIRouter(tags=["Teams"])


async def get_team_or_404(db: AsyncIOMotorDatabase, slug: str) -> dict:
    team = await find_by_slug_or_id(db.teams, slug)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


@router.get("")
async def list_teams(
    type: TeamType = None,
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    query = {"type": type.value} if type else {}
    cursor = db.teams.find(query, projection={"join_requests": 0}) \
        .sort("created_at", -1).skip(paging["skip"]).limit(paging["limit"])
    teams = await cursor.to_list(length=paging["limit"])
    total = await db.teams.count_documents(query)

    return {
        "teams": serialize_many(teams),
        "pagination": pagination(paging["page"], paging["limit"], total),
    }


@router.post("", status_code=201)
async def create_team_endpoint(
    payload: TeamCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    data = payload.dict()
    data["type"] = payload.type.value
    data["privacy"] = payload.privacy.value

    team = await create_team(db, data, user_id)
    return {"success": True, "team": serialize_mongo(team)}


@router.get("/{slug}")
async def get_team(slug: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    team = await get_team_or_404(db, slug)
    team.pop("join_requests", None)
    return serialize_mongo(team)


@router.post("/{slug}/join")
async def join_team_endpoint(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    team = await get_team_or_404(db, slug)
    return await join_team(db, team, user_id)


@router.post("/{slug}/leave")
async def leave_team_endpoint(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    team = await get_team_or_404(db, slug)
    return await leave_team(db, team, user_id)


@router.put("/{slug}/requests/{member_id}")
async def decide_request_endpoint(
    slug: str,
    member_id: str,
    decision: JoinRequestDecision,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Leader approves or rejects a pending join request"""
    team = await get_team_or_404(db, slug)
    return await decide_join_request(db, team, user_id, member_id, decision.action)
