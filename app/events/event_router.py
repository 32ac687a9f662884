from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import find_by_slug_or_id, insert_with_unique_slug, serialize_many, serialize_mongo
from app.core.dependencies import get_db, get_current_user_id, page_params, pagination
from app.events.event_models import (
    MAX_LECTURERS, SINGLE_ROLES, EventCreate, EventJoin, EventRole, EventStatus,
)

router = APIRouter(tags=["Events"])


async def get_event_or_404(db: AsyncIOMotorDatabase, slug: str) -> dict:
    event = await find_by_slug_or_id(db.events, slug)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("")
async def list_events(
    status: EventStatus = None,
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    query = {"status": status.value} if status else {}
    cursor = db.events.find(query).sort("start_time", 1).skip(paging["skip"]).limit(paging["limit"])
    events = await cursor.to_list(length=paging["limit"])
    total = await db.events.count_documents(query)
    return {
        "events": serialize_many(events),
        "pagination": pagination(paging["page"], paging["limit"], total),
    }


@router.post("", status_code=201)
async def create_event(
    payload: EventCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    now = datetime.utcnow()
    doc = payload.dict()
    doc.update({
        "mode": payload.mode.value,
        "organizer_id": user_id,
        "status": EventStatus.UPCOMING.value,
        "roles": {"lecturers": []},
        "listeners": [],
        "created_at": now,
        "updated_at": now,
    })
    event = await insert_with_unique_slug(db.events, doc, payload.title)
    return {"success": True, "event": serialize_mongo(event)}


@router.get("/{slug}")
async def get_event(slug: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    event = await get_event_or_404(db, slug)
    return serialize_mongo(event)


def _role_update(payload: EventJoin, user_id: str):
    """Filter conditions and update for claiming `payload.role`"""
    now = datetime.utcnow()

    if payload.role == EventRole.LECTURER:
        conditions = {
            "roles.lecturers.user_id": {"$ne": user_id},
            # fewer than MAX_LECTURERS entries
            f"roles.lecturers.{MAX_LECTURERS - 1}": {"$exists": False},
        }
        update = {"$push": {"roles.lecturers": {
            "user_id": user_id,
            "topic": payload.topic,
            "duration": payload.duration,
            "assigned_at": now,
        }}}
    elif payload.role in SINGLE_ROLES:
        role = payload.role.value
        conditions = {f"roles.{role}.user_id": {"$exists": False}}
        update = {"$set": {f"roles.{role}": {"user_id": user_id, "assigned_at": now}}}
    else:
        conditions = {"listeners.user_id": {"$ne": user_id}}
        update = {"$push": {"listeners": {"user_id": user_id, "joined_at": now}}}

    return conditions, update


def _rejection_reason(event: dict, role: EventRole, user_id: str) -> str:
    roles = event.get("roles", {})
    if role == EventRole.LECTURER:
        lecturers = roles.get("lecturers", [])
        if any(l["user_id"] == user_id for l in lecturers):
            return "You are already registered as a lecturer"
        return f"Maximum {MAX_LECTURERS} lecturers allowed"
    if role == EventRole.LISTENER:
        return "You are already registered as a listener"
    return f"{role.value} role is already taken"


@router.post("/{slug}/join")
async def join_event(
    slug: str,
    payload: EventJoin,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Claim a role; each role's limits are enforced by the update filter"""
    event = await get_event_or_404(db, slug)
    if event.get("status") in (EventStatus.COMPLETED.value, EventStatus.CANCELLED.value):
        raise HTTPException(status_code=400, detail="Event is closed")

    conditions, update = _role_update(payload, user_id)
    result = await db.events.update_one({"_id": event["_id"], **conditions}, update)

    if result.modified_count == 0:
        current = await db.events.find_one({"_id": event["_id"]})
        if not current:
            raise HTTPException(status_code=404, detail="Event not found")
        raise HTTPException(status_code=400, detail=_rejection_reason(current, payload.role, user_id))

    return {"message": f"Successfully registered as {payload.role.value}", "success": True}
