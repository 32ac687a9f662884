from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import (
    find_by_slug_or_id, insert_with_unique_slug, serialize_many, serialize_mongo,
    to_object_id, update_with_reslug,
)
from app.core.dependencies import get_db, get_current_user_id, page_params, pagination
from app.tours.tour_models import ParticipantStatus, TourCreate, TourStatus, TourUpdate
from app.users.user_service import toggle_bookmark

router = APIRouter(tags=["Tours"])


async def get_tour_or_404(db: AsyncIOMotorDatabase, slug: str) -> dict:
    tour = await find_by_slug_or_id(db.tours, slug)
    if not tour:
        raise HTTPException(status_code=404, detail="Tour not found")
    return tour


@router.get("")
async def list_tours(
    status: TourStatus = None,
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    query = {"privacy": "public"}
    if status:
        query["status"] = status.value

    cursor = db.tours.find(query).sort("start_date", 1).skip(paging["skip"]).limit(paging["limit"])
    tours = await cursor.to_list(length=paging["limit"])
    total = await db.tours.count_documents(query)
    return {
        "tours": serialize_many(tours),
        "pagination": pagination(paging["page"], paging["limit"], total),
    }


@router.post("", status_code=201)
async def create_tour(
    payload: TourCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    now = datetime.utcnow()
    doc = payload.dict(exclude={"team_id"})
    doc.update({
        "privacy": payload.privacy.value,
        "team_id": to_object_id(payload.team_id),
        "organizer_id": user_id,
        "participants": [],
        "status": TourStatus.PLANNING.value,
        "created_at": now,
        "updated_at": now,
    })
    tour = await insert_with_unique_slug(db.tours, doc, payload.title)
    return {"success": True, "tour": serialize_mongo(tour)}


@router.get("/{slug}")
async def get_tour(slug: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    tour = await get_tour_or_404(db, slug)
    return serialize_mongo(tour)


@router.put("/{slug}")
async def update_tour(
    slug: str,
    payload: TourUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    tour = await get_tour_or_404(db, slug)
    if tour["organizer_id"] != user_id:
        raise HTTPException(status_code=403, detail="Only the organizer can edit this tour")

    updates = payload.dict(exclude_none=True, exclude={"reslug"})
    if payload.status:
        updates["status"] = payload.status.value

    updated = await update_with_reslug(
        db.tours, tour["_id"], updates, title=payload.title, reslug=payload.reslug
    )
    return {"success": True, "tour": serialize_mongo(updated)}


@router.post("/{slug}/join")
async def join_tour(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Request a seat; the organizer confirms later"""
    tour = await get_tour_or_404(db, slug)

    if tour["organizer_id"] == user_id:
        raise HTTPException(status_code=400, detail="Organizer is already part of the tour")
    if tour.get("status") in (TourStatus.COMPLETED.value, TourStatus.CANCELLED.value):
        raise HTTPException(status_code=400, detail="Tour is no longer accepting participants")

    participant = {
        "user_id": user_id,
        "status": ParticipantStatus.PENDING.value,
        "joined_at": datetime.utcnow(),
    }
    result = await db.tours.update_one(
        {"_id": tour["_id"], "participants.user_id": {"$ne": user_id}},
        {"$push": {"participants": participant}},
    )
    if result.modified_count == 0:
        raise HTTPException(status_code=400, detail="Already joined this tour")

    return {"success": True, "status": ParticipantStatus.PENDING.value}


@router.post("/{slug}/bookmark")
async def toggle_tour_bookmark(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    tour = await get_tour_or_404(db, slug)
    return await toggle_bookmark(db, user_id, "saved_tours", tour["_id"])
