from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import (
    find_by_slug_or_id, insert_with_unique_slug, serialize_many, serialize_mongo, to_object_id,
)
from app.core.dependencies import get_db, get_current_user_id, page_params, pagination
from app.core.toggles import toggle_set_member
from app.reviews.review_models import ReviewCreate
from app.users.user_service import toggle_bookmark

router = APIRouter(tags=["Reviews"])


async def get_review_or_404(db: AsyncIOMotorDatabase, slug: str) -> dict:
    review = await find_by_slug_or_id(db.reviews, slug)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.get("")
async def list_reviews(
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    cursor = db.reviews.find({}).sort("created_at", -1).skip(paging["skip"]).limit(paging["limit"])
    reviews = await cursor.to_list(length=paging["limit"])
    total = await db.reviews.count_documents({})
    return {
        "reviews": serialize_many(reviews),
        "pagination": pagination(paging["page"], paging["limit"], total),
    }


@router.post("", status_code=201)
async def create_review(
    payload: ReviewCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    now = datetime.utcnow()
    doc = {
        "book_title": payload.book_title,
        "book_id": to_object_id(payload.book_id),
        "user_id": user_id,
        "rating": payload.rating,
        "title": payload.title,
        "content": payload.content,
        "video_url": payload.video_url,
        "image": payload.image,
        "helpful_by": [],
        "created_at": now,
        "updated_at": now,
    }
    review = await insert_with_unique_slug(db.reviews, doc, payload.title)
    return {"review": serialize_mongo(review)}


@router.get("/{slug}")
async def get_review(slug: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    review = await get_review_or_404(db, slug)
    return serialize_mongo(review)


@router.post("/{slug}/bookmark")
async def toggle_review_bookmark(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    review = await get_review_or_404(db, slug)
    return await toggle_bookmark(db, user_id, "saved_reviews", review["_id"])


@router.post("/{slug}/helpful")
async def toggle_helpful(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Mark / unmark a review as helpful"""
    review = await get_review_or_404(db, slug)
    helpful = await toggle_set_member(db.reviews, {"_id": review["_id"]}, "helpful_by", user_id)

    review = await db.reviews.find_one({"_id": review["_id"]}, projection={"helpful_by": 1})
    return {"helpful": helpful, "helpful_count": len(review.get("helpful_by", []))}
