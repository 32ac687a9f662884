"""
User profiles and bookmarks
Bookmarks are arrays of ObjectIds on the user document, one per kind
"""

from datetime import datetime
from typing import Dict, List

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import serialize_many
from app.core.toggles import toggle_set_member

# bookmark array on the user -> collection it points into
BOOKMARK_FIELDS: Dict[str, str] = {
    "saved_posts": "posts",
    "saved_reviews": "reviews",
    "saved_courses": "courses",
    "saved_tours": "tours",
}


async def ensure_user(db: AsyncIOMotorDatabase, user_id: str) -> None:
    """Create the user document on first use; identities come from the token"""
    await db.users.update_one(
        {"user_id": user_id},
        {"$setOnInsert": {"created_at": datetime.utcnow(), **{field: [] for field in BOOKMARK_FIELDS}}},
        upsert=True,
    )


async def upsert_profile(db: AsyncIOMotorDatabase, user_id: str, profile: dict) -> dict:
    now = datetime.utcnow()
    await db.users.update_one(
        {"user_id": user_id},
        {
            "$set": {**profile, "updated_at": now},
            "$setOnInsert": {
                "created_at": now,
                **{field: [] for field in BOOKMARK_FIELDS},
            },
        },
        upsert=True,
    )
    return await db.users.find_one({"user_id": user_id})


async def toggle_bookmark(db: AsyncIOMotorDatabase, user_id: str, field: str, target_id) -> dict:
    """
    Toggle `target_id` in the user's bookmark array `field`.

    Returns {"is_bookmarked": bool, field: [ids]}
    """
    if field not in BOOKMARK_FIELDS:
        raise ValueError(f"Unknown bookmark field: {field}")

    await ensure_user(db, user_id)
    is_bookmarked = await toggle_set_member(db.users, {"user_id": user_id}, field, target_id)

    user = await db.users.find_one({"user_id": user_id}, projection={field: 1})
    return {
        "is_bookmarked": is_bookmarked,
        field: [str(i) for i in user.get(field, [])],
    }


async def get_bookmarks(db: AsyncIOMotorDatabase, user_id: str) -> Dict[str, List[dict]]:
    """Resolve every bookmark array to the documents it points at"""
    user = await db.users.find_one({"user_id": user_id})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    bookmarks = {}
    for field, collection in BOOKMARK_FIELDS.items():
        ids = user.get(field, [])
        if not ids:
            bookmarks[field] = []
            continue
        cursor = db[collection].find({"_id": {"$in": ids}})
        bookmarks[field] = serialize_many(await cursor.to_list(length=len(ids)))
    return bookmarks
