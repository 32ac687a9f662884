from fastapi import APIRouter, Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import serialize_mongo
from app.core.dependencies import get_db, get_current_user_id
from app.users.user_models import UserProfileUpsert
from app.users.user_service import get_bookmarks, upsert_profile

router = APIRouter(tags=["Users"])


@router.post("/me")
async def save_my_profile(
    profile: UserProfileUpsert,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Create or update the signed-in user's profile"""
    user = await upsert_profile(db, user_id, profile.dict(exclude_none=True))
    return {"success": True, "user": serialize_mongo(user)}


@router.get("/me")
async def get_my_profile(
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    user = await db.users.find_one({"user_id": user_id})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return serialize_mongo(user)


@router.get("/me/bookmarks")
async def list_my_bookmarks(
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return await get_bookmarks(db, user_id)
