from fastapi import Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.auth_utils import verify_token
from app.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def get_db_instance() -> AsyncIOMotorDatabase:
    """Get database from main module"""
    from app.main import db
    return db

# ==================== DEPENDENCY FUNCTIONS ====================

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return get_db_instance()


async def get_current_user_id(payload: dict = Depends(verify_token)) -> str:
    """user_id of the signed-in user (the token's "sub" claim)"""
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return str(user_id)


def page_params(page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> dict:
    """Normalised page/limit query parameters"""
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    return {"page": page, "limit": limit, "skip": (page - 1) * limit}


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit,
    }
