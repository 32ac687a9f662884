from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime
from typing import List, Optional

from app.core.database import find_by_slug_or_id, insert_with_unique_slug
from app.core.toggles import add_set_member

# ==================== COURSE CRUD ====================

async def create_course(db: AsyncIOMotorDatabase, course_data: dict, instructor_id: str) -> dict:
    """Create course with a unique slug derived from its title"""
    now = datetime.utcnow()
    course = {
        "title": course_data["title"],
        "description": course_data["description"],
        "banner": course_data["banner"],
        "fee": course_data["fee"],
        "last_date_registration": course_data["last_date_registration"],
        "class_start_date": course_data["class_start_date"],
        "mode": course_data["mode"],
        "total_classes": course_data["total_classes"],
        "instructor_id": instructor_id,
        "students": [],
        "created_at": now,
        "updated_at": now,
    }
    return await insert_with_unique_slug(db.courses, course, course["title"])

async def get_course(db: AsyncIOMotorDatabase, slug: str) -> Optional[dict]:
    """Get course by slug or id"""
    return await find_by_slug_or_id(db.courses, slug)

def _course_query(filters: dict) -> dict:
    query = {}
    if filters.get("mode"):
        query["mode"] = filters["mode"]
    if filters.get("instructor_id"):
        query["instructor_id"] = filters["instructor_id"]
    return query

async def list_courses(db: AsyncIOMotorDatabase, filters: dict, skip: int = 0, limit: int = 20) -> List[dict]:
    """List courses with filters"""
    query = _course_query(filters)
    cursor = db.courses.find(query).sort("created_at", -1).skip(skip).limit(limit)
    return await cursor.to_list(length=limit)

async def count_courses(db: AsyncIOMotorDatabase, filters: dict) -> int:
    return await db.courses.count_documents(_course_query(filters))

# ==================== ENROLLMENT ====================

async def enroll_student(db: AsyncIOMotorDatabase, course: dict, user_id: str) -> bool:
    """Add user to course students; False if already enrolled"""
    return await add_set_member(db.courses, {"_id": course["_id"]}, "students", user_id)
