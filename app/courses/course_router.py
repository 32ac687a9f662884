from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import serialize_many, serialize_mongo
from app.core.dependencies import get_db, get_current_user_id, page_params, pagination
from app.courses.database import (
    count_courses, create_course, enroll_student, get_course, list_courses,
)
from app.courses.models import CourseCreate, CourseMode
from app.users.user_service import toggle_bookmark

router = APIRouter(tags=["Courses"])


async def get_course_or_404(db: AsyncIOMotorDatabase, slug: str) -> dict:
    course = await get_course(db, slug)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.get("")
async def list_courses_endpoint(
    mode: CourseMode = None,
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """List all courses with filters"""
    filters = {}
    if mode:
        filters["mode"] = mode.value

    courses = await list_courses(db, filters, paging["skip"], paging["limit"])
    total = await count_courses(db, filters)
    return {
        "courses": serialize_many(courses),
        "pagination": pagination(paging["page"], paging["limit"], total),
    }


@router.post("", status_code=201)
async def create_course_endpoint(
    course: CourseCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    data = course.dict()
    data["mode"] = course.mode.value
    created = await create_course(db, data, user_id)
    return {
        "success": True,
        "course": serialize_mongo(created),
        "message": "Course created successfully"
    }


@router.get("/{slug}")
async def get_course_endpoint(slug: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    """Get course details"""
    course = await get_course_or_404(db, slug)
    course["students_count"] = len(course.get("students", []))
    return serialize_mongo(course)


@router.post("/{slug}/enroll")
async def enroll_endpoint(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    course = await get_course_or_404(db, slug)

    if course["instructor_id"] == user_id:
        raise HTTPException(status_code=400, detail="Instructors cannot enroll in their own course")

    deadline = course["last_date_registration"].replace(tzinfo=None)
    if datetime.utcnow() > deadline:
        raise HTTPException(status_code=400, detail="Registration for this course has closed")

    enrolled = await enroll_student(db, course, user_id)
    return {"enrolled": True, "already_enrolled": not enrolled}


@router.post("/{slug}/bookmark")
async def toggle_course_bookmark(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    course = await get_course_or_404(db, slug)
    return await toggle_bookmark(db, user_id, "saved_courses", course["_id"])
