from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.books.book_models import BookCreate
from app.core.database import find_by_slug_or_id, insert_with_unique_slug, serialize_many, serialize_mongo
from app.core.dependencies import get_db, get_current_user_id, page_params, pagination
from app.core.slug_utils import escape_regex

router = APIRouter(tags=["Books"])


def _exact(value: str) -> dict:
    return {"$regex": f"^{escape_regex(value)}$", "$options": "i"}


@router.get("")
async def list_books(
    q: str = None,
    category: str = None,
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Search by title/author; category accepts a comma separated list"""
    query = {}
    if q:
        pattern = {"$regex": escape_regex(q), "$options": "i"}
        query["$or"] = [{"title": pattern}, {"author": pattern}]
    if category:
        query["category"] = {"$in": [c.strip() for c in category.split(",") if c.strip()]}

    cursor = db.books.find(query).sort("title", 1).skip(paging["skip"]).limit(paging["limit"])
    books = await cursor.to_list(length=paging["limit"])
    total = await db.books.count_documents(query)
    return {
        "books": serialize_many(books),
        "pagination": pagination(paging["page"], paging["limit"], total),
    }


@router.post("")
async def create_book(
    payload: BookCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """
    Add a book to the catalog. A book with the same title (and author)
    already on file is returned instead of a duplicate.
    """
    duplicate_query = {"title": _exact(payload.title)}
    if payload.author:
        duplicate_query["author"] = _exact(payload.author)

    existing = await db.books.find_one(duplicate_query)
    if existing:
        return {"book": serialize_mongo(existing), "created": False}

    now = datetime.utcnow()
    doc = payload.dict()
    doc.update({
        "added_by": user_id,
        "created_at": now,
        "updated_at": now,
    })
    slug_source = f"{payload.title} {payload.author}" if payload.author else payload.title
    book = await insert_with_unique_slug(db.books, doc, slug_source)
    return JSONResponse(status_code=201, content={"book": serialize_mongo(book), "created": True})


@router.get("/{slug}")
async def get_book(slug: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    """Book details with its reviews and average rating"""
    book = await find_by_slug_or_id(db.books, slug)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")

    cursor = db.reviews.find({"book_id": book["_id"]}).sort("created_at", -1)
    reviews = await cursor.to_list(length=None)

    book["reviews"] = serialize_many(reviews)
    book["total_reviews"] = len(reviews)
    book["average_rating"] = (
        round(sum(r["rating"] for r in reviews) / len(reviews), 2) if reviews else 0
    )
    return serialize_mongo(book)
