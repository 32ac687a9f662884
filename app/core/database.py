import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.config import SLUG_INSERT_ATTEMPTS
from app.core.exceptions import SlugConflictError
from app.core.slug_utils import generate_unique_slug

logger = logging.getLogger(__name__)

SLUGGED_COLLECTIONS = ("posts", "reviews", "courses", "teams", "tours", "products", "books", "events")

# ==================== SERIALIZATION ====================

def _jsonable(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def serialize_mongo(doc: dict) -> dict:
    return _jsonable(doc)


def serialize_many(docs: List[dict]) -> List[dict]:
    return [serialize_mongo(doc) for doc in docs]


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None

# ==================== LOOKUPS ====================

async def find_by_slug_or_id(
    collection: AsyncIOMotorCollection, key: str, field: str = "slug"
) -> Optional[dict]:
    """Find a document by its slug, falling back to its ObjectId"""
    doc = await collection.find_one({field: key})
    if doc:
        return doc

    oid = to_object_id(key)
    if oid is None:
        return None
    return await collection.find_one({"_id": oid})

# ==================== SLUGGED WRITES ====================

def _is_slug_violation(exc: DuplicateKeyError, field: str) -> bool:
    details = exc.details or {}
    key_pattern = details.get("keyPattern") or details.get("keyValue")
    if key_pattern:
        return field in key_pattern
    # no key info; the slug index is the only unique one besides _id
    return "_id" not in str(exc)


async def insert_with_unique_slug(
    collection: AsyncIOMotorCollection,
    doc: Dict[str, Any],
    title: Any,
    field: str = "slug",
    attempts: int = SLUG_INSERT_ATTEMPTS,
) -> Dict[str, Any]:
    """
    Insert `doc` with a slug derived from `title`.

    Two requests with the same title can both pass the uniqueness check;
    the loser hits the unique index and regenerates.
    """
    slug = None
    for attempt in range(1, attempts + 1):
        slug = await generate_unique_slug(collection, title, field)
        doc[field] = slug
        doc.pop("_id", None)
        try:
            result = await collection.insert_one(doc)
        except DuplicateKeyError as e:
            if not _is_slug_violation(e, field):
                raise
            logger.warning(
                "Slug '%s' claimed concurrently in %s (attempt %d/%d)",
                slug, collection.name, attempt, attempts,
            )
            continue
        doc["_id"] = result.inserted_id
        return doc

    raise SlugConflictError(collection.name, slug, attempts)


async def update_with_reslug(
    collection: AsyncIOMotorCollection,
    doc_id: ObjectId,
    updates: Dict[str, Any],
    title: Any = None,
    reslug: bool = False,
    field: str = "slug",
    attempts: int = SLUG_INSERT_ATTEMPTS,
) -> Optional[dict]:
    """
    Apply `updates` to a document, re-deriving its slug from `title`
    when `reslug` is set. Returns the updated document.
    """
    updates = dict(updates)
    updates["updated_at"] = datetime.utcnow()

    if not (reslug and title):
        return await collection.find_one_and_update(
            {"_id": doc_id}, {"$set": updates}, return_document=ReturnDocument.AFTER
        )

    slug = None
    for attempt in range(1, attempts + 1):
        slug = await generate_unique_slug(
            collection, title, field, is_update=True, current_id=doc_id
        )
        updates[field] = slug
        try:
            return await collection.find_one_and_update(
                {"_id": doc_id}, {"$set": updates}, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as e:
            if not _is_slug_violation(e, field):
                raise
            logger.warning(
                "Slug '%s' claimed concurrently in %s (attempt %d/%d)",
                slug, collection.name, attempt, attempts,
            )

    raise SlugConflictError(collection.name, slug, attempts)

# ==================== INDEXES ====================

async def create_indexes(db: AsyncIOMotorDatabase):
    """Create MongoDB indexes; unique slug indexes back the slug generator"""
    for name in SLUGGED_COLLECTIONS:
        await db[name].create_index("slug", unique=True, sparse=True)
        await db[name].create_index("created_at")

    await db.users.create_index("user_id", unique=True)

    await db.posts.create_index("author_id")
    await db.post_comments.create_index([("post_id", 1), ("created_at", -1)])

    await db.reviews.create_index("user_id")

    await db.courses.create_index("instructor_id")

    await db.teams.create_index("members.user_id")
    await db.teams.create_index([("type", 1), ("privacy", 1)])

    await db.tours.create_index("organizer_id")

    await db.products.create_index([("status", 1), ("category", 1)])
    await db.products.create_index("seller_id")

    await db.books.create_index([("title", 1), ("author", 1)])
    await db.books.create_index("category")
    await db.reviews.create_index("book_id")

    await db.events.create_index([("status", 1), ("start_time", 1)])

    logger.info("Indexes created for %d slugged collections", len(SLUGGED_COLLECTIONS))
