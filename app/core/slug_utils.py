"""
Unique slug generation for titled documents
(posts, reviews, books, courses, teams, tours, events, products)
"""

import logging
import re
import time
import unicodedata
from typing import Any, Dict

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection

logger = logging.getLogger(__name__)

_REGEX_SPECIALS = re.compile(r"[.*+?^${}()|\[\]\\]")


def escape_regex(value: str) -> str:
    """Escape regex metacharacters for a MongoDB $regex"""
    return _REGEX_SPECIALS.sub(lambda m: "\\" + m.group(0), value)


def _untitled() -> str:
    return f"untitled-{int(time.time() * 1000)}"


def create_slug(text: Any) -> str:
    """
    Convert a title to a URL-safe slug.

    Examples:
        "My Book" -> "my-book"
        "Café Société!" -> "cafe-societe"
        "বই প্রেম" -> "untitled-1718000000000"
    """
    if not isinstance(text, str) or not text.strip():
        return _untitled()

    # áéíóú -> aeiou, scripts with no ASCII form are dropped
    slug = unicodedata.normalize("NFKD", text)
    slug = slug.encode("ascii", "ignore").decode("ascii")

    slug = slug.lower()
    slug = re.sub(r"['’]", "", slug)
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = slug.strip("-")

    return slug or _untitled()


def _exclude_self(query: Dict[str, Any], is_update: bool, current_id: Any) -> Dict[str, Any]:
    if is_update and current_id:
        if isinstance(current_id, str) and ObjectId.is_valid(current_id):
            current_id = ObjectId(current_id)
        query["_id"] = {"$ne": current_id}
    return query


def _suffix_of(slug: str, base_slug: str) -> int:
    if slug.lower() == base_slug:
        return 0
    try:
        return int(slug.rsplit("-", 1)[-1])
    except ValueError:
        return 0


async def generate_unique_slug(
    collection: AsyncIOMotorCollection,
    text: Any,
    field: str = "slug",
    is_update: bool = False,
    current_id: Any = "",
) -> str:
    """
    Slug for `text` that no other document in `collection` holds in `field`.

    On collision the result is `<base>-<n>` where n is one more than the
    highest numeric suffix already stored; gaps are not reused. The check
    is not atomic with the caller's write, so callers rely on the unique
    index and retry on DuplicateKeyError.
    """
    base_slug = create_slug(text)

    query = _exclude_self({field: base_slug}, is_update, current_id)
    existing = await collection.find_one(query, projection={field: 1})
    if not existing:
        return base_slug

    pattern = f"^{escape_regex(base_slug)}(-[0-9]+)?$"
    similar_query = _exclude_self(
        {field: {"$regex": pattern, "$options": "i"}}, is_update, current_id
    )
    cursor = collection.find(similar_query, projection={field: 1})
    similar_docs = await cursor.to_list(length=None)

    if not similar_docs:
        # removed between the two reads
        return base_slug

    max_suffix = max(_suffix_of(doc.get(field, ""), base_slug) for doc in similar_docs)
    slug = f"{base_slug}-{max_suffix + 1}"

    logger.debug("Slug '%s' taken in %s, using '%s'", base_slug, collection.name, slug)
    return slug
