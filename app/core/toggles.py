"""
Atomic set-membership toggles

Bookmarks, likes, joins and enrollments are all "is X in array field F".
Every change goes through a conditional $addToSet / $pull so concurrent
requests can never lose each other's updates.
"""

import logging
from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorCollection

from app.core.exceptions import ToggleConflictError, ToggleTargetNotFound

logger = logging.getLogger(__name__)


async def toggle_set_member(
    collection: AsyncIOMotorCollection,
    doc_filter: Dict[str, Any],
    field: str,
    value: Any,
    max_attempts: int = 3,
) -> bool:
    """
    Add `value` to `field` if absent, remove it if present.

    Returns True when the value is now a member, False when it was removed.
    """
    for _ in range(max_attempts):
        added = await collection.update_one(
            {**doc_filter, field: {"$ne": value}},
            {"$addToSet": {field: value}},
        )
        if added.matched_count:
            return True

        removed = await collection.update_one(
            {**doc_filter, field: value},
            {"$pull": {field: value}},
        )
        if removed.matched_count:
            return False

        if not await collection.find_one(doc_filter, projection={"_id": 1}):
            raise ToggleTargetNotFound(f"No document in {collection.name} matches {doc_filter}")

        logger.info("Toggle on %s.%s raced a concurrent update, retrying", collection.name, field)

    raise ToggleConflictError(f"Toggle on {collection.name}.{field} did not settle")


async def add_set_member(
    collection: AsyncIOMotorCollection,
    doc_filter: Dict[str, Any],
    field: str,
    value: Any,
) -> bool:
    """$addToSet; True if the value was not already there"""
    result = await collection.update_one(
        {**doc_filter, field: {"$ne": value}},
        {"$addToSet": {field: value}},
    )
    return result.modified_count > 0


async def remove_set_member(
    collection: AsyncIOMotorCollection,
    doc_filter: Dict[str, Any],
    field: str,
    value: Any,
) -> bool:
    """$pull; True if the value was there"""
    result = await collection.update_one(
        {**doc_filter, field: value},
        {"$pull": {field: value}},
    )
    return result.modified_count > 0
