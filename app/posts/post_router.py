from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.database import (
    find_by_slug_or_id, insert_with_unique_slug, serialize_many, serialize_mongo,
    update_with_reslug,
)
from app.core.dependencies import get_db, get_current_user_id, page_params, pagination
from app.core.toggles import toggle_set_member
from app.posts.post_models import CommentCreate, PostCreate, PostUpdate
from app.users.user_service import toggle_bookmark

router = APIRouter(tags=["Posts"])


async def get_post_or_404(db: AsyncIOMotorDatabase, slug: str) -> dict:
    post = await find_by_slug_or_id(db.posts, slug)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


async def verify_post_author(db: AsyncIOMotorDatabase, slug: str, user_id: str) -> dict:
    post = await get_post_or_404(db, slug)
    if post["author_id"] != user_id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return post

# ==================== POST CRUD ====================

@router.get("")
async def list_posts(
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Public feed, newest first"""
    query = {"privacy": "public"}
    cursor = db.posts.find(query).sort("created_at", -1).skip(paging["skip"]).limit(paging["limit"])
    posts = await cursor.to_list(length=paging["limit"])
    total = await db.posts.count_documents(query)

    return {
        "posts": serialize_many(posts),
        "pagination": pagination(paging["page"], paging["limit"], total),
    }


@router.post("", status_code=201)
async def create_post(
    payload: PostCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    now = datetime.utcnow()
    doc = {
        "title": payload.title,
        "content": payload.content,
        "type": payload.type.value,
        "privacy": payload.privacy.value,
        "media": payload.media,
        "author_id": user_id,
        "likes": [],
        "comments_count": 0,
        "shares": 0,
        "created_at": now,
        "updated_at": now,
    }
    post = await insert_with_unique_slug(db.posts, doc, payload.title)
    return {"post": serialize_mongo(post)}


@router.get("/{slug}")
async def get_post(slug: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    post = await get_post_or_404(db, slug)
    return serialize_mongo(post)


@router.put("/{slug}")
async def update_post(
    slug: str,
    payload: PostUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Edit a post; reslug=true re-derives the slug from the new title"""
    post = await verify_post_author(db, slug, user_id)

    updates = payload.dict(exclude_none=True, exclude={"reslug"})
    if "privacy" in updates:
        updates["privacy"] = payload.privacy.value

    updated = await update_with_reslug(
        db.posts, post["_id"], updates, title=payload.title, reslug=payload.reslug
    )
    return {"success": True, "post": serialize_mongo(updated)}


@router.delete("/{slug}")
async def delete_post(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    post = await verify_post_author(db, slug, user_id)
    await db.posts.delete_one({"_id": post["_id"]})
    await db.post_comments.delete_many({"post_id": post["_id"]})
    return {"success": True, "message": "Post deleted"}

# ==================== TOGGLES ====================

@router.post("/{slug}/like")
async def toggle_like(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    post = await get_post_or_404(db, slug)
    liked = await toggle_set_member(db.posts, {"_id": post["_id"]}, "likes", user_id)

    post = await db.posts.find_one({"_id": post["_id"]}, projection={"likes": 1})
    return {"liked": liked, "likes_count": len(post.get("likes", []))}


@router.post("/{slug}/bookmark")
async def toggle_post_bookmark(
    slug: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    post = await get_post_or_404(db, slug)
    return await toggle_bookmark(db, user_id, "saved_posts", post["_id"])

# ==================== COMMENTS ====================

@router.post("/{slug}/comments", status_code=201)
async def add_comment(
    slug: str,
    comment: CommentCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    post = await get_post_or_404(db, slug)

    comment_doc = {
        "post_id": post["_id"],
        "user_id": user_id,
        "content": comment.content,
        "created_at": datetime.utcnow(),
    }
    result = await db.post_comments.insert_one(comment_doc)
    await db.posts.update_one({"_id": post["_id"]}, {"$inc": {"comments_count": 1}})

    comment_doc["_id"] = result.inserted_id
    return {"success": True, "comment": serialize_mongo(comment_doc)}


@router.get("/{slug}/comments")
async def list_comments(
    slug: str,
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    post = await get_post_or_404(db, slug)

    cursor = db.post_comments.find({"post_id": post["_id"]}) \
        .sort("created_at", -1).skip(paging["skip"]).limit(paging["limit"])
    comments = await cursor.to_list(length=paging["limit"])

    return {
        "comments": serialize_many(comments),
        "count": len(comments),
        "total": post.get("comments_count", 0),
    }
