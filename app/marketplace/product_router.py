from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.database import (
    find_by_slug_or_id, insert_with_unique_slug, serialize_many, serialize_mongo,
    update_with_reslug,
)
from app.core.dependencies import get_db, get_current_user_id, page_params, pagination
from app.marketplace.product_models import ProductCategory, ProductCreate, ProductStatus, ProductUpdate

router = APIRouter(tags=["Marketplace"])


@router.get("/products")
async def list_products(
    category: ProductCategory = None,
    paging: dict = Depends(page_params),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Active listings only"""
    query = {"status": ProductStatus.ACTIVE.value}
    if category:
        query["category"] = category.value

    cursor = db.products.find(query).sort("created_at", -1).skip(paging["skip"]).limit(paging["limit"])
    products = await cursor.to_list(length=paging["limit"])
    total = await db.products.count_documents(query)
    return {
        "products": serialize_many(products),
        "pagination": pagination(paging["page"], paging["limit"], total),
    }


@router.post("/products", status_code=201)
async def create_product(
    payload: ProductCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    now = datetime.utcnow()
    doc = payload.dict()
    doc.update({
        "category": payload.category.value,
        "condition": payload.condition.value,
        "seller_id": user_id,
        "status": ProductStatus.ACTIVE.value,
        "views": 0,
        "created_at": now,
        "updated_at": now,
    })
    product = await insert_with_unique_slug(db.products, doc, payload.title)
    return {"success": True, "product": serialize_mongo(product)}


@router.get("/products/{slug}")
async def get_product(slug: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    product = await find_by_slug_or_id(db.products, slug)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    product = await db.products.find_one_and_update(
        {"_id": product["_id"]},
        {"$inc": {"views": 1}},
        return_document=ReturnDocument.AFTER,
    )
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return serialize_mongo(product)


@router.put("/products/{slug}")
async def update_product(
    slug: str,
    payload: ProductUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    product = await find_by_slug_or_id(db.products, slug)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if product["seller_id"] != user_id:
        raise HTTPException(status_code=403, detail="Not authorized")

    updates = payload.dict(exclude_none=True, exclude={"reslug"})
    if payload.status:
        updates["status"] = payload.status.value

    updated = await update_with_reslug(
        db.products, product["_id"], updates, title=payload.title, reslug=payload.reslug
    )
    return {"success": True, "product": serialize_mongo(updated)}
