import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.dependencies import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_db)):
    """Liveness plus a round trip to MongoDB"""
    record = {
        "timestamp": datetime.utcnow().isoformat(),
        "status": {"api": "UP"},
        "latency_ms": {},
    }

    try:
        start = datetime.utcnow()
        await db.command("ping")
        record["status"]["database"] = "UP"
        record["latency_ms"]["database"] = (datetime.utcnow() - start).total_seconds() * 1000
    except Exception:
        logger.warning("Database ping failed", exc_info=True)
        record["status"]["database"] = "DOWN"

    return record
