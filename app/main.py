import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient

from app.books.book_router import router as book_router
from app.core.config import CORS_ORIGINS, MONGO_DB_NAME, MONGO_URL
from app.core.database import create_indexes
from app.core.exceptions import SlugConflictError, ToggleConflictError, ToggleTargetNotFound
from app.core.logging import configure_logging
from app.courses.course_router import router as course_router
from app.events.event_router import router as event_router
from app.marketplace.product_router import router as product_router
from app.posts.post_router import router as post_router
from app.reviews.review_router import router as review_router
from app.system.health_router import router as health_router
from app.teams.team_router import router as team_router
from app.tours.tour_router import router as tour_router
from app.users.user_router import router as user_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Pathshala API")

# MongoDB Configuration
client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB_NAME]


@app.on_event("startup")
async def startup_event():
    await create_indexes(db)
    logger.info("Pathshala API started (database: %s)", MONGO_DB_NAME)


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==================== ERROR HANDLERS ====================

@app.exception_handler(SlugConflictError)
async def slug_conflict_handler(request: Request, exc: SlugConflictError):
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=409, content={"detail": "Could not reserve a unique slug, please retry"})


@app.exception_handler(ToggleTargetNotFound)
async def toggle_not_found_handler(request: Request, exc: ToggleTargetNotFound):
    return JSONResponse(status_code=404, content={"detail": "Not found"})


@app.exception_handler(ToggleConflictError)
async def toggle_conflict_handler(request: Request, exc: ToggleConflictError):
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=409, content={"detail": "Concurrent update, please retry"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# ==================== ROUTER REGISTRATION ====================
app.include_router(post_router, prefix="/posts")
app.include_router(review_router, prefix="/reviews")
app.include_router(course_router, prefix="/courses")
app.include_router(team_router, prefix="/teams")
app.include_router(tour_router, prefix="/tours")
app.include_router(product_router, prefix="/marketplace")
app.include_router(book_router, prefix="/books")
app.include_router(event_router, prefix="/events")
app.include_router(user_router, prefix="/users")
app.include_router(health_router)
# ============================================================
