"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from meatup.config import settings
from meatup.database import Base, engine
from meatup.exceptions import MeatupError

# Import routers
from meatup.routers import auth, members, events, restaurants, dates, rsvp, polls, comments, activity

# Import all models so Base.metadata knows about them
import meatup.models  # noqa: F401

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Meatup.Club",
    description="Members-only dinner club — vote on restaurants and dates, RSVP to quarterly dinners",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(members.router, prefix="/api/members", tags=["Members"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(restaurants.router, prefix="/api/restaurants", tags=["Restaurants"])
app.include_router(dates.router, prefix="/api/dates", tags=["Dates"])
app.include_router(rsvp.router, prefix="/api/rsvp", tags=["RSVP"])
app.include_router(polls.router, prefix="/api/polls", tags=["Polls"])
app.include_router(comments.router, prefix="/api/comments", tags=["Comments"])
app.include_router(activity.router, prefix="/api/activity", tags=["Activity"])


@app.exception_handler(MeatupError)
async def meatup_error_handler(request: Request, exc: MeatupError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with the first problem as the message."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
