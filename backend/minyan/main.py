"""FastAPI application entry point."""
import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from minyan.config import settings
from minyan.database import Base, engine
from minyan.errors import NotificationError, PersistenceError, ValidationError

# Import routers
from minyan.routers import users, buildings, minyanim, attendance, announcements, notifications

# Import all models so Base.metadata knows about them
from minyan.models.user import User                          # noqa: F401
from minyan.models.building import Building, BuildingMember  # noqa: F401
from minyan.models.recurrence import RecurrencePattern       # noqa: F401
from minyan.models.minyan_event import MinyanEvent           # noqa: F401
from minyan.models.attendance import Attendance              # noqa: F401
from minyan.models.announcement import Announcement          # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Minyan Scheduler",
    description="Scheduling and live RSVP tracking for building minyanim",
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
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(buildings.router, prefix="/api/buildings", tags=["Buildings"])
app.include_router(announcements.router, prefix="/api/buildings", tags=["Announcements"])
app.include_router(minyanim.router, prefix="/api/minyanim", tags=["Minyanim"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])


@app.exception_handler(ValidationError)
async def handle_validation_error(request: Request, exc: ValidationError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def handle_persistence_error(request: Request, exc: PersistenceError):
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})


@app.exception_handler(NotificationError)
async def handle_notification_error(request: Request, exc: NotificationError):
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
