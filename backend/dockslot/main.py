# backend/dockslot/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .core.errors import DockslotError, dockslot_error_handler
from .database import Base, engine
from .models import registry  # noqa: F401  (registers every table on Base.metadata)
from .routers import availability as availability_router
from .routers import booking as booking_router
from .routers import captains as captains_router
from .routers import ops as ops_router
from .routers import schedule as schedule_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("DockSlot started (env=%s, maintenance=%s)", settings.APP_ENV, settings.MAINTENANCE_MODE)
    yield


app = FastAPI(title="DockSlot", lifespan=lifespan)

app.add_exception_handler(DockslotError, dockslot_error_handler)

# --- API Routers ---
app.include_router(availability_router.router)
app.include_router(captains_router.router)
app.include_router(booking_router.router)
app.include_router(schedule_router.router)
app.include_router(ops_router.router)


# --- Maintenance middleware ---
@app.middleware("http")
async def maintenance_gate(request: Request, call_next):
    """
    With MAINTENANCE_MODE on:
      - reads keep working (guests can still browse slots)
      - /ops and /ping are always served
      - every other write gets 503 so no booking lands mid-migration
    """
    if settings.MAINTENANCE_MODE:
        p = request.url.path
        always_allowed = ("/ops", "/ping")
        if request.method not in ("GET", "HEAD", "OPTIONS") and not p.startswith(always_allowed):
            return JSONResponse(
                {"detail": "Booking is temporarily paused for maintenance", "code": "maintenance"},
                status_code=503,
            )

    return await call_next(request)


@app.get("/ping")
def ping():
    return {"ok": True}
