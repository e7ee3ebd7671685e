import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from . import db as mongo
from .config import get_settings
from .db import close_mongo_connection, connect_to_mongo
from .redis_bus import stop as redis_bus_stop
from .services.notification_service import drain_notifications
from .routers import indices, locations, notifications, people

LOGGER = logging.getLogger("uvicorn.error")

app = FastAPI(title="GeoStud People Matching API", default_response_class=ORJSONResponse)
settings = get_settings()

# CSV list; includes both localhost and 127.0.0.1 by default.
_origins_env = os.getenv("CORS_ORIGINS") or settings.cors_origin or "http://localhost:5173,http://127.0.0.1:5173"
_allow_origins = [o.strip() for o in _origins_env.split(",") if o.strip()]
LOGGER.debug("CORS allow_origins=%s", _allow_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)
app.add_middleware(GZipMiddleware, minimum_size=512)


@app.middleware("http")
async def log_slow_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    slow_ms = int(os.getenv("SLOW_REQUEST_MS", "800"))
    if elapsed_ms >= slow_ms:
        LOGGER.warning(
            "slow request %s %s %dms status=%s",
            request.method,
            request.url.path,
            int(elapsed_ms),
            response.status_code,
        )
    return response


@app.on_event("startup")
async def startup():
    # connect_to_mongo also ensures the unique edge/match indexes
    await connect_to_mongo()
    if get_settings().redis_pubsub_enabled:
        LOGGER.info("Notification events will be published to Redis")
    else:
        LOGGER.info("Redis pub/sub disabled")


@app.on_event("shutdown")
async def shutdown():
    # in-flight notifications still need the database
    await drain_notifications()
    await close_mongo_connection()
    await redis_bus_stop()


app.include_router(people.router, prefix="/api", tags=["people"])
app.include_router(locations.router, prefix="/api", tags=["locations"])
app.include_router(notifications.router, prefix="/api", tags=["notifications"])
app.include_router(indices.router, prefix="/api", tags=["admin"])


@app.get("/")
async def root():
    return {"status": "geomatch-api-ok"}


@app.get("/api/health/db")
async def db_health():
    ok = mongo._client is not None and mongo._db is not None
    return {
        "mongo": "connected" if ok else "disconnected",
        "db": str(get_settings().mongo_db),
    }
