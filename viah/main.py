"""
Viah API application: lifecycle, middleware and routers.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from viah.config import settings
from viah.db.helpers import DatabaseError, InvalidInputError
from viah.db.pool import db_pool
from viah.features.calendar.api.router import router as calendar_router
from viah.features.dashboard.api.router import router as dashboard_router
from viah.features.finance.api.router import router as finance_router
from viah.features.galleries.api.router import router as galleries_router
from viah.features.guests.api.router import router as guests_router
from viah.features.leads.api.router import inbox_router as lead_inbox_router
from viah.features.leads.api.router import router as leads_router
from viah.features.messaging.api.router import router as messaging_router
from viah.features.messaging.api.router import ws_router as messaging_ws_router
from viah.features.notifications.api.router import router as notifications_router
from viah.features.planning.api.router import router as planning_router
from viah.features.vendors.api.router import router as vendors_router
from viah.infrastructure.observability.logging import get_logger, log_request, setup_logging
from viah.middleware import CORSMiddleware, RequestContextMiddleware
from viah.routes import health
from viah.services.redis_client import fast_redis

setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool and Redis on startup; close them in reverse order."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    startup_tasks = []
    try:
        await db_pool.initialize()
        startup_tasks.append("database_pool")

        await fast_redis.initialize()
        startup_tasks.append("redis")

        logger.info("All services initialized successfully", services=startup_tasks)
    except Exception as e:
        logger.error("Failed to initialize services", error=str(e), completed_tasks=startup_tasks)
        if "redis" in startup_tasks:
            await fast_redis.close()
        if "database_pool" in startup_tasks:
            await db_pool.close()
        raise

    yield

    logger.info("Application shutting down")
    shutdown_errors = []

    try:
        await fast_redis.close()
    except Exception as e:
        logger.error("Error closing Redis", error=str(e))
        shutdown_errors.append(f"Redis: {e}")

    try:
        await db_pool.close()
    except Exception as e:
        logger.error("Error closing database pool", error=str(e))
        shutdown_errors.append(f"Database: {e}")

    if shutdown_errors:
        logger.warning("Some services had shutdown errors", errors=shutdown_errors)
    else:
        logger.info("All services closed successfully")


app = FastAPI(
    title="Viah.me API",
    description="Wedding planning for couples and vendors",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(CORSMiddleware, allowed_origins=settings.CORS_ALLOWED_ORIGINS)

app.include_router(health.router)
app.include_router(planning_router)
app.include_router(vendors_router)
app.include_router(messaging_router)
app.include_router(messaging_ws_router)
app.include_router(notifications_router)
app.include_router(finance_router)
app.include_router(guests_router)
app.include_router(galleries_router)
app.include_router(dashboard_router)
app.include_router(leads_router)
app.include_router(lead_inbox_router)
app.include_router(calendar_router)


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError):
    logger.error(
        "Unhandled database error",
        path=request.url.path,
        operation=exc.operation,
        error=str(exc),
    )
    return JSONResponse(
        status_code=500,
        content={"detail": {"code": "database_error", "message": "A database error occurred"}},
    )


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    logger.warning("Rejected malformed input", path=request.url.path, operation=exc.operation, error=str(exc))
    return JSONResponse(
        status_code=422,
        content={"detail": {"code": "invalid_input", "message": "A request value has the wrong format"}},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    log_request(
        request.method,
        request.url.path,
        response.status_code,
        round((time.time() - start_time) * 1000, 2),
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
