"""
Ayoo - FastAPI Backend Application
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog

from ayoo import __version__
from ayoo.config import settings
from ayoo.api import accounts, admin, auth, dispatch, orders, sync
from ayoo.orders.errors import OrderError
from ayoo.orders.fanout import hub

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Ayoo API", version=__version__)
    listener = asyncio.create_task(hub.run_listener())
    yield
    listener.cancel()
    try:
        await listener
    except asyncio.CancelledError:
        pass
    await hub.broadcaster.close()
    logger.info("Shutting down Ayoo API")


# Create FastAPI application
app = FastAPI(
    title="Ayoo",
    description="Order lifecycle, dispatch and payout settlement for food delivery",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(OrderError)
async def order_error_handler(request: Request, exc: OrderError):
    """Return typed order failures as JSON"""
    logger.info(
        "Order request rejected",
        path=request.url.path,
        code=exc.code,
        detail=exc.message,
        reference=exc.reference,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": __version__}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    from ayoo.database import SessionLocal
    
    checks = {}
    
    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"
    
    # Check Redis
    try:
        from ayoo.jobs.celery_app import celery_app
        celery_app.control.ping(timeout=1)
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"failed: {str(e)}"
    
    all_ok = all(v == "ok" for v in checks.values())
    
    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "sync_subscribers": hub.subscriber_count,
    }


# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(dispatch.router, prefix="/dispatch", tags=["Dispatch"])
app.include_router(accounts.router, prefix="/accounts", tags=["Accounts"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(sync.router, tags=["Sync"])


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "ayoo.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
