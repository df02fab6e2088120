"""
IndiaMART Product Agent: Main Application

FastAPI application entry point.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import structlog
from datetime import datetime, timezone

from config import settings
from exceptions import AppError

logging.basicConfig(level=getattr(logging, settings.log_level), format="%(message)s")

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if settings.is_production
            else structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: Start the queue runner on the server's event loop
    Shutdown: Stop the runner and close the IndiaMART HTTP client
    """
    from integrations.indiamart import get_indiamart_gateway
    from services.queue_runner_service import get_queue_runner_service

    # Startup
    logger.info(
        "application_starting",
        environment=settings.environment,
        debug=settings.debug,
        default_mode=settings.default_agent_mode,
    )

    runner = get_queue_runner_service()
    runner.start_actor()

    yield

    # Shutdown
    logger.info("application_shutting_down", pending=len(runner.items))
    await runner.shutdown()
    await get_indiamart_gateway().aclose()


# Create FastAPI app
app = FastAPI(
    title="IndiaMART Product Agent",
    description="Draft product listings and push them one at a time to the IndiaMART catalogue",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===================
# ROUTES
# ===================

@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        Basic health status and queue runner state
    """
    from services.queue_runner_service import get_queue_runner_service

    runner = get_queue_runner_service()

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "queue": {
            "state": runner.state.value,
            "pending": len(runner.items),
        },
    }


@app.get("/")
async def root():
    """
    Root endpoint.

    Returns:
        API information and available endpoints
    """
    return {
        "name": "IndiaMART Product Agent API",
        "version": "0.1.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "health": "/health",
        "endpoints": {
            "indiamart": "/api/indiamart",
            "queue": "/api/queue",
            "settings": "/api/settings",
            "logs": "/api/logs",
            "drafts": "/api/drafts",
        }
    }


# ===================
# ERROR HANDLERS
# ===================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Return AppError in the standard error format."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler.

    Catches unhandled exceptions and returns standard error format.
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": str(exc) if settings.debug else None,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        }
    )


# ===================
# INCLUDE ROUTERS
# ===================
from routes.catalog import router as catalog_router
from routes.queue import router as queue_router
from routes.settings import router as settings_router
from routes.logs import router as logs_router
from routes.drafts import router as drafts_router

app.include_router(catalog_router, prefix="/api/indiamart", tags=["IndiaMART"])
app.include_router(queue_router, prefix="/api/queue", tags=["Queue"])
app.include_router(settings_router, prefix="/api/settings", tags=["Settings"])
app.include_router(logs_router, prefix="/api/logs", tags=["Activity"])
app.include_router(drafts_router, prefix="/api/drafts", tags=["Drafts"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
