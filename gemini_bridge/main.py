"""
Gemini Bridge Application Entry Point

FastAPI application main entry, including router registration and application configuration.
"""

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.routing import APIRouter

from gemini_bridge import __version__
from gemini_bridge.api.admin import kv_router
from gemini_bridge.api.proxy import openai_router
from gemini_bridge.common.errors import AppError
from gemini_bridge.config import get_settings
from gemini_bridge.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()


# Application Lifecycle Management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application Lifecycle Management

    Open the KV store backend on startup, release it on shutdown.
    """
    settings = get_settings()
    if settings.KV_STORE_TYPE == "redis":
        from gemini_bridge.db.redis import close_redis, init_redis

        await init_redis()
        yield
        await close_redis()
    else:
        from gemini_bridge.db.session import close_db, init_db

        await init_db()
        yield
        await close_db()


settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="OpenAI-compatible proxy for the Google Gemini API",
    version=__version__,
    lifespan=lifespan,
)


# Global Exception Handler
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Handle application custom exceptions

    Error details are only returned in DEBUG mode.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(include_details=get_settings().DEBUG),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions

    Stack traces are logged but only returned to clients in DEBUG mode.
    """
    logger.error(
        "Uncaught exception: %s\nPath: %s\nTraceback:\n%s",
        str(exc),
        request.url.path,
        traceback.format_exc(),
    )

    if get_settings().DEBUG:
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": str(exc),
                    "type": type(exc).__name__,
                    "code": "internal_error",
                    "traceback": traceback.format_exc().split("\n"),
                }
            },
        )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "message": "Internal server error",
                "type": "internal_error",
                "code": "internal_error",
            }
        },
    )


# Health Check Endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health Check

    Used for service liveness probe.
    """
    return {"status": "healthy"}


# Register Proxy Routers
app.include_router(openai_router)

# Admin API (prefixed); proxy endpoints stay under /v1
api_router = APIRouter(prefix="/api")
api_router.include_router(kv_router)
app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gemini_bridge.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
