"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .api import export_router, generation_router, health_router, schemas_router
from .config import get_settings
from .core import GongwenError, get_logger
from .services import close_upstream_client

logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown logic."""
    # Fails startup when DEEPSEEK_API_KEY is missing
    settings.require_api_key()
    logger.info(
        "Starting gongwen writer",
        upstream_url=settings.upstream_base_url,
        model=settings.upstream_model,
        api_key=settings.deepseek_api_key,
    )
    yield
    await close_upstream_client()
    logger.info("Shutting down gongwen writer")


app = FastAPI(
    title="Gongwen Writer",
    description="Streams official-document drafts from a chat-completion model and exports them to Word",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Global exception handler
@app.exception_handler(GongwenError)
async def gongwen_exception_handler(request: Request, exc: GongwenError) -> JSONResponse:
    """Handle gongwen writer specific errors."""
    logger.error(
        "Request error",
        path=request.url.path,
        error=exc.message,
        details=exc.details,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": exc.message,
            "details": exc.details,
        },
    )


# Include routers
app.include_router(health_router, prefix="/api")
app.include_router(generation_router, prefix="/api")
app.include_router(export_router, prefix="/api")
app.include_router(schemas_router, prefix="/api")

# Front-end, mounted last so it never shadows /api
if settings.static_dir is not None and settings.static_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gongwen.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
