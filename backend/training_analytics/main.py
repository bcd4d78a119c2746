"""
Group Training Analytics - FastAPI Application

Attendance analytics dashboard for Zoezi group training classes.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from training_analytics.api import analytics, embed, gyms, schedule
from training_analytics.core.config import ConfigurationError, settings
from training_analytics.core.database import close_db, init_db
from training_analytics.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info(
        "Starting Group Training Analytics",
        version=VERSION,
        database_configured=bool(settings.DATABASE_URL),
    )
    await init_db()

    yield

    # Shutdown
    await close_db()
    logger.info("Shutting down Group Training Analytics")


app = FastAPI(
    title="Group Training Analytics API",
    description="Attendance analytics for Zoezi group training classes",
    version=VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Missing credentials fail the request, not the process."""
    logger.error("Configuration error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# Include routers
app.include_router(gyms.router, prefix="/api/gyms", tags=["gyms"])
app.include_router(schedule.router, prefix="/api/schedule", tags=["schedule"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])
app.include_router(embed.router, prefix="/api/embed", tags=["embed"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database_configured": bool(settings.DATABASE_URL),
    }


@app.get("/{full_path:path}", include_in_schema=False)
async def frontend(full_path: str):
    """Serve static files, falling back to the single-page app's index.html."""
    if full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not found")

    static_dir = Path(settings.STATIC_DIR).resolve()
    if full_path:
        candidate = (static_dir / full_path).resolve()
        if candidate.is_relative_to(static_dir) and candidate.is_file():
            return FileResponse(candidate)

    index = static_dir / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(index)


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run("training_analytics.main:app", host="0.0.0.0", port=settings.PORT)
