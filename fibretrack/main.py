"""
FastAPI Main Application Entry Point for Fibre Tracker.

This is the deadline engine service that handles:
- Holiday calendars and business day checks
- Phase deadline calculation for new projects
- Deadline recalculation after project edits
- Deadline urgency and project status
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fibretrack.core.config import settings
from fibretrack.core.exceptions import FibreTrackException
from fibretrack.api.routes import holiday_router, deadline_router
from fibretrack.services.holidays import available_calendars


# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    # Fibre Tracker - Deadline Engine

    Business-day deadlines for fibre-installation projects.

    ## Phase Chain
    planning → funding → wayleave → materials → announcement → kickoff →
    build → fqa → ecc → integration → rfa → com

    - Each deadline is N business days after the previous one
    - **fqa** mirrors **build**, **com** mirrors **rfa**
    - **wayleave** with 0 days is skipped

    ## Recalculation
    - **Anchor change / duration change**: whole chain from the site-survey date
    - **Deadline override**: the changed phase and everything after it
    """,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# Configure CORS for frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler for FibreTrackExceptions
@app.exception_handler(FibreTrackException)
async def fibretrack_exception_handler(request, exc: FibreTrackException):
    """Handle all FibreTrackException subclasses."""
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.message} {exc.details}")
    else:
        logger.warning(f"{exc.__class__.__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


# Include API routers
app.include_router(holiday_router)
app.include_router(deadline_router)


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "debug": settings.debug,
        "calendar": {
            "default_country": settings.holiday_country_code.upper(),
            "timezone": settings.calendar_timezone,
            "available": available_calendars(),
        },
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs" if settings.debug else "Docs disabled in production",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fibretrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
