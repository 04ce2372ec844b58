"""
Job Portal - Main Application

FastAPI backend with:
- MongoDB for users, profiles, jobs and applications
- JWT authentication with employer / jobseeker roles
- Application status lifecycle with an audit trail

Run: uvicorn jobportal.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobportal.api.routes import api_router
from jobportal.core.config import get_settings
from jobportal.core.exceptions import PortalError
from jobportal.core.logging_setup import RequestLoggingMiddleware, configure_logging
from jobportal.db.mongodb import init_mongo_indexes, test_mongo_connection
from jobportal.schemas.schemas import ErrorResponse

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Job Portal",
    description="""
    REST backend for a job portal.

    ## Features
    - **Authentication**: JWT-based auth for employers and job seekers
    - **Profiles**: One employer or job seeker profile per account
    - **Jobs**: Post, search, update and remove job postings
    - **Applications**: Apply, withdraw, review, shortlist, hire or reject,
      schedule interviews; every status change is recorded
    """,
    version="1.0.0",
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Render domain errors as {"detail", "error"} with their status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.message, error=exc.error).model_dump(),
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception:
        logger.exception("MongoDB index initialization failed")


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Job Portal"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
