"""
SAIL Applicant Tracking - Main Application

FastAPI backend with:
- SQL (SQLite by default, PostgreSQL optional) for HR portal users
- MongoDB for applicant records
- Bilingual (Hindi/English) application form PDFs
- SMTP notifications with the form attached
- JWT authentication

Run: uvicorn ats.main:app --reload
"""

import logging
import time
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from ats.api.routes import api_router
from ats.core.auth import seed_default_users
from ats.core.config import get_settings
from ats.core.logging import configure_logging
from ats.db.mongodb import check_mongo_connection, init_mongo_indexes
from ats.db.sql import check_sql_connection, init_sql_schema
from ats.services.user_repository import SqlUserRepository

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# Create FastAPI app
app = FastAPI(
    title="SAIL Applicant Tracking",
    description="""
    Internship applicant tracking for the ONGC Dehradun SAIL programme.

    ## Features
    - **Authentication**: JWT-based auth for HR managers, admins and viewers
    - **Applicants**: Intake, spreadsheet import, search and status workflow
    - **Forms**: Bilingual application form PDF, pre-filled per applicant
    - **Email**: Single and batched bulk notifications with the form attached
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Log each request and add security headers to the response."""
    started = time.perf_counter()
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    body = {"detail": "Internal server error"}
    if not settings.is_production:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


# Include API routes
app.include_router(api_router, prefix="/api")


# Older clients used these paths
@app.get("/api/shortlisted", include_in_schema=False)
async def legacy_shortlisted():
    return RedirectResponse(url="/api/applicants/shortlisted", status_code=307)


@app.get("/api/approved", include_in_schema=False)
async def legacy_approved():
    return RedirectResponse(url="/api/applicants/approved", status_code=307)


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    mongo_ok = check_mongo_connection()
    sql_ok = check_sql_connection()
    return {
        "status": "healthy" if mongo_ok and sql_ok else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "mongodb": "connected" if mongo_ok else "disconnected",
        "sql": "connected" if sql_ok else "disconnected",
        "email": "configured" if settings.email_configured else "not configured",
    }


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create the user table, seed default accounts and build MongoDB indexes."""
    try:
        init_sql_schema()
        logger.info("✅ SQL schema ready")
        if settings.seed_default_users:
            created = seed_default_users(SqlUserRepository(), settings)
            if created:
                logger.info(f"✅ Seeded {created} default users")
    except Exception as e:
        logger.error(f"⚠️ SQL initialization failed: {e}")

    try:
        init_mongo_indexes()
        logger.info("✅ MongoDB indexes initialized")
    except Exception as e:
        logger.error(f"⚠️ MongoDB index initialization failed: {e}")

    if not settings.email_configured:
        logger.warning("⚠️ EMAIL_USER/EMAIL_PASS not set; email endpoints will fail")
