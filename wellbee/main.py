from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
import uvicorn
import logging
import sys

from wellbee.core.config import settings
from wellbee.core.exceptions import SchedulingError
from wellbee.db.base import Base
from wellbee.db.session import engine, get_db_session
from wellbee import models  # noqa: F401  registers tables on Base.metadata

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting up {settings.PROJECT_NAME} backend ({settings.ENVIRONMENT.value})...")
    if settings.uses_sqlite:
        # Local/test databases are created in place; PostgreSQL goes through alembic
        Base.metadata.create_all(bind=engine)
        logger.info("SQLite schema created")
    yield
    logger.info(f"{settings.PROJECT_NAME} backend shutdown complete")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Wellbee - appointment scheduling and notifications",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"CORS configured with origins: {settings.CORS_ORIGINS}")

    from wellbee.api.v1.api import api_router
    app.include_router(api_router, prefix=settings.API_V1_STR)

    if settings.METRICS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")
        logger.info("Prometheus metrics exposed at /metrics")

    return app


# Create the FastAPI app instance
app = create_application()


@app.get("/health", tags=["Health Check"])
async def health_check():
    """Health check endpoint"""
    try:
        with get_db_session() as db:
            db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"

    return {
        "status": "healthy",
        "version": settings.VERSION,
        "project": settings.PROJECT_NAME,
        "database": db_status,
    }


@app.exception_handler(SchedulingError)
async def scheduling_exception_handler(request: Request, exc: SchedulingError):
    """Domain errors keep their reason and echo fields so clients can re-render the form"""
    logger.info(f"{type(exc).__name__} ({exc.status_code}): {exc.message} - {request.url}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed request fields are reported as 400 in the same shape as domain errors"""
    fields = []
    for error in exc.errors():
        # Drop the "body" / "query" / "path" prefix; the rest is the camelCase field path
        location = [str(part) for part in error.get("loc", ())[1:]]
        fields.append({"field": ".".join(location), "message": error.get("msg")})
    logger.info(f"Invalid request ({len(fields)} field errors): {request.url}")
    return JSONResponse(
        status_code=400,
        content={"error": "Missing or invalid fields", "reason": "invalid request", "fields": fields},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Global HTTP exception handler"""
    logger.error(f"HTTP {exc.status_code}: {exc.detail} - {request.url}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "status_code": exc.status_code},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc} - {request.url}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "status_code": 500}
    )


if __name__ == "__main__":
    uvicorn.run(
        "wellbee.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.is_development,
        log_level="info"
    )
