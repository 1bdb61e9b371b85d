"""
Main FastAPI application
Aquaculture pond measurement monitoring service
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import logging
import time

from aquamonitor.config import settings
from aquamonitor.database import engine, Base, SessionLocal
from aquamonitor.api.endpoints import measurements, thresholds
from aquamonitor.core.exceptions import MeasurementError
from aquamonitor.services.measurement_journal import MeasurementJournal
from aquamonitor.services.monitoring import build_monitoring_service


# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    Builds the monitoring service, replaying the journal when it is enabled
    """
    # Startup
    logger.info("Starting Pond Measurement Monitoring Service")

    journal = None
    if settings.ENABLE_JOURNAL:
        # Create database tables
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")
        journal = MeasurementJournal(SessionLocal)

    if getattr(app.state, "monitoring", None) is None:
        app.state.monitoring = build_monitoring_service(settings, journal)

    logger.info(
        f"Application startup complete ({app.state.monitoring.get_measurement_count()} measurements loaded)"
    )

    yield

    # Shutdown
    logger.info("Shutting down application")


# Create FastAPI application
app = FastAPI(
    title="Pond Measurement Monitoring Service",
    description="""
    Environmental measurement recording for aquaculture ponds

    Features:
    - Atomic measurement recording with critical classification
    - Configurable parameter safety thresholds
    - Per-pond measurement and critical-measurement indices
    """,
    version=API_VERSION,
    lifespan=lifespan
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Custom middleware for request logging and monitoring
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log all requests for monitoring
    """
    start_time = time.time()

    # Process request
    response = await call_next(request)

    # Log request details
    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.3f}s"
    )

    # Add custom headers
    response.headers["X-Process-Time"] = str(process_time)
    response.headers["X-API-Version"] = API_VERSION

    return response


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "message": message,
            "status_code": status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": str(request.url)
        }
    )


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Custom HTTP exception handler
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": exc.detail,
            "status_code": exc.status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": str(request.url)
        },
        headers=exc.headers
    )


@app.exception_handler(MeasurementError)
async def measurement_error_handler(request: Request, exc: MeasurementError):
    """
    Map domain error kinds onto HTTP status codes
    """
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    return _error_response(request, exc.status_code, exc.message)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected errors
    """
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
    return _error_response(request, 500, "Internal server error. Please try again later.")


# Include routers
app.include_router(measurements.router, prefix="/api/v1")
app.include_router(thresholds.router, prefix="/api/v1")


# Health check endpoints
@app.get("/health")
async def health_check():
    """
    Simple health check endpoint
    """
    service = getattr(app.state, "monitoring", None)
    return {
        "status": "healthy" if service is not None else "starting",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "environment": settings.ENVIRONMENT,
        "measurement_count": service.get_measurement_count() if service is not None else None,
        "logical_time": service.clock.height if service is not None else None
    }


# Root endpoint
@app.get("/")
async def root():
    """
    API root endpoint
    """
    return {
        "message": "Pond Measurement Monitoring Service API",
        "version": API_VERSION,
        "docs_url": "/docs",
        "health_check": "/health",
        "environment": settings.ENVIRONMENT
    }


if __name__ == "__main__":
    # Run the application
    uvicorn.run(
        "aquamonitor.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
