"""
FastAPI Main Application

Pothole Reporter REST API.
"""
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src import __version__
from src.potholes.api.dependencies import get_database
from src.potholes.api.schemas import ErrorResponse, HealthCheck
from src.potholes.api.routers import potholes
from src.potholes.errors import ConfigurationMissing, PotholeError
from src.potholes.utils.logger import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

RETRY_AFTER_SECONDS = 30

app = FastAPI(
    title="Pothole Reporter API",
    description="Citizen pothole reports with deduplication by location",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS for the map front end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],  # Vite dev server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(potholes.router)


@app.exception_handler(PotholeError)
async def handle_pothole_error(request: Request, error: PotholeError):
    """
    Render typed failures as ErrorResponse bodies.

    Transient failures are flagged retryable and carry a Retry-After header.
    """
    logger.info(
        "api_error_response",
        path=request.url.path,
        error_code=error.error_code,
        status_code=error.http_status
    )
    body = ErrorResponse(
        error=error.error_code,
        message=error.user_message,
        retryable=error.transient,
    )
    headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if error.transient else None
    return JSONResponse(
        status_code=error.http_status,
        content=body.model_dump(),
        headers=headers,
    )


@app.get("/health", response_model=HealthCheck, tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        Health status with store connectivity check
    """
    try:
        database = get_database()
    except ConfigurationMissing:
        database_status = "unconfigured"
    else:
        database_status = "connected" if database.health_check() else "error"

    return HealthCheck(
        status="healthy" if database_status == "connected" else "degraded",
        version=__version__,
        database=database_status,
        timestamp=datetime.now(timezone.utc),
    )


@app.get("/", tags=["root"])
def root():
    """
    Root endpoint.

    Returns:
        API information
    """
    return {
        "name": "Pothole Reporter API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.potholes.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
