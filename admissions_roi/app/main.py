"""
Admissions ROI Estimator - FastAPI Application

This is the main entry point for the estimator API.

- Stateless: every request carries the full Assumptions record
- Rate limiting to prevent abuse (can be disabled in test mode)
- Custom exception handling so error bodies never echo request data

Run locally with:
    uvicorn admissions_roi.app.main:app --reload
"""

import logging
import os

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from admissions_roi.app.routes import health, estimates


logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def sanitize_error_detail(detail: object) -> dict:
    """
    Sanitize error details before returning them to the client.

    Args:
        detail: Error detail from exception

    Returns:
        Error detail safe for client consumption
    """
    # If detail is a dict, return as-is (assumed pre-sanitized by our code)
    if isinstance(detail, dict):
        return detail

    if isinstance(detail, str):
        return {"error": "http_error", "message": detail}

    return {
        "error": "internal_error",
        "message": "An error occurred processing your request"
    }


# Create FastAPI application
app = FastAPI(
    title="Admissions ROI Estimator",
    description="Revenue and savings estimates for an admissions call-center",
    version="0.1.0",
    debug=False
)

# Register rate limiter
app.state.limiter = estimates.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with a sanitized body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=sanitize_error_detail(exc.detail)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors without echoing the request body.

    Field values never fail validation (they coerce to 0), so this only
    fires for malformed bodies - e.g. a JSON array where an object is
    expected, or an edit without a field name.
    """
    # Extract field names only, not values
    errors = []
    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field_path,
            "type": error["type"],
            "message": error["msg"]
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": errors
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler so stack traces never reach the client."""
    logger.error("Unhandled exception on %s: %s", request.url.path, type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred"
        }
    )


# Register routers
app.include_router(health.router)
app.include_router(estimates.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Admissions ROI Estimator",
        "version": "0.1.0",
        "status": "operational"
    }


def serve():
    """
    Run the API under uvicorn (the `admissions-roi-server` script).

    Equivalent to:
        uvicorn admissions_roi.app.main:app --host 127.0.0.1 --port 8000

    HOST and PORT override the bind address.
    """
    uvicorn.run(
        app,
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "8000")),
    )


if __name__ == "__main__":
    serve()
