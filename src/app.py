"""Main FastAPI application module.

This module initializes the FastAPI application, registers all route handlers
and turns every LMS error into the failure envelope.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging_config import setup_logging
from config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
    UPLOAD_DIR,
    UPLOAD_URL_PREFIX,
)
from core.dependencies import get_store
from core.exceptions import LMSError, RouteNotFoundError, ValidationError
from schemas.common import describe_errors, error_envelope
from api.routes import (
    assignments,
    auth,
    courses,
    dashboard,
    enrollments,
    materials,
    results,
    users,
)

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="University LMS API",
    description="Data-access service for courses, enrollments, assignments, materials and results.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(users.router)
app.include_router(enrollments.router)
app.include_router(assignments.router)
app.include_router(materials.router)
app.include_router(results.router)
app.include_router(dashboard.router)

# Serve stored uploads back under /uploads/<fileName>
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")


def _error_response(exc: LMSError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.message, exc.code),
    )


@app.exception_handler(LMSError)
async def handle_lms_error(request: Request, exc: LMSError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(ValidationError(describe_errors(exc.errors())))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unmatched paths and methods answer like any other missing endpoint."""
    if exc.status_code in (404, 405):
        return _error_response(RouteNotFoundError(request.method, request.url.path))
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail), "HTTPError"),
    )


@app.on_event("startup")
def startup_tasks() -> None:
    """Build (and seed) the shared entity store before the first request."""
    get_store()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returns API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "University LMS API",
        "version": "1.0.0",
        "description": "Data-access service for courses, enrollments, assignments, materials and results.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Serving University LMS API at {server_url}")
    print(f"API docs: {server_url}/docs")

    # reload=True enables auto-reload on code changes
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
