"""FastAPI application factory for Capture Hub."""

import logging
import time
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from capture_hub import __version__
from capture_hub.core.errors import CaptureHubError
from capture_hub.db.engine import init_db

logger = logging.getLogger(__name__)

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


async def handle_capture_hub_error(request: Request, exc: CaptureHubError) -> JSONResponse:
    """Render a CaptureHubError as the JSON error envelope."""
    if exc.is_client_error:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.reason}: {exc.message}")
    else:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code} {exc.reason}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 with the offending fields."""
    fields = sorted({".".join(str(part) for part in error["loc"][1:]) for error in exc.errors()})
    logger.info(f"{request.method} {request.url.path} -> 400 invalid request: {fields}")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "invalid_query",
            "message": "Request parameters or body are invalid",
            "fields": fields,
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Capture Hub",
        description="Webhook ingestion and browsing for scraped captures",
        version=__version__,
    )

    # Initialize database tables
    init_db()

    app.add_exception_handler(CaptureHubError, handle_capture_hub_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} ({elapsed_ms:.1f}ms)")
        return response

    # Include routers (import here to avoid circular imports)
    from capture_hub.web.routes import checkup, documents, webhooks

    app.include_router(checkup.router)
    app.include_router(webhooks.router)
    app.include_router(documents.router)

    return app
