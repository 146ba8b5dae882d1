"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.confirm import router as confirm_router
from backend.app.api.health import router as health_router
from backend.app.api.plan import router as plan_router
from backend.app.config import get_settings
from backend.app.errors import InvalidInput, TripPlannerError

logger = logging.getLogger(__name__)


async def handle_planner_error(request: Request, exc: TripPlannerError) -> JSONResponse:
    """Convert planner errors into JSON error responses."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_detail())


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 with field-level details."""
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        field_errors.setdefault(loc or "__root__", []).append(err.get("msg", "invalid value"))
    error = InvalidInput("Request failed validation", field_errors)
    return JSONResponse(status_code=error.status_code, content=error.to_detail())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Spring Break Trip Agent API",
        description="Staged trip planning with explicit per-component confirmation",
        version="0.1.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ui_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TripPlannerError, handle_planner_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)

    # Include routers
    app.include_router(health_router, prefix="/api")
    app.include_router(plan_router, prefix="/api")
    app.include_router(confirm_router, prefix="/api")

    return app


# Create app instance for uvicorn
app = create_app()
