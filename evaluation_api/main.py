"""
FastAPI application entry point.

Run with ``python -m evaluation_api.main`` or any ASGI server pointed at
``evaluation_api.main:app``.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from evaluation_api.api.deps import container
from evaluation_api.api.middleware import BodySizeLimitMiddleware
from evaluation_api.api.v1 import evaluation, health
from evaluation_api.core.config import settings
from evaluation_api.core.constants import API_PREFIX, SERVICE_VERSION
from evaluation_api.core.exceptions import (
    EvaluationServiceError,
    InternalServiceError,
    InvalidRequestError,
)
from evaluation_api.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "Evaluation service listening",
        host=settings.host,
        port=settings.port,
        env=settings.app_env,
        allowed_origins=settings.cors.origins,
    )
    container.initialize()

    yield

    logger.info("Evaluation service stopped")


app = FastAPI(
    title="Playwright Converter Evaluation API",
    description="Placeholder AI evaluations and coverage plans for converted Playwright tests",
    version=SERVICE_VERSION,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)


def _error_response(exc: EvaluationServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.add_middleware(BodySizeLimitMiddleware)

# Registered after the body guard so CORS headers also reach 413 responses
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EvaluationServiceError)
async def evaluation_service_error_handler(
    request: Request,
    exc: EvaluationServiceError,
) -> JSONResponse:
    """Render service errors as ``{"error": ..., "details": ...}``."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        error_code=exc.code,
        error_message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """A body that is not a JSON object carries no usable providerId."""
    logger.warning("Unusable request body", errors=len(exc.errors()), path=request.url.path)
    return _error_response(InvalidRequestError("providerId is required", field="providerId"))


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    logger.exception("Unhandled error", error=str(exc), path=request.url.path)
    return _error_response(InternalServiceError(str(exc)))


app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(evaluation.router, prefix=API_PREFIX, tags=["Evaluation"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "name": settings.app_name,
        "version": SERVICE_VERSION,
        "docs": "/docs" if settings.debug else "Disabled",
    }


@app.get("/api")
async def api_info() -> dict[str, Any]:
    """List the routes the desktop app talks to."""
    return {
        "name": "Playwright Converter Evaluation API",
        "version": SERVICE_VERSION,
        "prefix": API_PREFIX,
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "evaluate": f"{API_PREFIX}/evaluate",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "evaluation_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
