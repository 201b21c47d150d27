"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from grammarfix.api.routes import check
from grammarfix.config import settings
from grammarfix.models.envelope import ApiError, error_response
from grammarfix.services.languagetool_client import get_circuit_breaker

logger = logging.getLogger(__name__)

# Configure logging format based on dev_mode
if not settings.dev_mode:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}',
    )
else:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


app = FastAPI(
    title="grammarfix API",
    description="Grammar checking with deterministic auto-correction and span review",
    version="0.1.0",
    openapi_url="/api/v1/openapi.json",
    docs_url="/docs" if settings.dev_mode else None,
    redoc_url="/redoc" if settings.dev_mode else None,
)


# ---------------------------------------------------------------------------
# Global exception handlers
# ---------------------------------------------------------------------------

_STATUS_CODES = {
    404: "NOT_FOUND",
    409: "STALE_SESSION",
    413: "TEXT_TOO_LONG",
}


@app.exception_handler(HTTPException)
async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(ApiError(code=code, message=str(exc.detail))),
    )


@app.exception_handler(RequestValidationError)
async def _validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        ApiError(
            code="VALIDATION_ERROR",
            message=err.get("msg", "Invalid value"),
            field=".".join(str(p) for p in err.get("loc", ())[1:]) or None,
        )
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content=error_response(*errors))


@app.exception_handler(Exception)
async def _global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=True)
    detail = str(exc) if settings.dev_mode else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=error_response(ApiError(code="INTERNAL_ERROR", message=detail)),
    )


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)


# ---------------------------------------------------------------------------
# Routers: all under /api/v1/
# ---------------------------------------------------------------------------

app.include_router(check.router, prefix="/api/v1/check", tags=["check"])


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health_check() -> dict:
    """Liveness check: reports the grammar service circuit state."""
    return {
        "status": "healthy",
        "services": {
            "languagetool": get_circuit_breaker().state.value,
        },
    }


@app.get("/api/v1/version")
async def version() -> dict:
    """Return build / version metadata."""
    return {
        "version": app.version,
        "title": app.title,
        "api_prefix": "/api/v1",
    }
