# app/transport/http_app.py
"""
HTTP surface of the enhancement service.

Endpoints:
1. GET  /                -- liveness (status + timestamp)
2. GET  /health          -- minimal health check for load balancers
3. POST /enhance-image   -- body {"url": ...} (JSON or form-encoded)
4. GET  /enhance-image   -- ?url=... convenience form of the same call

Classified pipeline failures become 400 ENHANCEMENT_FAILED; anything that
escapes the pipeline becomes 500 INTERNAL_SERVER_ERROR. Neither leaks
stack traces or provider payloads.
"""
from __future__ import annotations

import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings, Settings
from app.core.enhancement import (
    EnhancementPipeline,
    EnhancementResult,
    ErrorKind,
    PipelineFailure,
    ValidationMode,
)
from app.infra.http_client import close_all_sessions
from app.infra.logging_config import setup_logging, get_logger
from app.infra.metadata_prober import MetadataProber
from app.infra.providers import get_enhancement_provider
from app.transport.middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    ErrorHandlingMiddleware,
    SecurityHeadersMiddleware,
)
from app.transport.schemas import EnhanceImageIn, EnhanceImageOut, ErrorOut, HealthOut

# Initialize logging first
setup_logging(
    level=settings.log_level,
    use_json=settings.is_production
)

logger = get_logger(__name__)

SERVICE_MESSAGE = "Remini Enhancement API is running"


# ============================================================================
# DEPENDENCIES
# ============================================================================

def build_pipeline(s: Settings) -> EnhancementPipeline:
    """Wire the pipeline from settings (provider + aiohttp prober)."""
    return EnhancementPipeline(
        provider=get_enhancement_provider(s),
        prober=MetadataProber(),
        mode=ValidationMode(s.validation_mode),
    )


def get_pipeline(request: Request) -> EnhancementPipeline:
    """Get pipeline from app state"""
    return request.app.state.pipeline


# ============================================================================
# LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Application lifecycle: startup and shutdown"""

    # STARTUP
    logger.info(
        f"Starting application: env={settings.app_env}, "
        f"validation_mode={settings.validation_mode}, "
        f"provider={settings.enhancement_provider}"
    )

    # Missing required settings already fail at import (validate_or_warn)
    if settings.is_production and settings.enhancement_provider == "echo":
        logger.critical("ENHANCEMENT_PROVIDER=echo is not allowed in production")
        raise RuntimeError("Echo provider in production")

    fastapi_app.state.pipeline = build_pipeline(settings)

    logger.info("Application startup complete")

    yield

    # SHUTDOWN
    logger.info("Shutting down application")

    # Close all shared HTTP sessions
    await close_all_sessions()

    logger.info("Application shutdown complete")


# ============================================================================
# CREATE APP
# ============================================================================

app = FastAPI(
    title="Remini Enhancement API",
    description="Validating proxy in front of an external image-enhancement provider",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
)

# CORS - Restrictive in production
if settings.is_production or settings.is_staging:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins if settings.allowed_origins != ["*"] else [],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
else:
    # More permissive in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production or settings.is_staging)

# Add custom middleware
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(RequestLoggingMiddleware, enabled=settings.enable_request_logging)
app.add_middleware(RequestIDMiddleware)


# ============================================================================
# RESPONSE HELPERS
# ============================================================================

def _failure_response(failure: PipelineFailure) -> JSONResponse:
    """Every classified failure is a caller-side problem: 400."""
    body = ErrorOut(error="ENHANCEMENT_FAILED", message=failure.message)
    return JSONResponse(status_code=400, content=body.model_dump())


def _result_response(result: EnhancementResult, strict: bool) -> dict:
    body = EnhanceImageOut(
        original_url=result.original_url if strict else None,
        image_data=result.enhanced_url,
        image_size=result.size_label,
    )
    return body.model_dump(exclude_none=True)


async def _read_url_from_body(request: Request) -> str | None:
    """
    Extract ``url`` from a JSON or form-encoded body.

    An empty body yields None (reported as a missing URL). Bodies that are
    not valid JSON, or whose ``url`` is not a string, are invalid input.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        value = form.get("url")
        return value if isinstance(value, str) else None

    raw = await request.body()
    if not raw.strip():
        return None

    try:
        data = json.loads(raw)
        payload = EnhanceImageIn.model_validate(data)
    except (ValueError, ValidationError) as exc:
        # pydantic's ValidationError is a ValueError; both mean unusable input
        raise PipelineFailure(
            ErrorKind.INVALID_URL,
            "Invalid URL format",
            cause=f"body: {type(exc).__name__}",
        ) from exc

    return payload.url


async def _run_enhancement(pipeline: EnhancementPipeline, url: str | None):
    try:
        result = await pipeline.enhance(url)
    except PipelineFailure as failure:
        if failure.cause:
            logger.info(
                f"Enhancement error detail: {failure.cause}",
                extra={"error_kind": failure.kind.value},
            )
        return _failure_response(failure)

    return _result_response(result, pipeline.is_strict)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(PipelineFailure)
async def pipeline_failure_handler(request: Request, exc: PipelineFailure):
    """Failures raised outside the pipeline proper (e.g. body parsing)"""
    return _failure_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed query/body parameters use the enhancement error shape"""
    return JSONResponse(
        status_code=400,
        content=ErrorOut(error="ENHANCEMENT_FAILED", message="Invalid request").model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with appropriate logging"""
    if exc.status_code >= 500:
        logger.error(f"Server error: {exc.detail}", extra={"status_code": exc.status_code})

    detail = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail.upper().replace(" ", "_"), "message": detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(f"Unhandled exception: {exc.__class__.__name__}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content=ErrorOut(
            error="INTERNAL_SERVER_ERROR",
            message="An unexpected server error occurred",
        ).model_dump(),
    )


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@app.get("/", response_model=HealthOut)
def root_public():
    """Liveness probe with the current server time."""
    return HealthOut(
        status="OK",
        message=SERVICE_MESSAGE,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


@app.get("/health")
def health():
    """
    Basic health check - PUBLIC endpoint.
    Used by load balancers, monitoring, etc.
    """
    return {"status": "healthy"}


@app.post("/enhance-image")
async def enhance_image_post(
    request: Request,
    pipeline: EnhancementPipeline = Depends(get_pipeline),
):
    url = await _read_url_from_body(request)
    return await _run_enhancement(pipeline, url)


@app.get("/enhance-image")
async def enhance_image_get(
    url: str | None = None,
    pipeline: EnhancementPipeline = Depends(get_pipeline),
):
    return await _run_enhancement(pipeline, url)
