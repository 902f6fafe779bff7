import logging as _logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response as StarletteResponse

from .platform.brand import BRAND_APP_DESCRIPTION, BRAND_NAME
from .platform.config import settings
from .platform.logging import setup_logging
from .platform.middleware import RateLimitMiddleware, RequestLoggingMiddleware
from .shared.errors import CatalogError, PcbValuesError, RecordNotFound, StoreError

# Set up logging
logger = setup_logging()

_is_production = bool(settings.SENTRY_DSN) or settings.DEPLOYMENT_ENV == "production"
_docs_url = None if _is_production else "/api/docs"
_openapi_url = None if _is_production else "/api/openapi.json"


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    logger.info(
        "%s API started | env=%s axes=%d version=%s",
        BRAND_NAME,
        settings.DEPLOYMENT_ENV,
        settings.AXIS_COUNT,
        settings.APP_VERSION,
    )
    yield


app = FastAPI(
    title=f"{BRAND_NAME} API",
    description=BRAND_APP_DESCRIPTION,
    version="1.0.0",
    docs_url=_docs_url,
    openapi_url=_openapi_url,
    lifespan=_lifespan,
)

_val_logger = _logging.getLogger("pcbvalues.validation")
_err_logger = _logging.getLogger("pcbvalues.errors")


def _sanitize_errors(errors: list) -> list:
    """Ensure validation error details are JSON-serializable."""

    def _json_safe(value):
        if isinstance(value, (str, int, float, bool)) or value is None:
            return value
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, dict):
            return {str(k): _json_safe(v) for k, v in value.items()}
        if isinstance(value, (list, tuple, set)):
            return [_json_safe(v) for v in value]
        return str(value)

    return [_json_safe(err) for err in errors]


def _error_body(message: str, **extra) -> dict:
    # "error" is what submission clients read; "detail" keeps FastAPI's shape.
    return {"success": False, "error": message, "detail": message, **extra}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with detail so we can diagnose 422s."""
    _val_logger.warning(
        "Validation error on %s %s: %s | body=%s",
        request.method,
        request.url.path,
        exc.errors(),
        exc.body,
    )
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": "Invalid request", "detail": _sanitize_errors(exc.errors())},
    )


@app.exception_handler(PcbValuesError)
async def domain_exception_handler(request: Request, exc: PcbValuesError):
    if isinstance(exc, RecordNotFound):
        status_code = 404
    elif isinstance(exc, (StoreError, CatalogError)):
        status_code = 500
        _err_logger.error("Server data failure on %s %s: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        status_code = 400
    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.message, type=type(exc).__name__),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": message, "detail": detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    _err_logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body("Something went wrong, please try again later."))


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security-hardening HTTP headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response: StarletteResponse = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if _is_production:
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response


app.add_middleware(SecurityHeadersMiddleware)

_cors_origins = [
    settings.FRONTEND_URL,
    "http://localhost:5173",
    "http://localhost:3000",
]
if settings.CORS_EXTRA_ORIGINS:
    _cors_origins.extend(o.strip() for o in settings.CORS_EXTRA_ORIGINS.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o for o in _cors_origins if o],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "X-Admin-Token", "X-Request-ID"],
)

app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# Sentry (optional)
if settings.SENTRY_DSN and settings.SENTRY_DSN.startswith("https://"):
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=0.1,
        integrations=[FastApiIntegration(), SqlalchemyIntegration()],
    )

from .api.v1.quiz import router as quiz_router
from .api.v1.results import router as results_router
from .api.v1.scores import router as scores_router

app.include_router(quiz_router, prefix="/api/v1")
app.include_router(results_router, prefix="/api/v1")
app.include_router(scores_router, prefix="/api/v1")


@app.get("/health")
def health_check():
    db_ok = False
    try:
        from sqlalchemy import text
        from .platform.database import SessionLocal

        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            db_ok = True
        finally:
            db.close()
    except Exception:
        _err_logger.warning("Health check could not reach the database", exc_info=True)
        db_ok = False

    return {
        "status": "healthy" if db_ok else "degraded",
        "service": "pcbvalues-api",
        "version": settings.APP_VERSION,
        "database": db_ok,
    }
