import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contact_api import __version__
from contact_api.api.routes import admin, contact, health
from contact_api.core import database
from contact_api.core.config import Settings
from contact_api.core.exceptions import ContactAPIError, PayloadTooLargeError, RateLimitExceeded
from contact_api.core.rate_limit import GENERAL_SCOPE, RateLimiter
from contact_api.services.email_service import NotificationSender
from contact_api.utils.logger import setup_logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


def error_response(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _api_error_response(exc: ContactAPIError) -> JSONResponse:
    headers = None
    if isinstance(exc, RateLimitExceeded) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return error_response(exc.status_code, exc.message, exc.errors, headers)


def _client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(ContactAPIError)
    async def contact_api_error_handler(request: Request, exc: ContactAPIError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path} failed: {exc!r} (cause: {exc.__cause__!r})")
        return _api_error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
        return error_response(400, "Invalid request", errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(404, "Route not found")
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    # Last resort for failures raised inside the middleware stack itself
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
        return error_response(500, "Internal server error")


def register_middleware(app: FastAPI, settings: Settings):
    # Starlette wraps in reverse order of registration: the last one added runs first.

    @app.middleware("http")
    async def unexpected_errors(request: Request, call_next):
        # innermost, so the 500 envelope still passes through CORS and security headers
        try:
            return await call_next(request)
        except Exception:
            logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
            return error_response(500, "Internal server error")

    @app.middleware("http")
    async def general_rate_limit(request: Request, call_next):
        if request.url.path.startswith(API_PREFIX + "/"):
            limiter: RateLimiter = app.state.rate_limiter
            address = _client_address(request)
            if not limiter.admit(GENERAL_SCOPE, address):
                return _api_error_response(
                    RateLimitExceeded(GENERAL_SCOPE.message, limiter.retry_after(GENERAL_SCOPE, address))
                )
        return await call_next(request)

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.MAX_BODY_BYTES:
            return _api_error_response(PayloadTooLargeError())
        return await call_next(request)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        if settings.ENVIRONMENT.lower() == "production":
            response.headers.setdefault("Strict-Transport-Security", "max-age=15552000; includeSubDomains")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f'{_client_address(request)} "{request.method} {request.url.path}" '
            f'{response.status_code} {elapsed_ms:.1f}ms "{request.headers.get("user-agent", "-")}"'
        )
        return response


def create_app(settings: Settings = None, notifier: NotificationSender = None, rate_limiter: RateLimiter = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Starting Portfolio Contact API ({settings.ENVIRONMENT})...")
        settings.validate()
        database.init_engine(settings.DATABASE_URL)
        try:
            database.check_connection()
        except Exception:
            logger.exception("❌ Storage is unreachable, refusing to start")
            database.close_engine()
            raise
        database.create_tables()
        try:
            yield
        finally:
            database.close_engine()
            logger.info("👋 Portfolio Contact API stopped")

    app = FastAPI(
        title="Portfolio Contact API",
        description="Contact form submissions with owner notifications",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limiter = rate_limiter or RateLimiter()
    app.state.notifier = notifier or NotificationSender.from_settings(settings)

    register_exception_handlers(app)
    register_middleware(app, settings)

    app.include_router(health.router, prefix=API_PREFIX)
    app.include_router(contact.router, prefix=API_PREFIX)
    app.include_router(admin.router, prefix=API_PREFIX)

    return app


app = create_app()
