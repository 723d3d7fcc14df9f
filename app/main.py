"""Jobly API.

REST service for companies and the jobs they post.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from app.api.routes.companies import router as companies_router
from app.api.routes.health import router as health_router
from app.api.routes.jobs import router as jobs_router
from app.api.routes.monitoring import router as monitoring_router
from app.core.config import AppEnvironment, Settings, get_settings
from app.core.database import reset_engine
from app.core.errors import JoblyError, get_status_code
from app.core.logging import setup_logging
from app.core.tracing import clear_tracing_context, set_request_id

logger = structlog.get_logger(__name__)

API_V1_PREFIX = "/api/v1"
API_CSP_POLICY = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
DOCS_CSP_POLICY = (
    "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline'; "
    "script-src 'self' 'unsafe-inline'; frame-ancestors 'none'"
)


def _request_log_context(request: Request) -> dict[str, str]:
    return {
        "path": request.url.path,
        "method": request.method,
        "query": request.url.query,
        "client_host": request.client.host if request.client else "",
    }


def _error_location(loc: tuple) -> str:
    parts = [str(part) for part in loc if part != "body"]
    return ".".join(parts) or "body"


def _is_docs_path(path: str) -> bool:
    return path.startswith("/docs") or path.startswith("/redoc") or path.startswith("/openapi.json")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context manager."""
    settings = get_settings()
    setup_logging()

    logger.info(
        "Starting Jobly API",
        app=settings.app.name,
        env=settings.app.env.value,
        version=settings.app.version,
    )
    app.state.settings = settings

    yield

    await reset_engine()
    logger.info("Jobly API stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Jobly API",
        description="Companies and the jobs they post.",
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app.env != AppEnvironment.PROD else None,
        redoc_url="/redoc" if settings.app.env != AppEnvironment.PROD else None,
        openapi_url="/openapi.json" if settings.app.env != AppEnvironment.PROD else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_allowed_origins,
        allow_credentials=settings.security.cors_allow_credentials,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )

    app.include_router(health_router, prefix=API_V1_PREFIX)
    app.include_router(monitoring_router, prefix=API_V1_PREFIX)
    app.include_router(companies_router, prefix=API_V1_PREFIX)
    app.include_router(jobs_router, prefix=API_V1_PREFIX)

    setup_telemetry(app, settings)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Propagate X-Request-ID into the log context and back to the caller."""
        request_id = set_request_id(request.headers.get("x-request-id"))
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            clear_tracing_context()

        response.headers["X-Request-ID"] = request_id
        return response

    @app.middleware("http")
    async def payload_size_guard(request: Request, call_next):
        max_request = settings.security.max_request_size_bytes
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                too_large = int(content_length) > max_request
            except ValueError:
                logger.warning(
                    "Invalid Content-Length header",
                    **_request_log_context(request),
                    content_length=content_length,
                )
                too_large = False
            if too_large:
                logger.warning(
                    "Request payload exceeds configured size limit",
                    **_request_log_context(request),
                    content_length=content_length,
                    max_request_size_bytes=max_request,
                )
                return JSONResponse(status_code=413, content={"detail": "Request payload too large"})
        return await call_next(request)

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        """Set baseline security headers for all responses."""
        response = await call_next(request)

        csp_policy = DOCS_CSP_POLICY if _is_docs_path(request.url.path) else API_CSP_POLICY
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload"
        )
        response.headers.setdefault("Content-Security-Policy", csp_policy)
        return response

    @app.exception_handler(JoblyError)
    async def domain_error_handler(request: Request, exc: JoblyError) -> JSONResponse:
        """Handle domain-specific errors."""
        status_code = get_status_code(exc)
        logger.warning(
            "Domain exception",
            **_request_log_context(request),
            status_code=status_code,
            error=exc.message,
            error_code=exc.code,
            error_details=exc.details or {},
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "detail": exc.message,
                **({"errors": exc.details} if exc.details else {}),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report malformed request bodies and parameters as 400s."""
        errors = {_error_location(err["loc"]): err["msg"] for err in exc.errors()}
        logger.warning(
            "Request validation failed",
            **_request_log_context(request),
            error_details=errors,
        )
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "Unhandled exception",
            **_request_log_context(request),
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


def setup_telemetry(app: FastAPI, settings: Settings) -> None:
    """Setup OpenTelemetry instrumentation."""
    if not settings.observability.otlp_endpoint:
        return

    resource = Resource(attributes={SERVICE_NAME: settings.observability.service_name})

    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(
        endpoint=settings.observability.otlp_endpoint,
        insecure=settings.observability.otlp_insecure,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.env == AppEnvironment.LOCAL,
        workers=1 if settings.app.env == AppEnvironment.LOCAL else settings.server.workers,
        log_level=settings.app.log_level.lower(),
    )


if __name__ == "__main__":
    run()
