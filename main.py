# ============================================================================
# MOMO HEALTH SERVICE - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire settings, probe registry, aggregator and routes
# ============================================================================
"""
MoMo Health Service Main Application

FastAPI application that:
1. Builds the probe registry from settings at startup
2. Serves the /health probe endpoints
3. Describes itself at / and answers unknown paths with a JSON 404

Usage:
    uvicorn main:app --host 0.0.0.0 --port 3001
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from __version__ import __version__, BUILD_DATE
from core.config import ServiceSettings
from core.logging import configure_logging, get_logger, log_context
from health import HealthAggregator, ProbeRegistry, ServiceInfo, create_health_router
from health.checks import register_builtin_checks
from payments import register_health_check

logger = get_logger(__name__)


def build_registry(settings: ServiceSettings) -> ProbeRegistry:
    """Register every enabled check; the caller freezes the registry."""
    registry = ProbeRegistry()
    register_builtin_checks(registry, settings.health)
    if settings.health.is_enabled("momo"):
        register_health_check(registry, settings.health)
    return registry


def create_app(
    settings: Optional[ServiceSettings] = None,
    registry: Optional[ProbeRegistry] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Service settings (read from the environment if None)
        registry: Pre-built probe registry (built from settings if None)
    """
    settings = settings or ServiceSettings.from_env()
    registry = registry if registry is not None else build_registry(settings)
    if not registry.is_frozen:
        registry.freeze()

    aggregator = HealthAggregator(registry, join_grace=settings.health.join_grace)
    service = ServiceInfo(
        name=settings.service_name,
        version=__version__,
        build_date=BUILD_DATE,
        environment=settings.environment,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(
            level=settings.log_level,
            json_output=settings.log_json,
            service=settings.service_name,
        )
        logger.info(
            f"Starting {settings.service_name} v{__version__} (Build {BUILD_DATE}) "
            f"with {len(registry)} health checks: {', '.join(registry.names()) or 'none'}"
        )
        yield
        logger.info(f"{settings.service_name} stopped")

    app = FastAPI(
        title="MoMo Health Service",
        description="Health monitoring and mobile-money payment service backend",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.aggregator = aggregator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def internal_error(request_id: str) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
            headers={"X-Request-ID": request_id},
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        start = time.perf_counter()
        with log_context(request_id=request_id, method=request.method, path=request.url.path):
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(f"Unhandled error on {request.method} {request.url.path}")
                response = internal_error(request_id)
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms",
                extra={"status_code": response.status_code, "duration_ms": round(duration_ms, 2)},
            )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={"error": "Endpoint not found", "path": request.url.path},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        request_id = getattr(request.state, "request_id", None) or uuid.uuid4().hex[:12]
        return internal_error(request_id)

    app.include_router(create_health_router(aggregator, service))

    @app.get("/")
    async def root():
        """Service descriptor."""
        return {
            "name": settings.service_name,
            "version": __version__,
            "build_date": BUILD_DATE,
            "description": "Health monitoring and mobile-money payment service backend",
            "endpoints": {
                "health": "/health",
                "liveness": "/health/live",
                "readiness": "/health/ready",
                "detailed": "/health/detailed",
            },
        }

    return app


def serve(settings: ServiceSettings) -> None:
    """Run the application under uvicorn; the request middleware does access logging."""
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        access_log=False,
    )


app = create_app()


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    serve(app.state.settings)
