"""FastAPI application factory with the health responder mounted."""

from __future__ import annotations

from fastapi import FastAPI

from health_responder.config import HealthCheckConfig, ResponderSettings
from health_responder.logging import setup_logging
from health_responder.middleware import RequestContextMiddleware
from health_responder.responder import HealthCheckMiddleware
from health_responder.runtime import EnvironmentReader, RuntimeInfoProvider


def create_app(
    settings: ResponderSettings | None = None,
    config: HealthCheckConfig | None = None,
    *,
    runtime: RuntimeInfoProvider | None = None,
    environ: EnvironmentReader | None = None,
) -> FastAPI:
    settings = settings or ResponderSettings()
    config = config or settings.to_config()

    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.service_name,
        log_health_requests=settings.log_health_requests,
    )

    application = FastAPI(
        title=settings.service_name,
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Added last runs first: request IDs are bound before the health check
    application.add_middleware(
        HealthCheckMiddleware,
        config=config,
        runtime=runtime,
        environ=environ,
        settings=settings,
    )
    application.add_middleware(RequestContextMiddleware)

    @application.get("/", include_in_schema=False)
    async def index() -> dict[str, str]:
        return {"service": settings.service_name, "health": config.path}

    return application
