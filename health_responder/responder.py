"""The health responder.

``create_health_check`` returns a handler with the Starlette ``dispatch``
signature: ``GET`` requests whose path equals the configured path are
answered with a JSON health payload, anything else is handed to
``call_next`` untouched.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from health_responder.config import HealthCheckConfig, ResponderSettings
from health_responder.logging import get_logger
from health_responder.payload import (
    DiagnosticError,
    as_info_source,
    collect_health,
    error_payload,
)
from health_responder.runtime import (
    EnvironmentReader,
    OsEnvironment,
    ProcessRuntimeInfo,
    RuntimeInfoProvider,
)

HealthHandler = Callable[[Request, RequestResponseEndpoint], Awaitable[Response]]


def create_health_check(
    config: HealthCheckConfig | None = None,
    *,
    runtime: RuntimeInfoProvider | None = None,
    environ: EnvironmentReader | None = None,
    settings: ResponderSettings | None = None,
) -> HealthHandler:
    """Build a health request handler.

    Args:
        config: Endpoint configuration; defaults to ``HealthCheckConfig()``.
        runtime: Source of process metrics; defaults to the current process.
        environ: Source of ``env`` values; defaults to ``os.environ``.
        settings: Decides whether error responses carry a stack trace
            (omitted in production).

    Returns:
        An async ``(request, call_next) -> Response`` callable.
    """
    config = config or HealthCheckConfig()
    runtime = runtime or ProcessRuntimeInfo()
    environ = environ or OsEnvironment()
    settings = settings or ResponderSettings()
    info = as_info_source(config.info)
    log = get_logger(__name__)

    def failure(error: DiagnosticError) -> Response:
        log.warning(
            "health_check_failed",
            path=config.path,
            error=error.message,
            exc_info=error.exc,
        )
        return JSONResponse(
            error_payload(error, include_stack=not settings.is_production),
            status_code=500,
        )

    async def handle(request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method != "GET" or _mounted_path(request) != config.path:
            return await call_next(request)

        outcome = await collect_health(
            status=config.status,
            info=info,
            runtime=runtime,
            environ=environ,
            include_env=config.include_env,
            env_keys=config.env_keys,
        )
        if isinstance(outcome, DiagnosticError):
            return failure(outcome)

        try:
            response = JSONResponse(outcome, status_code=config.status_code)
        except (TypeError, ValueError) as exc:
            # Custom info that JSON cannot encode
            return failure(DiagnosticError.from_exception(exc))

        log.debug("health_check_served", path=config.path, status=outcome["status"])
        return response

    return handle


def _mounted_path(request: Request) -> str:
    """Request path relative to the mount point (``root_path``)."""
    return request.url.path.removeprefix(request.scope.get("root_path", ""))


class HealthCheckMiddleware(BaseHTTPMiddleware):
    """Mounts a health responder in front of an ASGI app.

    ``app.add_middleware(HealthCheckMiddleware, config=HealthCheckConfig(...))``
    """

    def __init__(
        self,
        app: ASGIApp,
        config: HealthCheckConfig | None = None,
        *,
        runtime: RuntimeInfoProvider | None = None,
        environ: EnvironmentReader | None = None,
        settings: ResponderSettings | None = None,
    ) -> None:
        super().__init__(
            app,
            dispatch=create_health_check(
                config, runtime=runtime, environ=environ, settings=settings
            ),
        )
