"""Configurable HTTP health-check responder for Starlette/FastAPI apps."""

from health_responder.config import HealthCheckConfig, ResponderSettings
from health_responder.logging import setup_logging
from health_responder.payload import DiagnosticError, format_uptime
from health_responder.responder import HealthCheckMiddleware, create_health_check

__all__ = [
    "DiagnosticError",
    "HealthCheckConfig",
    "HealthCheckMiddleware",
    "ResponderSettings",
    "create_health_check",
    "format_uptime",
    "setup_logging",
]
