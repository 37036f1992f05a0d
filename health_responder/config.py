"""Responder configuration.

``HealthCheckConfig`` is the immutable value a responder is built from.
``ResponderSettings`` loads the hosting service's settings from environment
variables and .env files, and can produce a ``HealthCheckConfig``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

InfoMapping = Mapping[str, Any]
InfoProducer = Callable[[], Union[InfoMapping, Awaitable[InfoMapping]]]


class HealthCheckConfig(BaseModel):
    """Settings for a single health responder.

    Accepts both the camelCase names (``statusCode``, ``includeEnv``,
    ``envKeys``) and their snake_case equivalents.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    path: str = "/health"
    info: Union[InfoMapping, InfoProducer] = Field(default_factory=dict, validate_default=True)
    status: str = "ok"
    status_code: int = Field(default=200, alias="statusCode")
    include_env: bool = Field(default=False, alias="includeEnv")
    env_keys: tuple[str, ...] = Field(default=(), alias="envKeys")

    @field_validator("info")
    @classmethod
    def freeze_info(cls, value: InfoMapping | InfoProducer) -> InfoMapping | InfoProducer:
        if callable(value):
            return value
        return MappingProxyType(dict(value))


class ResponderSettings(BaseSettings):
    """Service-level settings for hosting the responder."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── General ───────────────────────────────
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_health_requests: bool = False
    service_name: str = "health_responder"
    service_port: int = 8000

    # ── Health endpoint ───────────────────────
    health_path: str = "/health"
    health_status: str = "ok"
    health_status_code: int = 200
    health_include_env: bool = False
    health_env_keys: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def json_logs(self) -> bool:
        return self.is_production

    def to_config(self, info: InfoMapping | InfoProducer | None = None) -> HealthCheckConfig:
        """Build a ``HealthCheckConfig`` from the ``HEALTH_*`` settings."""
        env_keys = tuple(k.strip() for k in self.health_env_keys.split(",") if k.strip())
        return HealthCheckConfig(
            path=self.health_path,
            info=info if info is not None else {},
            status=self.health_status,
            status_code=self.health_status_code,
            include_env=self.health_include_env,
            env_keys=env_keys,
        )
