"""Health payload assembly.

Collection never raises: it returns either the payload mapping or a
``DiagnosticError`` describing what went wrong.
"""

from __future__ import annotations

import inspect
import traceback
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union

from health_responder.config import InfoMapping, InfoProducer
from health_responder.runtime import EnvironmentReader, RuntimeInfoProvider

HealthPayload = dict[str, Any]


@dataclass(frozen=True)
class StaticInfo:
    values: InfoMapping

    async def resolve(self) -> InfoMapping:
        return self.values


@dataclass(frozen=True)
class DynamicInfo:
    producer: InfoProducer

    async def resolve(self) -> InfoMapping:
        result = self.producer()
        if inspect.isawaitable(result):
            result = await result
        return result


InfoSource = Union[StaticInfo, DynamicInfo]


def as_info_source(info: InfoMapping | InfoProducer) -> InfoSource:
    """Classify configured info as a static mapping or a producer."""
    if callable(info):
        return DynamicInfo(info)
    return StaticInfo(info)


@dataclass(frozen=True)
class DiagnosticError:
    """A failure while collecting diagnostics."""

    message: str
    trace: str
    exc: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_exception(cls, exc: BaseException) -> DiagnosticError:
        return cls(
            message=str(exc),
            trace="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            exc=exc,
        )


def format_uptime(seconds: float) -> str:
    """Render seconds as ``"<h>h <m>m <s>s"``, truncating each unit.

    >>> format_uptime(3661)
    '1h 1m 1s'
    """
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}h {minutes}m {secs}s"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and ``Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def select_env(environ: EnvironmentReader, keys: Sequence[str]) -> dict[str, str]:
    """Values for ``keys`` in order, skipping keys with no value."""
    selected: dict[str, str] = {}
    for key in keys:
        value = environ.get(key)
        if value is not None:
            selected[key] = value
    return selected


async def collect_health(
    *,
    status: str,
    info: InfoSource,
    runtime: RuntimeInfoProvider,
    environ: EnvironmentReader,
    include_env: bool = False,
    env_keys: Sequence[str] = (),
) -> HealthPayload | DiagnosticError:
    """Assemble the health payload for one request."""
    try:
        uptime = runtime.uptime()
        custom = await info.resolve()
        if custom is None:
            custom = {}
        elif not isinstance(custom, Mapping):
            raise TypeError(
                f"health info must be a mapping, got {type(custom).__name__}"
            )

        payload: HealthPayload = {
            "status": status,
            "timestamp": utc_timestamp(),
            "uptime": format_uptime(uptime),
            "pid": runtime.pid(),
            "memoryUsage": runtime.memory_usage(),
            "cpuUsage": runtime.cpu_usage(),
            "pythonVersion": runtime.version(),
            "platform": runtime.platform(),
            "architecture": runtime.architecture(),
            **custom,
        }

        if include_env and env_keys:
            payload["env"] = select_env(environ, env_keys)
    except Exception as exc:
        return DiagnosticError.from_exception(exc)

    return payload


def error_payload(error: DiagnosticError, *, include_stack: bool) -> dict[str, Any]:
    body: dict[str, Any] = {
        "status": "error",
        "message": "Health check failed",
        "error": error.message,
    }
    if include_stack:
        body["stack"] = error.trace
    body["timestamp"] = utc_timestamp()
    return body
