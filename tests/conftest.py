"""Shared fixtures: fake process collaborators and a host app factory."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from health_responder.config import HealthCheckConfig, ResponderSettings
from health_responder.responder import create_health_check
from health_responder.runtime import MappingEnvironment

DOWNSTREAM_BODY = "downstream"


class FakeRuntime:
    def __init__(self, uptime: float = 3661.7, pid: int = 4242) -> None:
        self._uptime = uptime
        self._pid = pid

    def uptime(self) -> float:
        return self._uptime

    def pid(self) -> int:
        return self._pid

    def memory_usage(self) -> dict[str, int]:
        return {"rss": 100, "heapTotal": 80, "heapUsed": 60, "external": 5}

    def cpu_usage(self) -> dict[str, int]:
        return {"user": 1500, "system": 300}

    def version(self) -> str:
        return "3.12.1"

    def platform(self) -> str:
        return "linux"

    def architecture(self) -> str:
        return "x86_64"


async def _downstream(request: Request) -> PlainTextResponse:
    request.app.state.downstream_calls += 1
    return PlainTextResponse(DOWNSTREAM_BODY)


def build_client(
    config: HealthCheckConfig | None = None,
    *,
    runtime=None,
    environ=None,
    settings: ResponderSettings | None = None,
) -> TestClient:
    """A Starlette host with the handler as middleware and a catch-all route."""
    handler = create_health_check(
        config,
        runtime=runtime or FakeRuntime(),
        environ=environ or MappingEnvironment({}),
        settings=settings or ResponderSettings(_env_file=None, environment="development"),
    )
    app = Starlette(
        routes=[
            Route(
                "/{path:path}",
                _downstream,
                methods=["GET", "POST", "PUT", "DELETE", "HEAD"],
            )
        ],
        middleware=[Middleware(BaseHTTPMiddleware, dispatch=handler)],
    )
    app.state.downstream_calls = 0
    return TestClient(app)


@pytest.fixture
def fake_runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def client() -> TestClient:
    return build_client()


@pytest.fixture
def make_client():
    return build_client
