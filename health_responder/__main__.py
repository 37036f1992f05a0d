"""Run the health responder service: ``python -m health_responder``."""

from __future__ import annotations

import uvicorn

from health_responder.app import create_app
from health_responder.config import ResponderSettings


def main() -> None:
    settings = ResponderSettings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.service_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
