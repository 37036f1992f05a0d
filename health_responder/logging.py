"""structlog setup for services hosting the health responder.

Orchestrators poll the health path every few seconds, so the responder's
``health_check_served`` events (and uvicorn's access lines) are dropped
unless ``log_health_requests`` is set. Failures are always logged; in JSON
mode the exception attached to ``health_check_failed`` is rendered into the
``exception`` field, since production responses leave the stack out.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

ROUTINE_EVENTS = frozenset({"health_check_served"})


def setup_logging(
    *,
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str = "health_responder",
    log_health_requests: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: If True, emit JSON; otherwise coloured console output.
        service_name: Added to every log line as ``service``.
        log_health_requests: Keep one log line per answered health request.
    """
    processors = build_processors(
        service_name=service_name,
        json_logs=json_logs,
        log_health_requests=log_health_requests,
    )

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    if not log_health_requests:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def build_processors(
    *, service_name: str, json_logs: bool, log_health_requests: bool
) -> list[structlog.types.Processor]:
    """Processors shared by structlog and stdlib records, before rendering."""
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if not log_health_requests:
        processors.append(drop_routine_events)
    processors.append(_add_service_name(service_name))
    if json_logs:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.processors.format_exc_info)
    return processors


def drop_routine_events(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    if event_dict.get("event") in ROUTINE_EVENTS:
        raise structlog.DropEvent
    return event_dict


def _add_service_name(service_name: str) -> structlog.types.Processor:
    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["service"] = service_name
        return event_dict

    return processor


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog bound logger."""
    return structlog.get_logger(name)
