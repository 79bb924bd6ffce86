"""Structured logging configuration with stdlib bridge.

Configures structlog with:
- JSON output for production
- ConsoleRenderer for dev mode (human-readable, colored)
- Stdlib bridge so third-party logs (google-genai, uvicorn, httpx) share the format
- Correlation ID injection from asgi-correlation-id context var
- studio_id / feature binding for everything logged while a feature runs,
  gateway logs included
- Payload scrubbing: image and audio bytes, oversized strings and the API key
  never reach the log stream
"""

import logging
import logging.config
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from asgi_correlation_id.context import correlation_id


def add_correlation_id(logger, method, event_dict):
    """Inject correlation_id from asgi-correlation-id context into every log entry."""
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


MAX_FIELD_CHARS = 512
SECRET_FIELDS = frozenset({"api_key", "gemini_api_key", "authorization"})


def scrub_payloads(logger, method, event_dict):
    for key, value in event_dict.items():
        if key in SECRET_FIELDS:
            event_dict[key] = "***"
        elif isinstance(value, bytes | bytearray):
            event_dict[key] = f"<{len(value)} bytes>"
        elif isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
            event_dict[key] = f"{value[:MAX_FIELD_CHARS]}... <{len(value)} chars>"
    return event_dict


@contextmanager
def feature_context(studio_id: str, feature: str) -> Iterator[None]:
    """Bind studio_id and feature to every log line emitted inside the block."""
    with structlog.contextvars.bound_contextvars(studio_id=studio_id, feature=feature):
        yield


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog with stdlib bridge.

    Call this BEFORE any other lens imports: structlog caches the processor
    chain on first use.

    Args:
        log_level: Root log level ("DEBUG", "INFO", "WARNING", "ERROR")
        json_logs: True for JSON output (production), False for ConsoleRenderer (dev)
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        scrub_payloads,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["default"], "level": log_level},
        "loggers": {
            "uvicorn.access": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
            "google_genai": {"level": "WARNING"},
        },
    })

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
