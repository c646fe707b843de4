"""Structured logging configuration using structlog.

The client only emits events through get_logger(); configuring output is
left to the host application, which may call configure_logging() once at
startup.

Usage:
    from cube.logging import configure_logging, get_logger

    configure_logging()

    logger = get_logger(__name__)
    logger.info("cube.upload.succeeded", object_key="a/b.png")

Never-log policy:
- API keys (masked by redact_secrets if passed by mistake)
- Raw response bodies
"""

import logging
import sys

import structlog

LOGGER_NAME = "cube"

# Event fields that may carry the `Key` header value
SECRET_KEYS = frozenset({"api_key", "key", "authorization", "headers"})
REDACTED = "[REDACTED]"


def redact_secrets(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """Mask credential-bearing fields before any renderer sees them."""
    for name in SECRET_KEYS & event_dict.keys():
        event_dict[name] = REDACTED
    return event_dict


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_format: If True, output JSON logs. If False, output console-friendly logs.
        level: Root log level.
    """
    # Shared processors for both stdlib and structlog loggers
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Request lines would otherwise duplicate our own events
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger for the given name.

    Args:
        name: Logger name (typically __name__). Defaults to "cube".

    Returns:
        A bound structlog logger.
    """
    return structlog.get_logger(name or LOGGER_NAME)
