"""Structured logging for the order engine.

structlog renders through the stdlib logging handler so library loggers
(ccxt, aiosqlite) share the same output. Per-cycle context is carried by
structlog.contextvars, which follows asyncio tasks spawned inside a cycle.
"""

import logging
import os

import structlog


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structlog with JSON or console rendering.

    LOG_FORMAT=json selects machine-readable output; anything else
    (default "console") uses the human-readable dev renderer.
    """
    log_format = os.environ.get("LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # ccxt logs every HTTP round-trip at DEBUG
    logging.getLogger("ccxt").setLevel(logging.WARNING)


def bind_cycle_context(user_id: str, review_result_id: str) -> None:
    """Attach the owning user and decision cycle to every log line in this context."""
    structlog.contextvars.bind_contextvars(
        user_id=user_id,
        review_result_id=review_result_id,
    )


def clear_cycle_context() -> None:
    """Drop the per-cycle context bound by bind_cycle_context()."""
    structlog.contextvars.unbind_contextvars("user_id", "review_result_id")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
