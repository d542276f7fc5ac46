"""structlog setup for the daemon."""

import logging

import structlog


def configure_logging(level: str = "info", json: bool = False) -> None:
    """Configure structlog for the process.

    Request-scoped values bound with structlog.contextvars (request_id,
    user_id) are merged into every entry.
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=True,
    )
