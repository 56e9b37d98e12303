"""structlog setup for the CLI."""
import logging

import structlog


def configure_logging(production: bool = False, level: int | None = None) -> None:
    """Configure structlog: JSON lines in production, readable console output otherwise."""
    if production:
        renderer = structlog.processors.JSONRenderer()
        default_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        default_level = logging.WARNING
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level if level is not None else default_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
