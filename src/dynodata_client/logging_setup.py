"""
Structured logging setup

Configures structlog on top of the standard library logging module.
"""

import logging

import structlog


def configure_logging(level: str = "info") -> None:
    """Configure structlog console output at the given level"""
    log_level = getattr(logging, level.upper())
    logging.basicConfig(format="%(message)s", level=log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.getLogger().setLevel(log_level)
