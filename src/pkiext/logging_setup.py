"""
structlog configuration for the harness.

Decoders and checks log structured events (`decoder.crl_decoded`,
`revocation.not_found`, ...). Test sessions call configure_structlog() once;
pytest captures the console output and shows it next to failing tests.
"""

from __future__ import annotations

import logging

import structlog


def configure_structlog(log_level: str = "WARNING") -> None:
    """Human-readable console logging, filtered at `log_level`."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.WARNING)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
