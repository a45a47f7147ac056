"""Structured logging setup for applications embedding the risk engine.

The engine modules only ever call ``structlog.get_logger``; wiring the
processor chain is left to whoever owns the process.
"""

from __future__ import annotations

import logging

import structlog

from portfolio_risk.config import get_settings


def configure_logging(level: str | int | None = None, json_logs: bool = False) -> None:
    """Set up structlog with console (or JSON) output filtered at *level*.

    *level* defaults to the configured ``LOG_LEVEL`` (``RISK_LOG_LEVEL``).
    """
    if level is None:
        level = get_settings().LOG_LEVEL
    if isinstance(level, str):
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            raise ValueError(f"Unknown log level: {level}")
    else:
        numeric_level = level

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
