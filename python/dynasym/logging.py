"""
Structured logging configuration for dynasym.

This module provides centralized logging configuration using structlog.
Library code only asks for loggers; configuring output is left to the
application (the CLI calls ``configure_logging`` at startup).
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    add_timestamp: bool = True,
    colorize: Optional[bool] = None,
) -> None:
    """
    Configure structured logging for dynasym.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Output logs as JSON for machine parsing
        add_timestamp: Include timestamps in log output
        colorize: Colorize output (auto-detect if None)
    """
    logging.basicConfig(
        format="%(message)s",
        force=True,
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    if colorize is None:
        colorize = sys.stderr.isatty() and not json_output

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (defaults to module name)

    Returns:
        Configured structlog BoundLogger
    """
    return structlog.get_logger(name)


class LogContext:
    """Context manager for temporary logging context."""

    def __init__(self, **kwargs):
        self.context = kwargs

    def __enter__(self):
        bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        unbind_contextvars(*self.context.keys())


def log_module_load(module_name: str, module_base: int):
    """
    Create logging context for a module symbol load.

    Args:
        module_name: Short name of the module being loaded
        module_base: Base address of the module
    """
    return LogContext(module=module_name, module_base=f"0x{module_base:x}")
