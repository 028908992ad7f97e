"""
Centralized logging configuration for the ledger.

This module provides standardized logging configuration using structlog
for all components. Accounting decisions (committed mutations and rejected
calls) are logged through the helpers at the bottom of this module so the
audit trail has one consistent shape.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_accounting_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for accounting decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound with the accounting subsystem context
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="accounting",
        audit_trail=True
    )


def log_ledger_mutation(
    logger: FilteringBoundLogger,
    operation: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a committed ledger mutation with standardized format.

    Args:
        logger: Structlog logger instance
        operation: Name of the accounting operation
        context: Values computed and written by the operation
    """
    bound_logger = logger.bind(
        operation=operation,
        outcome="COMMITTED",
        audit_event="ledger_mutation"
    )

    if context:
        bound_logger = bound_logger.bind(**context)

    bound_logger.info("Ledger mutation committed")


def log_rejection(
    logger: FilteringBoundLogger,
    operation: str,
    error: Exception
) -> None:
    """
    Log a rejected accounting call with standardized format.

    Args:
        logger: Structlog logger instance
        operation: Name of the accounting operation
        error: The ledger error raised to the caller
    """
    bound_logger = logger.bind(
        operation=operation,
        outcome="REJECTED",
        error_kind=type(error).__name__,
        reason=str(error),
        audit_event="ledger_rejection"
    )

    context = getattr(error, "context", None)
    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Ledger operation rejected")
