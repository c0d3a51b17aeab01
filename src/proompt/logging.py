from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

    from proompt.exceptions import ProomptError

_LOGGING_CONFIGURED = False


def setup_logging(filename: str | Path | None = None, level: int = logging.WARNING) -> structlog.BoundLogger:
    """Set up structured logging for the proompt package.

    The first call configures logging; later calls only reconfigure when a log
    file is given, so ``--log-file`` can redirect the module-level logger.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        level: Minimum level to emit. Defaults to WARNING; a log file records INFO.

    Returns:
        A structlog logger instance configured for the proompt package.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if not _LOGGING_CONFIGURED or filename:
        handlers: list[logging.Handler] = []
        if filename:
            handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
            level = min(level, logging.INFO)
        else:
            handlers.append(logging.StreamHandler(sys.stderr))

        logging.basicConfig(
            level=level,
            handlers=handlers,
            format="%(message)s",
            force=True,
        )
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )
        _LOGGING_CONFIGURED = True

    return structlog.get_logger("proompt")


def emit_diagnostic(error: ProomptError) -> None:
    """Write an error's diagnostic line to stderr and record it in the log.

    The stderr line is part of the tool's user-facing contract and is never
    written to the output stream.

    Args:
        error: the recovered or fatal error to report.
    """
    print(error.message, file=sys.stderr)  # noqa: T201
    logger.info("diagnostic", kind=str(error.kind), message=error.message)


logger = setup_logging()
