"""Structured logging setup: human-readable to stderr, optional JSON file."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog


def setup_logging(
    log_dir: str | None = None,
    log_name: str = "feedsync",
    level: str = "INFO",
) -> structlog.stdlib.BoundLogger:
    """Configure structlog on top of stdlib logging.

    stdout is left to the operator-facing diff, so console logs go to stderr.
    With *log_dir* set, every event is also written as a JSON line to
    ``<log_dir>/<log_name>.log``.
    """
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level.upper())
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
        )
    )

    handlers: list[logging.Handler] = [console_handler]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        # 10 MB per file, keep 5 backups
        file_handler = RotatingFileHandler(
            log_path / f"{log_name}.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
            )
        )
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Repeated calls (tests, CliRunner) must not stack handlers
    root_logger.handlers.clear()
    for handler in handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger(log_name)
