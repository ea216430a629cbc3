"""loguru sinks for the upload server and the extract command.

uvicorn and starlette log through the standard library; their records
are forwarded to loguru so access lines, pipeline warnings and server
startup messages come out of the same sinks.
"""

import logging
import sys
from typing import Any

from loguru import logger

from usersays.config.models import LoggingConfig


class _InterceptHandler(logging.Handler):
    """Route standard library logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller frame (skip logging internals)
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(config: LoggingConfig) -> None:
    """Replace loguru's sinks with the ones named in ``config``.

    Installs a stderr sink (colored console lines or one JSON object per
    record), an optional rotating, gzip-compressed file sink, and takes over
    the uvicorn loggers.
    """
    logger.remove()

    if config.format == "json":
        fmt = "{message}"
        serialize = True
    else:
        fmt = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        )
        serialize = False

    logger.add(
        sys.stderr,
        format=fmt,
        level=config.level,
        serialize=serialize,
        colorize=config.format == "console",
    )

    if config.file:
        logger.add(
            config.file,
            format=fmt,
            level=config.level,
            serialize=serialize,
            rotation=config.rotation,
            retention=config.retention,
            compression="gz",
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    # uvicorn installs its own handlers; hand its records to the root logger
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    logger.debug("Logging configured: level={} format={}", config.level, config.format)


def get_logger(name: str) -> Any:
    """Return the loguru logger with ``name`` bound into the record extras.

    Used for the access log so request lines can be told apart from
    pipeline messages in JSON output.
    """
    return logger.bind(name=name)
