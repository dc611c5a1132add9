"""
Logging configuration for complink.

Everything logs under the ``complink`` logger tree. Records about a linked
file carry its path (and, for failures, the error code) as record extras, so
the formatter can line them up after the message:

    [2025-09-26 14:05:12] WARNING  sync         update failed [not_linked] | /work/kaynak/Bracket.skp
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

ROOT_LOGGER_NAME = "complink"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


# ============================================================================
# Formatter
# ============================================================================


class ComplinkFormatter(logging.Formatter):
    """Single-line records with the component file path appended."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        if self.use_colors and record.levelno in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelno]}{level}{self.RESET}"

        name = record.name.removeprefix(f"{ROOT_LOGGER_NAME}.")
        line = f"{level} {name:12} {record.getMessage()}"

        file_path = getattr(record, "file_path", None)
        if file_path:
            line = f"{line} | {file_path}"

        if self.include_timestamp:
            stamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
            line = f"[{stamp}] {line}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


# ============================================================================
# Setup
# ============================================================================


def setup_logging(
    level: LogLevel = "INFO",
    log_dir: str | Path | None = None,
    console_output: bool = True,
    file_output: bool = True,
    log_filename: str = "complink.log",
) -> None:
    """Configure the ``complink`` logger tree.

    Console output goes to stderr so CLI output on stdout stays clean. A file
    handler is added only when ``file_output`` is set and ``log_dir`` given.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    if console_output:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ComplinkFormatter(use_colors=sys.stderr.isatty()))
        handlers.append(console)

    if file_output and log_dir is not None:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(Path(log_dir) / log_filename, encoding="utf-8")
        file_handler.setFormatter(ComplinkFormatter(use_colors=False))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``complink`` tree, e.g. ``get_logger("sync")``."""
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


# ============================================================================
# Operation / Error Records
# ============================================================================


def log_operation(
    logger: logging.Logger,
    operation: str,
    file_path: str | Path | None = None,
    **details: Any,
) -> None:
    """Log a completed operation on a linked file.

    Usage:
        log_operation(logger, "Exported", path, name="Bracket")
    """
    message = operation
    if details:
        message = f"{operation} ({', '.join(f'{k}={v}' for k, v in details.items())})"
    extra = {"file_path": str(file_path)} if file_path else None
    logger.info(message, extra=extra)


def log_error(
    logger: logging.Logger,
    operation: str,
    error: Exception,
    file_path: str | Path | None = None,
    level: int | None = None,
) -> None:
    """Log a failed operation.

    ``ComplinkError`` subclasses are expected failures: they log at WARNING
    with their code and file path and without a traceback. Anything else
    logs at ERROR with the traceback attached.
    """
    code = getattr(error, "code", None)
    file_path = file_path or getattr(error, "file_path", None)
    expected = code is not None and hasattr(error, "message")

    if expected:
        message = f"{operation} failed [{code}]: {error.message}"
    else:
        message = f"{operation} failed: {type(error).__name__}: {error}"

    if level is None:
        level = logging.WARNING if expected else logging.ERROR

    exc_info = error if not expected and error.__traceback__ is not None else None
    extra = {"file_path": str(file_path), "error_code": code} if file_path else {"error_code": code}
    logger.log(level, message, exc_info=exc_info, extra=extra)


# Console-only setup until the CLI applies the configured level
setup_logging(level="INFO", console_output=True, file_output=False)
