# -*- coding: utf-8 -*-
"""
Centralized logging configuration for the AVD image build.

Console output is human-readable so it can be followed in the image
builder's customization log. An optional file handler writes JSON lines
that can be collected from the build VM after the run.
"""

import json
import logging
import os
import socket
import sys
import time
from datetime import datetime, timezone
from typing import Optional

_RESERVED_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
}


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Formats log records as JSON with consistent structure including:
    - timestamp (ISO format, UTC)
    - level
    - service name
    - message
    - additional metadata passed through ``extra``
    """

    def __init__(self, service_name: str = "avd-installer"):
        super().__init__()
        self.service_name = service_name
        self.hostname = os.environ.get("COMPUTERNAME") or socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "hostname": self.hostname,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(
    service_name: str,
    log_level: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = False,
    log_file_path: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for the image build.

    Args:
        service_name: Name of the top-level logger (e.g., "avd-installer")
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to the LOG_LEVEL environment variable, then INFO.
        enable_console: Whether to enable console logging
        enable_file: Whether to enable JSON file logging
        log_file_path: Path to log file (if file logging enabled)

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level = "INFO"

    json_formatter = JSONFormatter(service_name)
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if enable_file and log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(service_name)
    logger.debug(
        "Logging initialized",
        extra={
            "log_level": log_level,
            "console_enabled": enable_console,
            "file_enabled": enable_file,
        },
    )
    return logger


def log_performance(func):
    """
    Decorator to log how long a function took and whether it raised.

    Usage:
        @log_performance
        def my_function():
            pass
    """

    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        start_time = time.time()

        try:
            result = func(*args, **kwargs)
            duration = time.time() - start_time
            logger.debug(
                f"Function {func.__name__} completed successfully",
                extra={
                    "function_name": func.__name__,
                    "duration_seconds": round(duration, 3),
                    "status": "success",
                },
            )
            return result
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"Function {func.__name__} failed",
                extra={
                    "function_name": func.__name__,
                    "duration_seconds": round(duration, 3),
                    "status": "error",
                    "error": str(e),
                },
            )
            raise

    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    wrapper.__wrapped__ = func
    return wrapper
