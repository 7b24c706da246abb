"""
Engine Logging Configuration

Provides the engine's loggers with:
- Structured single-line output
- Timing of composite calculations
- Optional key=value context per record
- Level taken from the engine settings (LOG_LEVEL)
"""

import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from saleline.core.config import get_settings


class StructuredFormatter(logging.Formatter):
    """
    Structured log formatter.

    Format: [TIMESTAMP] [LEVEL] [MODULE:FUNCTION:LINE] MESSAGE {context}

    Context is passed as extra={"user_context": {"qty": "10", ...}} and is
    rendered as space separated key=value pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        location = f"{record.module}:{record.funcName}:{record.lineno}"

        base_msg = f"[{timestamp}] [{record.levelname:8s}] [{location}] {record.getMessage()}"

        if record.exc_info:
            base_msg += f"\n{self.formatException(record.exc_info)}"

        context = getattr(record, 'user_context', None)
        if context:
            if isinstance(context, dict):
                context = " ".join(f"{key}={value}" for key, value in context.items())
            base_msg += f" {{{context}}}"

        return base_msg


class PerformanceLogger:
    """Context manager timing one engine operation."""

    def __init__(self, logger: logging.Logger, operation: str, threshold_ms: float = 50):
        self.logger = logger
        self.operation = operation
        self.threshold_ms = threshold_ms
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return False

        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.debug(f"{self.operation} failed after {self.duration_ms:.3f}ms: {exc_val}")
        elif self.duration_ms > self.threshold_ms:
            self.logger.warning(f"SLOW: {self.operation} took {self.duration_ms:.1f}ms")
        else:
            self.logger.debug(f"{self.operation} took {self.duration_ms:.3f}ms")

        # Never swallow the exception
        return False


def setup_logger(
    name: str,
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger with structured formatting and optional file output.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to the settings
        log_file: Optional file path for logs

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    if level is None:
        level = get_settings().log_level

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_perf_logger(logger: logging.Logger, operation: str, threshold_ms: float = 50) -> PerformanceLogger:
    """
    Get a performance logger context manager.

    Usage:
        with get_perf_logger(logger, "calculate", threshold_ms=20):
            result = calculator.calculate(unit_value, qty, max_discount)

    Args:
        logger: Logger instance
        operation: Operation name for logging
        threshold_ms: Milliseconds threshold for SLOW warning

    Returns:
        PerformanceLogger context manager
    """
    return PerformanceLogger(logger, operation, threshold_ms)
