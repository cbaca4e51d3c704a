import inspect
import json
import logging
import re
import sys
import time
import uuid
from contextvars import ContextVar
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Any, Optional

# Context variable for the id of the request being served
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# Patterns for secrets that should be masked in logs
SECRET_PATTERNS = [
    (re.compile(r'(api[_-]?key\s*[=:]\s*)["\']?[\w-]{20,}["\']?', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'\bgsk_[\w-]{10,}'), '***MASKED***'),
    (re.compile(r'(bearer\s+)[\w-]{20,}', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(authorization\s*[=:]\s*)["\']?[\w-]{20,}["\']?', re.IGNORECASE), r'\1***MASKED***'),
]

BASE_DIR = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = BASE_DIR / "logs"
LOG_FORMAT = "%(asctime)s - [%(correlation_id)s] - %(name)s - %(levelname)s - %(message)s"


def mask_secrets(text: str) -> str:
    """Mask sensitive values in text."""
    for pattern, replacement in SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecretMaskingFilter(logging.Filter):
    """Filter to mask secrets in log messages."""

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = mask_secrets(record.msg)
        if record.args:
            record.args = tuple(
                mask_secrets(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


class CorrelationIdFilter(logging.Filter):
    """Filter to inject correlation ID into log records."""

    def filter(self, record):
        correlation_id = correlation_id_var.get()
        record.correlation_id = correlation_id if correlation_id else "N/A"
        return True


class JsonFormatter(logging.Formatter):
    """Formatter for structured JSON logging."""

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, 'correlation_id', 'N/A'),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Structured fields passed as extra={"extra_data": {...}}
        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        return json.dumps(log_data, default=str)


class ColorFormatter(logging.Formatter):
    """Custom formatter to add colors to console output."""

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    FORMATS = {
        logging.DEBUG: grey + LOG_FORMAT + reset,
        logging.INFO: grey + LOG_FORMAT + reset,
        logging.WARNING: yellow + LOG_FORMAT + reset,
        logging.ERROR: red + LOG_FORMAT + reset,
        logging.CRITICAL: bold_red + LOG_FORMAT + reset
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt, datefmt="%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


def setup_log_file(clear_log: bool = False) -> Path:
    """
    Handles log file creation and clearing.
    """
    LOGS_DIR.mkdir(exist_ok=True)
    log_file = LOGS_DIR / "app.log"
    if clear_log and log_file.exists():
        log_file.write_text("")
    return log_file


def configure_logger(
    name: str = "docassist",
    log_level: int = logging.INFO,
    use_json: bool = False,
    mask: bool = True,
    log_to_file: bool = True,
) -> logging.Logger:
    """
    Configures the logger handlers and filters.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Prevent adding handlers multiple times
    if logger.handlers:
        return logger

    correlation_filter = CorrelationIdFilter()
    secret_filter = SecretMaskingFilter() if mask else None

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColorFormatter())
    console_handler.addFilter(correlation_filter)
    if secret_filter:
        console_handler.addFilter(secret_filter)
    logger.addHandler(console_handler)

    if log_to_file:
        # Rotate after 5MB, keep 5 backup files
        file_handler = RotatingFileHandler(
            LOGS_DIR / "app.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        if use_json:
            file_handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        else:
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.addFilter(correlation_filter)
        if secret_filter:
            file_handler.addFilter(secret_filter)
        logger.addHandler(file_handler)

    return logger


def setup_logger(
    name: str = "docassist",
    log_level: int = logging.INFO,
    clear_log: bool = False,
    use_json: bool = False,
    mask: bool = True,
) -> logging.Logger:
    """
    Sets up a logger with console (colored) and file (rotating) handlers.

    Args:
        name: Logger name
        log_level: Logging level
        clear_log: If True, clears the log file at startup
        use_json: If True, uses JSON formatter for file output
        mask: If True, masks API keys and bearer tokens in logs
    """
    setup_log_file(clear_log)
    return configure_logger(name, log_level, use_json, mask)


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Set the correlation ID for the current context, generating one if needed."""
    correlation_id = correlation_id or str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


logger = logging.getLogger(__name__)


def log_execution_time(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to log the execution time of a function.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            logger.debug(f"{func.__qualname__} finished in {time.perf_counter() - start_time:.4f}s")
            return result
        except Exception as e:
            logger.error(f"Error in {func.__qualname__} after {time.perf_counter() - start_time:.4f}s: {e}")
            raise
    return wrapper


def log_async_execution_time(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to log the execution time of a coroutine function.
    """
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"{func.__qualname__} is not a coroutine function")

    @wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        logger.info(f"Starting: {func.__qualname__}")
        try:
            result = await func(*args, **kwargs)
            logger.info(f"Finished: {func.__qualname__} in {time.perf_counter() - start_time:.4f}s")
            return result
        except Exception as e:
            logger.error(f"Error in {func.__qualname__} after {time.perf_counter() - start_time:.4f}s: {e}")
            raise
    return wrapper
