"""
Logging Configuration and Utilities

Structured logging for the approval core: JSON or key/value output,
bound context per logger, and an execution-time decorator.
"""

import sys
import logging
import logging.handlers
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pathlib import Path
from contextvars import ContextVar
from functools import wraps

import structlog
from pythonjsonlogger import jsonlogger

from .config import settings

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
actor_id: ContextVar[Optional[str]] = ContextVar("actor_id", default=None)


class RequestContextProcessor:
    """Add request context to log records"""

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict["request_id"] = req_id

        uid = actor_id.get()
        if uid:
            event_dict["actor_id"] = uid

        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
        event_dict["service"] = "hotelops-approvals"
        event_dict["environment"] = settings.ENVIRONMENT

        return event_dict


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        req_id = request_id.get()
        if req_id:
            log_record["request_id"] = req_id

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


class LoggingConfig:
    """Centralized logging configuration"""

    @staticmethod
    def configure_structured_logging():
        """Configure structured logging with structlog"""

        processors = [
            RequestContextProcessor(),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if settings.logging.LOG_FORMAT == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.processors.KeyValueRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging():
        """Configure the hotelops logger hierarchy"""

        level = getattr(logging, settings.logging.LOG_LEVEL)
        package_logger = logging.getLogger("hotelops")
        package_logger.setLevel(level)

        # Replace only our own handlers; the host application owns the root logger
        for handler in list(package_logger.handlers):
            if getattr(handler, "_hotelops_handler", False):
                package_logger.removeHandler(handler)

        if settings.logging.LOG_FORMAT == "json":
            formatter = CustomJsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        console_handler._hotelops_handler = True
        package_logger.addHandler(console_handler)

        if settings.logging.LOG_FILE:
            log_path = Path(settings.logging.LOG_FILE)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            file_handler._hotelops_handler = True
            package_logger.addHandler(file_handler)

        LoggingConfig._configure_library_loggers()

    @staticmethod
    def _configure_library_loggers():
        """Configure logging for external libraries"""

        if settings.logging.LOG_SQL_QUERIES:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
        else:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class LoggerAdapter:
    """Enhanced logger adapter with context management"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._context: Dict[str, Any] = {}

    def add_context(self, **kwargs):
        """Add context to all log messages"""
        self._context.update(kwargs)
        return self

    def _log(self, level: int, message: str, *args, **kwargs):
        """Internal log method with context"""
        extra = dict(self._context)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra

        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs):
        self._log(logging.CRITICAL, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """
    Get configured logger instance.

    Args:
        name: Logger name (defaults to caller's module)

    Returns:
        Enhanced logger adapter
    """
    if name is None:
        import inspect
        frame = inspect.currentframe()
        caller_frame = frame.f_back
        name = caller_frame.f_globals.get("__name__", "hotelops")

    logger = logging.getLogger(name)
    return LoggerAdapter(logger)


def log_execution_time(logger_name: Optional[str] = None):
    """
    Decorator to log function execution time.

    Args:
        logger_name: Custom logger name
    """
    def decorator(func):
        logger = get_logger(logger_name or func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = datetime.now(timezone.utc)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = (datetime.now(timezone.utc) - start_time).total_seconds()
                logger.error("Function execution failed", extra={
                    "function": func.__name__,
                    "execution_time": execution_time,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                })
                raise

            execution_time = (datetime.now(timezone.utc) - start_time).total_seconds()
            logger.debug("Function executed successfully", extra={
                "function": func.__name__,
                "execution_time": execution_time,
            })
            return result

        return wrapper

    return decorator


def setup_logging():
    """Initialize logging configuration"""
    try:
        if settings.logging.ENABLE_STRUCTURED_LOGGING:
            LoggingConfig.configure_structured_logging()

        LoggingConfig.configure_standard_logging()

        logger = get_logger(__name__)
        logger.debug("Logging system initialized", extra={
            "log_level": settings.logging.LOG_LEVEL,
            "log_format": settings.logging.LOG_FORMAT,
            "structured_logging": settings.logging.ENABLE_STRUCTURED_LOGGING,
        })

    except Exception as e:
        print(f"Failed to initialize logging: {e}")
        # Fallback to basic console logging
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


# Initialize logging when module is imported
setup_logging()

__all__ = [
    "get_logger",
    "setup_logging",
    "log_execution_time",
    "LoggerAdapter",
    "LoggingConfig",
    "request_id",
    "actor_id",
]
