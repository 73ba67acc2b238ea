"""Structured JSON logging configuration for the Machine Inspection Service."""

import logging
import logging.handlers
import json
import sys
import uuid
from datetime import datetime
from typing import List, Optional
from contextvars import ContextVar
from pathlib import Path


DEFAULT_SERVICE_NAME = "machine-inspection-service"

# Correlation ID shared by every log line of one request
correlation_id_context: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# LogRecord attributes that are not user supplied extras
RESERVED_RECORD_ATTRIBUTES = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'message', 'exc_info',
    'exc_text', 'stack_info', 'correlation_id', 'taskName'
}


class CorrelationIDFilter(logging.Filter):
    """Add correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation ID to the log record."""
        record.correlation_id = correlation_id_context.get() or "unknown"
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, 'correlation_id', 'unknown'),
        }

        if record.module:
            log_entry["module"] = record.module
        if record.funcName and record.funcName != '<module>':
            log_entry["function"] = record.funcName
        if record.lineno:
            log_entry["line"] = record.lineno

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info)
            }

        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in RESERVED_RECORD_ATTRIBUTES
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, default=str, ensure_ascii=False)
NOISY_LOGGERS = ('uvicorn.access', 'fastapi', 'httpx')


class LoggingConfig:
    """Root logger setup: JSON lines to stdout and, optionally, rotating files."""

    def __init__(self,
                 log_level: str = "INFO",
                 service_name: str = DEFAULT_SERVICE_NAME,
                 log_dir: Optional[str] = None,
                 max_file_size: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 enable_console: bool = True,
                 enable_file: bool = False):
        """
        Args:
            log_level: Level name, case-insensitive
            service_name: Value of the "service" field and log file prefix
            log_dir: Directory for log files, logs/ at the project root when unset
            max_file_size: Rotation size of each log file in bytes
            backup_count: Rotated files kept per log file
            enable_console: Write to stdout
            enable_file: Write to the service log and the errors log
        """
        self.log_level = getattr(logging, log_level.upper())
        self.service_name = service_name
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.enable_console = enable_console
        self.enable_file = enable_file
        self.log_dir = Path(log_dir) if log_dir else Path(__file__).parents[3] / "logs"

        if self.enable_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def setup_logging(self) -> None:
        """Replace the root logger handlers with the configured ones."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        root_logger.setLevel(self.log_level)

        for handler in self._build_handlers():
            handler.addFilter(CorrelationIDFilter())
            handler.setFormatter(JSONFormatter(service_name=self.service_name))
            root_logger.addHandler(handler)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    def _build_handlers(self) -> List[logging.Handler]:
        handlers: List[logging.Handler] = []

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.log_level)
            handlers.append(console_handler)

        if self.enable_file:
            handlers.append(self._rotating_handler(f"{self.service_name}.log", self.log_level))
            handlers.append(self._rotating_handler(f"{self.service_name}-errors.log", logging.ERROR))

        return handlers

    def _rotating_handler(self, filename: str, level: int) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            filename=self.log_dir / filename,
            maxBytes=self.max_file_size,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        handler.setLevel(level)
        return handler


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID for the current context."""
    correlation_id_context.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get current correlation ID."""
    return correlation_id_context.get()


def clear_correlation_id() -> None:
    """Clear correlation ID from current context."""
    correlation_id_context.set(None)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)


def setup_logging_from_settings(settings) -> LoggingConfig:
    """Setup logging from application settings."""
    config = LoggingConfig(
        log_level=settings.log_level,
        service_name=settings.service_name,
        log_dir=settings.log_dir,
        max_file_size=settings.log_max_file_size,
        backup_count=settings.log_backup_count,
        enable_console=settings.log_enable_console,
        enable_file=settings.log_enable_file
    )

    config.setup_logging()
    return config


def log_with_extra(logger: logging.Logger, level: int, message: str, **extra) -> None:
    """Log a message with extra fields."""
    logger.log(level, message, extra=extra)


def log_request(logger: logging.Logger, method: str, path: str, **extra) -> None:
    """Log an HTTP request."""
    log_with_extra(
        logger,
        logging.INFO,
        f"HTTP Request: {method} {path}",
        request_method=method,
        request_path=path,
        **extra
    )


def log_response(logger: logging.Logger, method: str, path: str, status_code: int, duration_ms: float, **extra) -> None:
    """Log an HTTP response."""
    if status_code >= 500:
        level = logging.ERROR
    elif status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO

    log_with_extra(
        logger,
        level,
        f"HTTP Response: {method} {path} -> {status_code} ({duration_ms:.2f}ms)",
        request_method=method,
        request_path=path,
        response_status=status_code,
        response_duration_ms=round(duration_ms, 2),
        **extra
    )


def log_score_calculation(logger: logging.Logger, report_id: str, overall_score: int, overall_rating: str, **extra) -> None:
    """Log the outcome of a score calculation."""
    log_with_extra(
        logger,
        logging.INFO,
        f"Scores calculated for report {report_id}: {overall_score}% ({overall_rating})",
        report_id=report_id,
        overall_score=overall_score,
        overall_rating=overall_rating,
        **extra
    )


def log_business_rule_violation(logger: logging.Logger, rule: str, details: str, **extra) -> None:
    """Log a business rule violation."""
    log_with_extra(
        logger,
        logging.WARNING,
        f"Business rule violation: {rule} - {details}",
        business_rule=rule,
        violation_details=details,
        **extra
    )
