import logging
import sys
import re
import json
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
import pytz
from core.config import settings


def _resolve_timezone(name: str):
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return pytz.utc


# Summit local time
LOCAL_TZ = _resolve_timezone(settings.LOG_TIMEZONE)


class SensitiveDataFilter(logging.Filter):
    """Filter to mask inReach reply credentials in logs"""

    PATTERNS = [
        (r"(extId=)[A-Za-z0-9-]+", r"\1***MASKED***"),
        (r"(adr=)[^&\s]+", r"\1***MASKED***"),
        (r"((?:INREACH|GARMIN_MESSAGE)_REPLY_URL=)\S+", r"\1***MASKED***"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._mask_sensitive(record.msg)

        if record.args:
            new_args = []
            for arg in record.args:
                if isinstance(arg, str):
                    new_args.append(self._mask_sensitive(arg))
                else:
                    new_args.append(arg)
            record.args = tuple(new_args)
        return True

    def _mask_sensitive(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = re.sub(pattern, replacement, text)
        return text


class LocalTimeFormatter(logging.Formatter):
    """Formatter that stamps records in the configured timezone, with structured context"""

    def converter(self, timestamp):
        return datetime.fromtimestamp(timestamp, tz=pytz.utc).astimezone(LOCAL_TZ)

    def formatTime(self, record, datefmt=None):
        dt = self.converter(record.created)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(timespec="milliseconds")

    def format(self, record):
        base_msg = super().format(record)

        if hasattr(record, "context") and record.context:
            context_str = " | ".join(f"{k}={v}" for k, v in record.context.items())
            return f"{base_msg} | {context_str}"

        return base_msg


class PerformanceFormatter(LocalTimeFormatter):
    """Appends phase timings to the message"""

    def format(self, record):
        base_msg = super().format(record)

        if hasattr(record, "duration_ms"):
            return f"{base_msg} | ⏱️ {record.duration_ms:.2f}ms"
        elif hasattr(record, "duration"):
            return f"{base_msg} | ⏱️ {record.duration:.2f}s"

        return base_msg


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Adapter to add structured context to log messages"""

    def process(self, msg, kwargs):
        context = kwargs.pop("context", {})

        if "extra" not in kwargs:
            kwargs["extra"] = {}
        kwargs["extra"]["context"] = context

        if "duration" in kwargs:
            kwargs["extra"]["duration"] = kwargs.pop("duration")
        if "duration_ms" in kwargs:
            kwargs["extra"]["duration_ms"] = kwargs.pop("duration_ms")

        return msg, kwargs


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, tz=pytz.utc)
            .astimezone(LOCAL_TZ)
            .isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }

        if hasattr(record, "context") and record.context:
            log_record["context"] = record.context

        if hasattr(record, "duration"):
            log_record["duration_seconds"] = record.duration
        if hasattr(record, "duration_ms"):
            log_record["duration_ms"] = record.duration_ms

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.LoggerAdapter:
    """
    Get a configured logger with console and rotating file handlers.
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return StructuredLoggerAdapter(logger, {})

    if log_level is None:
        log_level = settings.LOG_LEVEL

    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    console_formatter = PerformanceFormatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if settings.LOG_FORMAT.lower() == "json":
        file_formatter = JSONFormatter()
    else:
        file_formatter = PerformanceFormatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    # Logs go to stderr; stdout carries the forecast observation stream
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_formatter)
    console_handler.addFilter(SensitiveDataFilter())

    if log_file is None:
        log_file = settings.LOG_FILE

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        file_handler.addFilter(SensitiveDataFilter())

        logger.addHandler(file_handler)

    logger.addHandler(console_handler)

    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False

    return StructuredLoggerAdapter(logger, {})


def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Setup root logger configuration.

    Args:
        log_level: Log level for root logger (defaults to LOG_LEVEL)
        log_file: Path to log file (defaults to LOG_FILE)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    get_logger("root", log_level, log_file)
