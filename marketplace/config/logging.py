"""
Logging configuration.
Human-readable output in development, JSON lines in production.
"""
import json
import logging
import sys
from datetime import datetime, timezone

from .settings import get_settings

CONTEXT_FIELDS = ("user_id", "order_id", "product_id", "method", "path")


class StructuredFormatter(logging.Formatter):
    """JSON formatter for production log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Readable single-line formatter for local development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        message = f"[{timestamp}] {record.levelname:<8} {record.name}: {record.getMessage()}"

        context = [f"{field}={getattr(record, field)}" for field in CONTEXT_FIELDS if hasattr(record, field)]
        if context:
            message += f" [{', '.join(context)}]"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging() -> logging.Logger:
    """
    Configure the root logger once from settings.

    Returns:
        The application logger
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if settings.is_production else DevelopmentFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Third-party loggers are too chatty at INFO
    for noisy in ("motor", "pymongo", "httpx", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger("marketplace")
    logger.info(f"Logging configured (level={settings.log_level}, environment={settings.environment})")
    return logger
