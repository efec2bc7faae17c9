# metarmap/logging.py
"""
Structured logging for the METAR map service.

Every log line is a JSON object with consistent fields:
- timestamp: ISO 8601 (UTC)
- level: DEBUG/INFO/WARNING/ERROR/CRITICAL
- logger: Module name
- message: Event name
- **kwargs: Additional structured fields

Usage:
    from metarmap.logging import get_logger
    logger = get_logger(__name__)
    logger.warning("metar_chunk_failed", chunk_index=1, error="HTTP 503")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter: one object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "structured_data"):
            log_data.update(record.structured_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.ERROR:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class StructuredLogger:
    """
    Wrapper around a standard logger that accepts keyword fields.

    Example:
        logger = get_logger(__name__)
        logger.info("metar_batch_complete", chunks=3, failed_chunks=0)
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs):
        extra = {"structured_data": kwargs}
        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log at ERROR with the active traceback attached."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)


_configured = False


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
):
    """
    Configure the root logger once.

    Args:
        level: Log level name
        json_output: JSON lines (True) or plain text (False)
    """
    global _configured
    if _configured:
        return
    _configured = True

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if json_output:
        console_handler.setFormatter(StructuredLogFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            )
        )
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger, configuring logging from settings on first use.

    Args:
        name: Logger name (typically __name__)
    """
    if not _configured:
        from .settings import settings
        configure_logging(level=settings.log_level, json_output=settings.log_json)
    return StructuredLogger(name)


def get_ingestion_logger() -> StructuredLogger:
    """Logger for upstream fetches."""
    return get_logger("metarmap.ingestion")


def get_api_logger() -> StructuredLogger:
    """Logger for API routes."""
    return get_logger("metarmap.api")
