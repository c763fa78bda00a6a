"""
Centralized logging configuration for the Blueprint Service.

Provides a single structured logger used by the API and the worker:
- Structured entries carrying service, environment and correlation id
- Colored console output for development, JSON for production
- Optional JSON file sink
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from blueprint.core.config import config
from blueprint.core.context import get_trace_id

LOG_LEVEL = config.log_level.upper()
LOG_FORMAT = config.log_format.lower()


class StructuredLogger:
    """
    Logger with structured metadata and correlation ids.
    Every entry is routed through the root Python logger.
    """

    def __init__(self, service_name: Optional[str] = None):
        self.service_name = service_name or config.service_name
        self.environment = config.environment
        self._setup_logging()

    def _setup_logging(self):
        """Configure Python logging with handlers"""
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

        if config.log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            if LOG_FORMAT == "json":
                console_handler.setFormatter(JSONFormatter(self.service_name))
            else:
                console_handler.setFormatter(ConsoleFormatter())
            root.addHandler(console_handler)

        if config.log_to_file:
            log_dir = os.path.dirname(config.log_file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.FileHandler(config.log_file_path)
            file_handler.setFormatter(JSONFormatter(self.service_name))  # Always JSON for files
            root.addHandler(file_handler)

    def _build_log_entry(
        self,
        level: str,
        message: str,
        correlation_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Build structured log entry"""
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "service": self.service_name,
            "environment": self.environment,
            "message": message,
            "correlationId": correlation_id or get_trace_id(),
        }

        if metadata:
            entry["metadata"] = metadata

        return entry

    def _log(
        self,
        level: str,
        message: str,
        correlation_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ):
        log_entry = self._build_log_entry(level, message, correlation_id, metadata)
        log_method = getattr(logging.getLogger(), level.lower())

        if LOG_FORMAT == "json":
            log_method(json.dumps(log_entry, default=str), exc_info=exc_info)
        else:
            # 'message' would clash with the LogRecord attribute
            extra_data = {k: v for k, v in log_entry.items() if k != "message"}
            log_method(message, extra=extra_data, exc_info=exc_info)

    def debug(self, message: str, correlation_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        self._log("DEBUG", message, correlation_id, metadata)

    def info(self, message: str, correlation_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        self._log("INFO", message, correlation_id, metadata)

    def warning(self, message: str, correlation_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        self._log("WARNING", message, correlation_id, metadata)

    def error(
        self,
        message: str,
        correlation_id: Optional[str] = None,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Error level logging; exceptions are summarized into metadata"""
        metadata = dict(metadata or {})

        if error is not None:
            if isinstance(error, Exception):
                metadata["error"] = {
                    "type": type(error).__name__,
                    "message": str(error),
                }
            else:
                metadata["error"] = {"message": str(error)}

        self._log("ERROR", message, correlation_id, metadata, exc_info=isinstance(error, Exception))

    def critical(self, message: str, correlation_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        self._log("CRITICAL", message, correlation_id, metadata)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    RESERVED = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "taskName",
    }

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record):
        message = record.getMessage()

        # Entries built by StructuredLogger in JSON mode are already serialized
        if message.startswith("{"):
            return message

        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": message,
        }

        for key, value in record.__dict__.items():
            if key not in self.RESERVED:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{color}[{timestamp}] {record.levelname}{reset} - {record.getMessage()}"

        metadata = getattr(record, "metadata", None)
        if metadata:
            line = f"{line} {json.dumps(metadata, default=str)}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"

        return line


# Create and export the logger instance
logger = StructuredLogger()
