"""
Structured Logging
fieldserde

JSON-structured logging for serializer operations: a console handler with
``key=value`` context, plus an optional rotating JSON-lines file handler.
"""

import json
import logging
import logging.handlers
from pathlib import Path


class JsonFormatter(logging.Formatter):
    """Formats log records as single-line JSON for file output."""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)
        return json.dumps(log_entry, default=str)


class StructuredLogger:
    """Structured logger bound to a component and, optionally, a serializer name."""

    def __init__(self, component: str, serializer: str = None, level: int | str = logging.INFO):
        self.component = component
        self.serializer = serializer
        self._json_file_handler = None

        self.logger = logging.getLogger(f"fieldserde.{component}")

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ))
            self.logger.addHandler(handler)

        # the logger is shared per component; the newest setting applies
        self.logger.setLevel(level)

    def setup_file_logging(
        self,
        log_dir: str = "logs",
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
    ):
        """Add a rotating JSON file handler alongside the stream handler."""
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        target = (log_path / f"{self.component}.log").resolve()

        # one file handler per target, however many serializers share the logger
        for existing in self.logger.handlers:
            if isinstance(existing, logging.handlers.RotatingFileHandler) and \
                    Path(existing.baseFilename) == target:
                self._json_file_handler = existing
                return

        file_handler = logging.handlers.RotatingFileHandler(
            target,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonFormatter())
        self.logger.addHandler(file_handler)
        self._json_file_handler = file_handler

    def _format(self, message: str, **kwargs) -> str:
        """Format message with context."""
        context = {
            "component": self.component,
            "serializer": self.serializer,
            **kwargs
        }
        context_str = " ".join(f"{k}={v}" for k, v in context.items() if v is not None)
        return f"{message} [{context_str}]"

    def _log(self, level: int, message: str, **kwargs):
        """Build a record carrying extra fields for the JSON formatter."""
        if not self.logger.isEnabledFor(level):
            return
        formatted = self._format(message, **kwargs)
        extra_fields = {
            "component": self.component,
            "serializer": self.serializer,
            **{k: v for k, v in kwargs.items() if v is not None},
        }
        record = self.logger.makeRecord(
            self.logger.name, level, "(unknown)", 0, formatted, (), None
        )
        record.extra_fields = extra_fields
        self.logger.handle(record)

    def serialized(self, mode: str, many: bool, items: int, errors: int, duration: float):
        """Record one finished top-level serialize() call at DEBUG."""
        self._log(
            logging.DEBUG,
            "Serialized",
            mode=mode,
            many=many,
            items=items,
            errors=errors,
            duration_ms=round(duration * 1000, 3),
        )
