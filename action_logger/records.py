"""Log record model and builder."""

import json
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from action_logger.errors import SerializationError
from action_logger.templates import TemplateRegistry

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Severity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warning"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class LogRecord:
    """One timestamped log event.

    message, classification, level and timestamp are fixed at creation;
    additional fields can still be appended with add_field() until the record
    is handed to the dispatcher.
    """

    __slots__ = ("_message", "_classification", "_level", "_timestamp", "additional_data")

    def __init__(
        self,
        message: str,
        classification: str,
        level: Severity,
        additional_data: dict[str, Any] | None = None,
        timestamp: datetime | None = None,
    ):
        self._message = message
        self._classification = classification
        self._level = level
        self._timestamp = timestamp or datetime.now(timezone.utc)
        self.additional_data = additional_data

    @property
    def message(self) -> str:
        return self._message

    @property
    def classification(self) -> str:
        return self._classification

    @property
    def level(self) -> Severity:
        return self._level

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def timestamp_ns(self) -> int:
        """Timestamp as integer nanoseconds since the Unix epoch."""
        ts = self._timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return (ts - _EPOCH) // timedelta(microseconds=1) * 1000

    def add_field(self, key: str, value: Any):
        """Attach one more field. Not safe for concurrent callers on the same record."""
        if self.additional_data is None:
            self.additional_data = {}
        self.additional_data[key] = value

    def to_dict(self) -> dict:
        """Plain dict with empty values left out."""
        data: dict[str, Any] = {}
        if self._message:
            data["message"] = self._message
        if self._classification:
            data["type"] = self._classification
        data["level"] = self._level.value
        if self.additional_data:
            data["additional_data"] = self.additional_data
        data["timestamp"] = self._timestamp.isoformat()
        return data

    def to_json(self) -> str:
        """Serialize to compact JSON with sorted keys, so equal records encode identically."""
        try:
            return json.dumps(
                self.to_dict(),
                separators=(",", ":"),
                sort_keys=True,
                allow_nan=False,
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"failed to serialize log record: {exc}") from exc

    def __repr__(self) -> str:
        return (
            f"LogRecord(classification={self._classification!r}, level={self._level.name}, "
            f"message={self._message!r}, timestamp={self._timestamp.isoformat()})"
        )


def build_log(
    registry: TemplateRegistry,
    classification: str,
    template_name: str,
    severity: Severity,
    fields: dict[str, Any] | None,
    *args,
) -> LogRecord:
    """Create a LogRecord whose message is the rendered template.

    The classification is upper-cased and the current UTC time is stamped.
    """
    return LogRecord(
        message=registry.resolve(template_name, *args),
        classification=classification.upper(),
        level=severity,
        additional_data=fields,
        timestamp=datetime.now(timezone.utc),
    )
