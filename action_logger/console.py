"""Local console emission in a key=value text layout."""

import json
import logging
import sys
from datetime import datetime, timezone

from action_logger.records import LogRecord

EVENTS_LOGGER = "action_logger.events"

_events_logger = logging.getLogger(EVENTS_LOGGER)


_BARE_CHARS = frozenset("-._/@^+")

# Field keys that would collide with the fixed line keys
_RESERVED_KEYS = frozenset(("time", "level", "msg", "logger"))


def _quote(value) -> str:
    """Quote a value unless it is made only of letters, digits and -._/@^+."""
    text = str(value)
    if text and all(c.isalnum() or c in _BARE_CHARS for c in text):
        return text
    return json.dumps(text, ensure_ascii=False)


class FieldsFormatter(logging.Formatter):
    """Render log lines as ``time="..." level=info msg="..." key=value``.

    Structured fields come from the ``fields`` extra; the ``time`` and
    ``level`` extras override the values taken from the logging record.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = getattr(record, "time", None) or datetime.fromtimestamp(
            record.created, tz=timezone.utc
        ).isoformat(timespec="seconds")
        level = getattr(record, "level", None) or record.levelname.lower()

        parts = [
            f"time={_quote(timestamp)}",
            f"level={level}",
            f"msg={_quote(record.getMessage())}",
        ]
        if record.name != EVENTS_LOGGER:
            parts.append(f"logger={record.name}")

        fields = getattr(record, "fields", None) or {}
        rendered = {}
        for key, value in fields.items():
            if key in _RESERVED_KEYS:
                key = f"fields.{key}"
            rendered[key] = value
        for key in sorted(rendered):
            parts.append(f"{key}={_quote(rendered[key])}")

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(level: str = "INFO"):
    """Send all logging to stderr through FieldsFormatter."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(FieldsFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)


def emit_local(record: LogRecord):
    """Write a LogRecord to the console with its full field set."""
    fields = {"type": record.classification}
    if record.additional_data:
        fields.update(record.additional_data)

    _events_logger.log(
        record.level.logging_level,
        "%s",
        record.message,
        extra={
            "fields": fields,
            "level": record.level.value,
            "time": record.timestamp.isoformat(timespec="seconds"),
        },
    )
