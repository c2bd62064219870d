"""Append-only JSON-lines storage for raw action events."""

import json
import os
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone


@dataclass
class ActionEvent:
    customer_id: str
    event_type: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    mac: str = ""
    ip: str = ""
    model: str = ""
    firmware: str = ""
    active_url: str = ""
    active_user: str = ""
    active_host: str = ""
    local: str = ""
    remote: str = ""
    display_local: str = ""
    display_remote: str = ""
    call_id: str = ""
    caller_id: str = ""
    called_number: str = ""
    additional_info: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


class EventStore:
    """Writes each event as one JSON line to ``<data_dir>/<customer_id>_events.json``."""

    def __init__(self, data_dir: str, enabled: bool = True):
        self._data_dir = data_dir
        self._enabled = enabled
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def path_for(self, customer_id: str) -> str:
        return os.path.join(self._data_dir, f"{customer_id}_events.json")

    def save(self, event: ActionEvent) -> bool:
        """Append event to its customer's file. Returns False if persistence is disabled.

        OSError from creating the directory or writing the file propagates.
        """
        if not self._enabled:
            return False

        line = json.dumps(event.to_dict()) + "\n"
        with self._lock:
            os.makedirs(self._data_dir, exist_ok=True)
            with open(self.path_for(event.customer_id), "a", encoding="utf-8") as f:
                f.write(line)
        return True
