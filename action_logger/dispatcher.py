"""Single-consumer dispatcher that ships log records to Loki in the background."""

import enum
import logging
import queue
import threading

from action_logger.console import emit_local
from action_logger.errors import DispatcherClosed, PushError, SerializationError
from action_logger.loki_client import LokiClient
from action_logger.records import LogRecord

logger = logging.getLogger(__name__)


class DispatcherState(enum.Enum):
    RUNNING = "running"
    DRAINING = "draining"
    CLOSED = "closed"


class _Handoff:
    """A record waiting for the worker, plus the event its producer blocks on."""

    __slots__ = ("record", "accepted")

    def __init__(self, record: LogRecord):
        self.record = record
        self.accepted = threading.Event()


_STOP = object()


class LogDispatcher:
    """Moves LogRecords from any number of producer threads to one worker thread.

    enqueue() writes the record to the console on the caller's thread and then
    blocks until the worker has taken it (a rendezvous hand-off). The worker
    pushes records to Loki one at a time in acceptance order. A slow push
    therefore stalls the next producer, never the current one.

    State goes RUNNING -> DRAINING (shutdown() called) -> CLOSED (worker done).
    """

    def __init__(self, client: LokiClient | None = None):
        self._client = client
        self._queue: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._state = DispatcherState.RUNNING
        self._processed = 0
        self._delivered = 0
        self._failed = 0

        self._worker = threading.Thread(
            target=self._worker_loop, name="log-dispatcher", daemon=True
        )
        self._worker.start()

    @property
    def state(self) -> DispatcherState:
        with self._lock:
            return self._state

    @property
    def processed(self) -> int:
        with self._lock:
            return self._processed

    @property
    def delivered(self) -> int:
        with self._lock:
            return self._delivered

    @property
    def failed(self) -> int:
        with self._lock:
            return self._failed

    def enqueue(self, record: LogRecord):
        """Emit record locally, then block until the worker accepts it.

        Raises DispatcherClosed once shutdown() has been called.
        """
        emit_local(record)

        handoff = _Handoff(record)
        # The state check and the put share the lock so no record can land
        # behind the stop sentinel.
        with self._lock:
            if self._state is not DispatcherState.RUNNING:
                raise DispatcherClosed(
                    f"dispatcher is {self._state.value}, record not accepted"
                )
            self._queue.put(handoff)

        handoff.accepted.wait()

    def shutdown(self, timeout: float | None = None) -> bool:
        """Stop accepting records and wait for the worker to drain.

        Returns True once the worker has exited, False if timeout expired
        first. Safe to call more than once.
        """
        with self._lock:
            if self._state is DispatcherState.RUNNING:
                self._state = DispatcherState.DRAINING
                self._queue.put(_STOP)
                logger.info("Dispatcher draining")

        self._worker.join(timeout=timeout)
        return not self._worker.is_alive()

    def _worker_loop(self):
        """Take records one at a time until the stop sentinel arrives."""
        while True:
            item = self._queue.get()
            if item is _STOP:
                break

            item.accepted.set()
            with self._lock:
                self._processed += 1

            try:
                self._process(item.record)
            except Exception:
                logger.exception("Unexpected error while dispatching log record")
                self._record_failure()

        with self._lock:
            self._state = DispatcherState.CLOSED
            processed, delivered, failed = self._processed, self._delivered, self._failed
        logger.info(
            "Dispatcher closed: processed=%d, delivered=%d, failed=%d",
            processed, delivered, failed,
        )

    def _process(self, record: LogRecord):
        """Push one record to Loki; failures are logged and the record dropped."""
        if self._client is None:
            return

        try:
            line = record.to_json()
        except SerializationError as exc:
            logger.error("Skipping log record that cannot be serialized: %s", exc)
            self._record_failure()
            return

        labels = {"job": self._client.job, "type": record.classification}
        try:
            self._client.push(labels, record.timestamp_ns, line)
        except PushError as exc:
            if self._client.enabled:
                logger.error("Failed to send log to Loki: %s", exc)
            self._record_failure()
            return

        if self._client.enabled:
            with self._lock:
                self._delivered += 1

    def _record_failure(self):
        with self._lock:
            self._failed += 1
