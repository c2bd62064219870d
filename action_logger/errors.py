"""Exceptions raised by the log dispatch pipeline."""


class ActionLoggerError(Exception):
    """Base class for every error raised by action_logger."""


class TemplateRegistryFrozen(ActionLoggerError):
    """A template was registered after the registry was frozen."""


class SerializationError(ActionLoggerError):
    """A log record could not be encoded as JSON."""


class PushError(ActionLoggerError):
    """Loki rejected a push or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DispatcherClosed(ActionLoggerError):
    """A record was enqueued after the dispatcher started shutting down."""
