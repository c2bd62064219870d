"""HTTP endpoint that records phone action events and logs them."""

import logging

from flask import Flask, jsonify, request

from action_logger.dispatcher import LogDispatcher
from action_logger.errors import DispatcherClosed
from action_logger.persistence import ActionEvent, EventStore
from action_logger.records import Severity, build_log
from action_logger.templates import TemplateRegistry

logger = logging.getLogger(__name__)

LOG_CLASSIFICATION = "PHONE_ACTION"

# Query parameter -> ActionEvent attribute
STANDARD_FIELDS = {
    "mac": "mac",
    "ip": "ip",
    "model": "model",
    "firmware": "firmware",
    "active_url": "active_url",
    "active_user": "active_user",
    "active_host": "active_host",
    "local": "local",
    "remote": "remote",
    "display_local": "display_local",
    "display_remote": "display_remote",
    "call_id": "call_id",
    "callerID": "caller_id",
    "calledNumber": "called_number",
}


def event_from_request(customer_id: str, event_type: str, args) -> ActionEvent:
    """Build an ActionEvent from path values and query parameters.

    Unrecognised query parameters are kept in additional_info; a repeated
    parameter keeps its last value.
    """
    kwargs = {attr: args.get(param, "") for param, attr in STANDARD_FIELDS.items()}
    additional = {
        k: values[-1]
        for k, values in args.to_dict(flat=False).items()
        if k not in STANDARD_FIELDS
    }
    return ActionEvent(
        customer_id=customer_id,
        event_type=event_type,
        additional_info=additional,
        **kwargs,
    )


def event_fields(event: ActionEvent) -> dict:
    """Flatten an event into log record fields."""
    fields = event.to_dict()
    fields.pop("additional_info")
    for key, value in event.additional_info.items():
        fields[f"extra_{key}"] = value
    return fields


def create_app(
    dispatcher: LogDispatcher,
    registry: TemplateRegistry,
    store: EventStore,
    loki_enabled: bool = False,
) -> Flask:
    """Flask application factory."""
    app = Flask(__name__)

    def send(record):
        try:
            dispatcher.enqueue(record)
        except DispatcherClosed as exc:
            logger.warning("Log record dropped: %s", exc)

    @app.route("/health")
    def health():
        return jsonify({
            "status": "healthy",
            "loki_enabled": loki_enabled,
            "dispatcher": dispatcher.state.value,
        })

    @app.route("/action/<customer_id>/<event_type>")
    def action_event(customer_id, event_type):
        event = event_from_request(customer_id, event_type, request.args)

        if store.enabled:
            try:
                store.save(event)
            except OSError as exc:
                logger.error("Failed to save action event to file: %s", exc)
                fields = event_fields(event)
                fields["error"] = str(exc)
                send(build_log(
                    registry,
                    LOG_CLASSIFICATION,
                    "ActionSaveFailed",
                    Severity.ERROR,
                    fields,
                    event.customer_id,
                    event.event_type,
                ))
                return "Error saving event", 500
        else:
            logger.debug(
                "SAVE_TO_FILE is disabled; event for customer %s (%s) not written to disk",
                event.customer_id, event.event_type,
            )

        send(build_log(
            registry,
            LOG_CLASSIFICATION,
            "ActionRecorded",
            Severity.INFO,
            event_fields(event),
            event.event_type,
            event.customer_id,
        ))
        return "Event recorded successfully"

    return app
