"""Entry point for the action event logger."""

import logging
import signal
import sys

from action_logger.app import create_app
from action_logger.config import load_config
from action_logger.console import configure_logging
from action_logger.dispatcher import LogDispatcher
from action_logger.loki_client import LokiClient
from action_logger.persistence import EventStore
from action_logger.templates import TemplateRegistry

logger = logging.getLogger(__name__)


def main():
    config = load_config()
    configure_logging(config.log_level)

    def signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        sys.exit(0)

    signal.signal(signal.SIGTERM, signal_handler)

    registry = TemplateRegistry()
    registry.load_default_templates()
    if config.templates_path:
        registry.load_templates_file(config.templates_path)
    registry.freeze()

    client = LokiClient(config.loki)
    dispatcher = LogDispatcher(client)
    store = EventStore(config.data_dir, enabled=config.save_to_file)

    logger.info(
        "Initialized action event logger: loki_enabled=%s, loki_push_url=%s, "
        "loki_job=%s, save_to_file=%s, data_dir=%s",
        client.enabled, config.loki.push_url, config.loki.job,
        config.save_to_file, config.data_dir,
    )

    app = create_app(dispatcher, registry, store, loki_enabled=client.enabled)
    try:
        app.run(host=config.server_host, port=config.server_port, threaded=True)
    except KeyboardInterrupt:
        pass
    finally:
        dispatcher.shutdown()
        client.close()
        logger.info("Action event logger stopped")


if __name__ == "__main__":
    main()
